import pytest

from main import app


async def _verify_statuses(client, attempts, headers_for):
    statuses = []
    for i in range(attempts):
        resp = await client.post("/api/bucketlist/verify-password", headers=headers_for(i))
        statuses.append(resp.status_code)
    return statuses


@pytest.mark.asyncio
async def test_verify_password_is_rate_limited_per_client(client):
    app.state.disable_rate_limits = False

    statuses = await _verify_statuses(client, 12, lambda i: {"X-Master-Pass": "nope"})

    assert statuses == [401] * 10 + [429] * 2


@pytest.mark.asyncio
async def test_forwarded_for_header_does_not_reset_quota(client):
    app.state.disable_rate_limits = False

    statuses = await _verify_statuses(
        client,
        15,
        lambda i: {"X-Master-Pass": "nope", "X-Forwarded-For": f"10.0.0.{i}"},
    )

    assert statuses == [401] * 10 + [429] * 5
