"""Landing page content and the question gate."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from routers.rate_limit import rate_limit
from services.love_config import (
    check_gate_answers,
    days_together,
    get_love_config,
    public_content,
    to_json,
)

router = APIRouter()


class GateRequest(BaseModel):
    answers: List[Optional[Union[int, str]]] = Field(default_factory=list)


class RelationshipResponse(BaseModel):
    start_date: date
    days_together: int


@router.get("/")
async def get_content():
    return public_content(get_love_config())


@router.get("/relationship", response_model=RelationshipResponse)
async def relationship():
    start = get_love_config().relationship.start_date
    return RelationshipResponse(start_date=start, days_together=days_together(start))


@router.post("/gate")
async def check_gate(
    request: GateRequest,
    _rate_limit: None = Depends(rate_limit("content_gate", limit=20, window_seconds=300)),
):
    gate = get_love_config().gate
    if not check_gate_answers(gate, request.answers):
        raise HTTPException(status_code=401, detail=gate.error_message)
    return {"passed": True}


@router.get("/export")
async def export_config():
    """Effective configuration as a JSON download."""
    return Response(
        content=to_json(get_love_config()),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="love-config.json"'},
    )
