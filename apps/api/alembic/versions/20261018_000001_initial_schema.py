"""create initial schema

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18 00:00:01.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "gallery_photos",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("caption", sa.String(length=160), nullable=True),
        sa.Column("original_file_name", sa.String(length=256), nullable=True),
        sa.Column("file_path", sa.String(length=512), nullable=False),
        sa.Column("thumbnail_path", sa.String(length=512), nullable=True),
        sa.Column("album", sa.String(length=80), nullable=True),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.Column("favorited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gallery_photos_album"), "gallery_photos", ["album"], unique=False)

    op.create_table(
        "gallery_albums",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "bucket_list_entries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=160), nullable=False),
        sa.Column("description", sa.String(length=2000), nullable=True),
        sa.Column("requires_photo", sa.Boolean(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bucket_list_entries_completed"), "bucket_list_entries", ["completed"], unique=False)

    op.create_table(
        "bucket_list_media",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("entry_id", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(length=512), nullable=False),
        sa.Column("thumbnail_path", sa.String(length=512), nullable=True),
        sa.Column("original_file_name", sa.String(length=256), nullable=True),
        sa.Column("content_type", sa.String(length=128), nullable=True),
        sa.Column("is_video", sa.Boolean(), nullable=False),
        sa.Column("is_in_gallery", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["entry_id"], ["bucket_list_entries.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bucket_list_media_entry_id"), "bucket_list_media", ["entry_id"], unique=False)

    op.create_table(
        "travel_countries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("country_code", sa.String(length=3), nullable=False),
        sa.Column("country_name", sa.String(length=120), nullable=False),
        sa.Column("is_visited", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("visited_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("country_code"),
    )

    op.create_table(
        "watchlist_movies",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("imdb_id", sa.String(length=24), nullable=False),
        sa.Column("title", sa.String(length=240), nullable=False),
        sa.Column("year", sa.String(length=12), nullable=True),
        sa.Column("poster_url", sa.String(length=500), nullable=True),
        sa.Column("type", sa.String(length=40), nullable=True),
        sa.Column("plot", sa.String(length=2000), nullable=True),
        sa.Column("watched", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("watched_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("imdb_id"),
    )


def downgrade() -> None:
    op.drop_table("watchlist_movies")
    op.drop_table("travel_countries")
    op.drop_index(op.f("ix_bucket_list_media_entry_id"), table_name="bucket_list_media")
    op.drop_table("bucket_list_media")
    op.drop_index(op.f("ix_bucket_list_entries_completed"), table_name="bucket_list_entries")
    op.drop_table("bucket_list_entries")
    op.drop_table("gallery_albums")
    op.drop_index(op.f("ix_gallery_photos_album"), table_name="gallery_photos")
    op.drop_table("gallery_photos")
