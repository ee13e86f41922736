"""movie catalog schema

Revision ID: 20261018_000001
Revises: 
Create Date: 2026-10-18 00:00:01.000000
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_000001"
down_revision = None
branch_labels = None
depends_on = None


image_type_enum = sa.Enum("POSTER", "BACKDROP", name="image_type")


def upgrade() -> None:
    """Create movies, their images, and the case-insensitive title index."""
    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.BigInteger(), nullable=False),
        sa.Column("imdb_id", sa.String(length=32), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("year", sa.String(length=20), nullable=True),
        sa.Column("director", sa.String(length=255), nullable=True),
        sa.Column("genre", sa.String(length=255), nullable=True),
        sa.Column("plot", sa.Text(), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("watched", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("similar_title", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_movies_rating_range"),
    )
    op.create_index("uq_movies_title_ci", "movies", [sa.text("lower(title)")], unique=True)

    op.create_table(
        "movie_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "movie_id",
            sa.Integer(),
            sa.ForeignKey("movies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image_type", image_type_enum, nullable=False),
        sa.Column("payload", sa.LargeBinary(), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_movie_images_movie_id", "movie_images", ["movie_id"], unique=False)


def downgrade() -> None:
    """Drop catalog tables and enum types."""
    op.drop_index("ix_movie_images_movie_id", table_name="movie_images")
    op.drop_table("movie_images")
    op.drop_index("uq_movies_title_ci", table_name="movies")
    op.drop_table("movies")
    image_type_enum.drop(op.get_bind(), checkfirst=True)
