"""Movie schemas for catalog responses and updates."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator

from moviecatalog.models.movie import ImageType
from moviecatalog.schema.base import ORMModel


class MovieImageRead(ORMModel):
    """Image metadata returned with a movie; bytes are served separately."""
    id: int
    image_type: ImageType
    content_type: str
    size_bytes: int


class MovieRead(ORMModel):
    """Canonical movie record."""
    id: int
    external_id: int
    imdb_id: str | None = None
    title: str
    year: str | None = None
    director: str | None = None
    genre: str | None = None
    plot: str | None = None
    release_date: date | None = None
    watched: bool
    rating: int | None = None
    similar_title: str | None = None
    images: list[MovieImageRead] = []


class MoviePageRead(ORMModel):
    """A zero-based page of movies."""
    items: list[MovieRead] = Field(default_factory=list)
    total: int
    page: int
    size: int


class MovieCreate(BaseModel):
    """Payload for adding a movie by title."""
    title: str = Field(min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        stripped = " ".join(value.split())
        if not stripped:
            raise ValueError("title cannot be blank")
        return stripped


class WatchedUpdate(BaseModel):
    """Payload for toggling the watched flag."""
    watched: bool


class RatingUpdate(BaseModel):
    """Payload for rating a movie."""
    rating: int = Field(ge=1, le=5)
