"""Provider records and the connector interface for metadata sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from moviecatalog.models.movie import ImageType


@dataclass(slots=True)
class PrimaryRecord:
    """Authoritative fields returned by the primary provider."""
    title: str
    year: str | None
    director: str | None
    external_id: int
    imdb_id: str
    plot: str | None = None
    release_date: date | None = None


@dataclass(slots=True)
class FetchedImage:
    """Artwork bytes downloaded from the secondary provider CDN."""
    image_type: ImageType
    payload: bytes
    content_type: str


@dataclass(slots=True)
class SecondaryRecord:
    """Supplementary fields returned by the secondary provider."""
    source_id: str
    title: str | None
    year: str | None = None
    director: str | None = None
    genre: str | None = None
    similar_title: str | None = None
    images: list[FetchedImage] = field(default_factory=list)


class BaseConnector:
    """Abstract connector interface for external metadata sources."""
    source_name: str

    def parse_title(self, title: str) -> str:
        """Normalize a lookup title before it is sent upstream."""
        return " ".join(title.split())

    async def fetch(self, title: str) -> Any:
        """Fetch a normalized record by title."""
        raise NotImplementedError
