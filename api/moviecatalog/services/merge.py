"""Reconciliation of provider records into one canonical movie.

Precedence:
- title, year, external id (and plot, release date, reference id) come from
  the primary record only.
- director comes from the primary when non-empty, otherwise the secondary.
- genre, similar title, and images come from the secondary only.
- watched always starts False.
"""

from __future__ import annotations

from moviecatalog.core.errors import ValidationError
from moviecatalog.ingestion.base import PrimaryRecord, SecondaryRecord
from moviecatalog.models.movie import Movie, MovieImage


def _non_empty(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def merge_records(primary: PrimaryRecord | None, secondary: SecondaryRecord | None = None) -> Movie:
    """Combine a primary and optional secondary record; performs no I/O."""
    if primary is None:
        raise ValidationError("Primary record is required to merge")

    movie = Movie(
        external_id=primary.external_id,
        imdb_id=primary.imdb_id or None,
        title=primary.title,
        year=primary.year,
        director=_non_empty(primary.director),
        plot=primary.plot,
        release_date=primary.release_date,
        watched=False,
        rating=None,
        genre=None,
        similar_title=None,
    )
    if secondary is None:
        return movie

    if movie.director is None:
        movie.director = _non_empty(secondary.director)
    movie.genre = secondary.genre
    movie.similar_title = secondary.similar_title
    for image in secondary.images:
        movie.attach_image(
            MovieImage(image_type=image.image_type, payload=image.payload, content_type=image.content_type)
        )
    return movie
