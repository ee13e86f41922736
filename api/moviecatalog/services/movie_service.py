"""Movie catalog services: provider aggregation, mutations, and listings.

Invariants:
- The primary provider is mandatory; any failure there aborts the add.
- The secondary provider is best-effort; its failures never reach callers.
- A record written during an add that later fails verification is deleted
  again, and the original error is what the caller sees.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from moviecatalog.core.errors import (
    CatalogError,
    DuplicateError,
    NotFoundError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from moviecatalog.ingestion import PRIMARY_SOURCE, SECONDARY_SOURCE, get_connector
from moviecatalog.ingestion.base import BaseConnector, PrimaryRecord, SecondaryRecord
from moviecatalog.ingestion.observability import ProviderMonitor, provider_monitor
from moviecatalog.models.movie import ImageType, Movie, MovieImage
from moviecatalog.services.catalog_store import CatalogStore
from moviecatalog.services.merge import merge_records
from moviecatalog.utils.redaction import describe_error

MIN_RATING = 1
MAX_RATING = 5
MAX_PAGE_SIZE = 100

logger = logging.getLogger("moviecatalog.services.movies")


@dataclass(slots=True)
class MoviePage:
    """One page of catalog records with the filtered total."""
    items: list[Movie] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = 20


def normalize_title(value: str | None) -> str:
    """Collapse whitespace; dedupe comparisons are case-insensitive in storage."""
    return " ".join((value or "").split())


def _primary_failure(exc: Exception, title: str) -> CatalogError:
    if isinstance(exc, CatalogError):
        return type(exc)(f"Primary lookup failed for {title!r}: {exc.message}", source=exc.source)
    return ProviderError(f"Primary lookup failed for {title!r}: {describe_error(exc)}", source=PRIMARY_SOURCE)


async def _fetch_sources(
    title: str, primary: BaseConnector, secondary: BaseConnector, monitor: ProviderMonitor
) -> tuple[PrimaryRecord, SecondaryRecord | None]:
    """Query both providers concurrently; only the primary may fail the call.

    A primary failure cancels the pending secondary lookup.
    """
    context = {"title": title}
    primary_task = asyncio.create_task(
        monitor.track(primary.source_name, "fetch", lambda: primary.fetch(title), context=context)
    )
    secondary_task = asyncio.create_task(
        monitor.track(secondary.source_name, "fetch", lambda: secondary.fetch(title), context=context)
    )
    try:
        primary_result = await primary_task
    except BaseException as exc:
        secondary_task.cancel()
        await asyncio.gather(secondary_task, return_exceptions=True)
        if not isinstance(exc, Exception):
            primary_task.cancel()
            raise
        logger.error("Primary source %s failed for %r: %s", primary.source_name, title, describe_error(exc))
        raise _primary_failure(exc, title) from exc

    try:
        secondary_result = await secondary_task
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Continuing with primary data only; secondary source %s failed for %r: %s",
            secondary.source_name,
            title,
            describe_error(exc),
        )
        return primary_result, None
    return primary_result, secondary_result


async def _compensate(store: CatalogStore, movie_id: int) -> None:
    """Best-effort removal of a record written by a failed add."""
    try:
        await store.delete(movie_id)
        logger.info("Compensated failed add by deleting movie %s", movie_id)
    except Exception as exc:  # noqa: BLE001
        logger.error("Compensating delete of movie %s failed: %s", movie_id, describe_error(exc))


async def add_movie(
    store: CatalogStore,
    title: str,
    *,
    primary: BaseConnector | None = None,
    secondary: BaseConnector | None = None,
    monitor: ProviderMonitor | None = None,
) -> Movie:
    """Fetch, merge, and persist a movie by title; returns the verified record."""
    lookup = normalize_title(title)
    if not lookup:
        raise ValidationError("Title is required")
    primary = primary or get_connector(PRIMARY_SOURCE)
    secondary = secondary or get_connector(SECONDARY_SOURCE)
    monitor = monitor or provider_monitor

    logger.info("Adding movie %r", lookup)
    if await store.find_by_title(lookup) is not None:
        logger.warning("Movie already cataloged: %r", lookup)
        raise DuplicateError(f"Movie already exists: {lookup!r}")

    primary_record, secondary_record = await _fetch_sources(lookup, primary, secondary, monitor)

    movie = merge_records(primary_record, secondary_record)
    logger.info(
        "Merged %r: year=%s director=%s external_id=%s genre=%s images=%d",
        movie.title,
        movie.year,
        movie.director,
        movie.external_id,
        movie.genre,
        len(movie.images),
    )
    if movie.external_id is None:
        raise ValidationError(f"External id missing after merge for {lookup!r}")
    if not normalize_title(movie.title):
        raise ValidationError(f"Title missing after merge for {lookup!r}")

    saved = await store.save(movie)
    try:
        verified = await store.get(saved.id)
        if verified is None:
            raise PersistenceError(f"Movie {saved.id} not found after save")
    except Exception:
        await _compensate(store, saved.id)
        raise
    logger.info("Verified movie %s (%r) in catalog", verified.id, verified.title)
    return verified


async def get_movie(store: CatalogStore, movie_id: int) -> Movie | None:
    return await store.get(movie_id)


async def list_movies(
    store: CatalogStore,
    *,
    page: int = 0,
    size: int = 20,
    watched: bool | None = None,
    director: str | None = None,
    year: str | None = None,
) -> MoviePage:
    """List movies by page (zero-based); filters apply before pagination."""
    _validate_page(page, size)
    items, total = await store.page(
        offset=page * size, limit=size, watched=watched, director=director, year=year
    )
    return MoviePage(items=items, total=total, page=page, size=size)


async def list_titles(store: CatalogStore, *, page: int = 0, size: int = 20) -> list[str]:
    _validate_page(page, size)
    return await store.titles(offset=page * size, limit=size)


async def set_watched(store: CatalogStore, movie_id: int, watched: bool) -> Movie:
    """Toggle the watched flag of an existing movie."""
    movie = await store.update(movie_id, watched=watched)
    if movie is None:
        raise NotFoundError(f"Movie {movie_id} not found")
    return movie


async def set_rating(store: CatalogStore, movie_id: int, rating: int) -> Movie:
    """Rate an existing movie from 1 to 5."""
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    movie = await store.update(movie_id, rating=rating)
    if movie is None:
        raise NotFoundError(f"Movie {movie_id} not found")
    return movie


async def delete_movie(store: CatalogStore, movie_id: int) -> None:
    """Delete a movie together with its images."""
    if not await store.delete(movie_id):
        raise NotFoundError(f"Movie {movie_id} not found")


async def get_movie_image(store: CatalogStore, movie_id: int, image_type: ImageType) -> MovieImage | None:
    return await store.get_image(movie_id, image_type)


def _validate_page(page: int, size: int) -> None:
    if page < 0:
        raise ValidationError("Page must be zero or greater")
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")
