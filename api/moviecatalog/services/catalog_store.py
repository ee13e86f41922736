"""Durable catalog storage.

Every method runs in its own session and transaction, so a write made here
is never rolled back (or corrupted) by a caller's unrelated session.
Storage faults surface as ``PersistenceError``; a unique-title violation
surfaces as ``DuplicateError``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from moviecatalog.core.errors import DuplicateError, PersistenceError
from moviecatalog.models.movie import ImageType, Movie, MovieImage

logger = logging.getLogger("moviecatalog.services.catalog_store")

TITLE_INDEX_NAME = "uq_movies_title_ci"


def _is_unique_violation(exc: IntegrityError) -> bool:
    detail = str(exc.orig or exc).lower()
    return TITLE_INDEX_NAME in detail or "unique" in detail or "duplicate key" in detail


class CatalogStore:
    """Keyed movie storage with case-insensitive title lookup."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_title(self, title: str) -> Movie | None:
        """Case-insensitive title lookup."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Movie).where(func.lower(Movie.title) == func.lower(title.strip()))
                )
                return result.scalars().first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Title lookup failed: {exc}") from exc

    async def get(self, movie_id: int) -> Movie | None:
        try:
            async with self._session_factory() as session:
                return await session.get(Movie, movie_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Read of movie {movie_id} failed: {exc}") from exc

    async def save(self, movie: Movie) -> Movie:
        """Insert a movie and its attached images in one transaction."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(movie)
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateError(f"Movie already exists: {movie.title!r}") from exc
            raise PersistenceError(f"Failed to save movie {movie.title!r}: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to save movie {movie.title!r}: {exc}") from exc
        logger.info("Saved movie %s (%r) with %d image(s)", movie.id, movie.title, len(movie.images))
        return movie

    async def update(self, movie_id: int, **values: Any) -> Movie | None:
        """Apply field updates atomically; None when the movie does not exist."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    movie = await session.get(Movie, movie_id)
                    if movie is None:
                        return None
                    for field_name, value in values.items():
                        setattr(movie, field_name, value)
                return movie
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to update movie {movie_id}: {exc}") from exc

    async def delete(self, movie_id: int) -> bool:
        """Delete a movie and every image it owns in one transaction."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(MovieImage).where(MovieImage.movie_id == movie_id))
                    result = await session.execute(delete(Movie).where(Movie.id == movie_id))
                    deleted = (result.rowcount or 0) > 0
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to delete movie {movie_id}: {exc}") from exc
        if deleted:
            logger.info("Deleted movie %s and its images", movie_id)
        return deleted

    async def page(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        watched: bool | None = None,
        director: str | None = None,
        year: str | None = None,
    ) -> tuple[list[Movie], int]:
        """Return one page of movies ordered by id, plus the filtered total."""
        filters = []
        if watched is not None:
            filters.append(Movie.watched == watched)
        if director:
            filters.append(func.lower(Movie.director) == func.lower(director.strip()))
        if year:
            filters.append(Movie.year == year.strip())
        try:
            async with self._session_factory() as session:
                total = await session.scalar(select(func.count()).select_from(Movie).where(*filters))
                result = await session.execute(
                    select(Movie).where(*filters).order_by(Movie.id).offset(offset).limit(limit)
                )
                return list(result.scalars().all()), int(total or 0)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to list movies: {exc}") from exc

    async def titles(self, *, offset: int = 0, limit: int = 20) -> list[str]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Movie.title).order_by(Movie.id).offset(offset).limit(limit)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to list titles: {exc}") from exc

    async def get_image(self, movie_id: int, image_type: ImageType) -> MovieImage | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(MovieImage)
                    .where(MovieImage.movie_id == movie_id, MovieImage.image_type == image_type)
                    .order_by(MovieImage.id)
                )
                return result.scalars().first()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to read {image_type.value} for movie {movie_id}: {exc}") from exc

    async def count(self, *, title: str | None = None) -> int:
        stmt = select(func.count()).select_from(Movie)
        if title is not None:
            stmt = stmt.where(func.lower(Movie.title) == func.lower(title.strip()))
        try:
            async with self._session_factory() as session:
                return int(await session.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to count movies: {exc}") from exc
