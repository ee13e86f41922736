"""Movie catalog endpoints: add by title, browse, update, delete."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from moviecatalog.api.deps import get_store
from moviecatalog.models.movie import ImageType
from moviecatalog.schema.movie import (
    MovieCreate,
    MoviePageRead,
    MovieRead,
    RatingUpdate,
    WatchedUpdate,
)
from moviecatalog.services import movie_service
from moviecatalog.services.catalog_store import CatalogStore

router = APIRouter()


@router.get("", response_model=MoviePageRead)
async def list_movies(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=movie_service.MAX_PAGE_SIZE),
    watched: bool | None = None,
    director: str | None = None,
    year: str | None = None,
    store: CatalogStore = Depends(get_store),
) -> MoviePageRead:
    """List movies one page at a time, optionally filtered."""
    result = await movie_service.list_movies(
        store, page=page, size=size, watched=watched, director=director, year=year
    )
    return MoviePageRead.model_validate(result)


@router.get("/titles", response_model=list[str])
async def list_titles(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=movie_service.MAX_PAGE_SIZE),
    store: CatalogStore = Depends(get_store),
) -> list[str]:
    return await movie_service.list_titles(store, page=page, size=size)


@router.get("/{movie_id}", response_model=MovieRead)
async def get_movie(movie_id: int, store: CatalogStore = Depends(get_store)) -> MovieRead:
    movie = await movie_service.get_movie(store, movie_id)
    if not movie:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movie not found")
    return MovieRead.model_validate(movie)


@router.get("/{movie_id}/images/{image_type}")
async def get_movie_image(
    movie_id: int, image_type: ImageType, store: CatalogStore = Depends(get_store)
) -> Response:
    """Serve the stored artwork bytes for a movie."""
    image = await movie_service.get_movie_image(store, movie_id, image_type)
    if not image:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return Response(content=image.payload, media_type=image.content_type)


@router.post("", response_model=MovieRead, status_code=status.HTTP_201_CREATED)
async def add_movie(payload: MovieCreate, store: CatalogStore = Depends(get_store)) -> MovieRead:
    """Look a title up in both providers and store the merged record."""
    movie = await movie_service.add_movie(store, payload.title)
    return MovieRead.model_validate(movie)


@router.patch("/{movie_id}/watched", response_model=MovieRead)
async def update_watched(
    movie_id: int, payload: WatchedUpdate, store: CatalogStore = Depends(get_store)
) -> MovieRead:
    movie = await movie_service.set_watched(store, movie_id, payload.watched)
    return MovieRead.model_validate(movie)


@router.patch("/{movie_id}/rating", response_model=MovieRead)
async def update_rating(
    movie_id: int, payload: RatingUpdate, store: CatalogStore = Depends(get_store)
) -> MovieRead:
    movie = await movie_service.set_rating(store, movie_id, payload.rating)
    return MovieRead.model_validate(movie)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movie(movie_id: int, store: CatalogStore = Depends(get_store)) -> Response:
    await movie_service.delete_movie(store, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
