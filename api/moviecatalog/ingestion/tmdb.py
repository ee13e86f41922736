"""TMDB connector: supplementary genre, director, suggestion, and artwork."""

from __future__ import annotations

import logging
from typing import Any

from moviecatalog.core.config import settings
from moviecatalog.core.errors import AuthError, NotFoundError, ProviderError
from moviecatalog.ingestion.base import BaseConnector, FetchedImage, SecondaryRecord
from moviecatalog.ingestion.genres import genre_name
from moviecatalog.ingestion.http import fetch_bytes, fetch_json
from moviecatalog.ingestion.observability import ProviderMonitor, provider_monitor
from moviecatalog.models.movie import ImageType

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"

logger = logging.getLogger("moviecatalog.ingestion.tmdb")


class TMDBConnector(BaseConnector):
    """Search-then-detail TMDB client whose extras are individually best-effort."""
    source_name = "tmdb"

    def __init__(
        self,
        api_key: str | None = None,
        auth_token: str | None = None,
        *,
        api_url: str | None = None,
        monitor: ProviderMonitor | None = None,
    ) -> None:
        self.api_key = api_key or settings.tmdb_api_key
        self.auth_token = auth_token or settings.tmdb_api_auth_header
        self.api_url = (api_url or settings.tmdb_api_url).rstrip("/")
        self.monitor = monitor or provider_monitor
        self.image_sizes = {
            ImageType.POSTER: settings.tmdb_poster_size,
            ImageType.BACKDROP: settings.tmdb_backdrop_size,
        }

    def _auth(self) -> tuple[dict[str, str], dict[str, str]]:
        headers: dict[str, str] = {"accept": "application/json"}
        params: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        elif self.api_key:
            params["api_key"] = self.api_key
        else:
            raise AuthError(
                "TMDB API credentials missing; set TMDB_API_AUTH_HEADER or TMDB_API_KEY", source=self.source_name
            )
        return headers, params

    async def _get(self, path: str, **query: Any) -> dict:
        headers, params = self._auth()
        return await fetch_json(
            f"{self.api_url}{path}", source=self.source_name, headers=headers, params={**params, **query}
        )

    def image_url(self, image_type: ImageType, relative_path: str) -> str:
        """Build a CDN URL as base + size token + provider relative path."""
        return f"{settings.tmdb_image_base_url}{self.image_sizes[image_type]}{relative_path}"

    async def search(self, title: str) -> dict:
        """Return the first ranked search hit for a title."""
        payload = await self._get("/search/movie", query=title)
        results = [hit for hit in payload.get("results") or [] if hit.get("id") is not None]
        if not results:
            raise NotFoundError(f"TMDB has no match for {title!r}", source=self.source_name)
        return results[0]

    async def detail(self, tmdb_id: int | str) -> dict:
        payload = await self._get(f"/movie/{tmdb_id}", append_to_response="credits")
        if not payload:
            raise ProviderError(f"TMDB returned empty detail for {tmdb_id}", source=self.source_name)
        return payload

    async def fetch(self, title: str) -> SecondaryRecord:
        lookup = self.parse_title(title)
        hit = await self.search(lookup)
        tmdb_id = hit["id"]
        detail = await self.detail(tmdb_id)

        genre_ids = hit.get("genre_ids") or []
        release_date = detail.get("release_date") or ""
        directors = [
            member.get("name")
            for member in (detail.get("credits") or {}).get("crew", [])
            if member.get("job") == "Director" and member.get("name")
        ]
        context = {"title": lookup, "tmdb_id": tmdb_id}

        similar_title = await self._similar_title(tmdb_id, context=context)
        images: list[FetchedImage] = []
        for image_type, path_key in ((ImageType.POSTER, "poster_path"), (ImageType.BACKDROP, "backdrop_path")):
            relative_path = detail.get(path_key)
            if not relative_path:
                continue
            image = await self._download_image(image_type, relative_path, context=context)
            if image is not None:
                images.append(image)

        return SecondaryRecord(
            source_id=str(tmdb_id),
            title=detail.get("title") or hit.get("title"),
            year=release_date[:4] if len(release_date) >= 4 else None,
            director=directors[0] if directors else None,
            genre=genre_name(genre_ids[0] if genre_ids else None),
            similar_title=similar_title,
            images=images,
        )

    async def _similar_title(self, tmdb_id: int | str, *, context: dict[str, Any]) -> str | None:
        try:
            payload = await self._get(f"/movie/{tmdb_id}/similar")
        except Exception as exc:  # noqa: BLE001
            await self.monitor.record_degraded(self.source_name, "similar", exc, context=context)
            return None
        for result in payload.get("results") or []:
            title = (result.get("title") or "").strip()
            if title:
                return title
        return None

    async def _download_image(
        self, image_type: ImageType, relative_path: str, *, context: dict[str, Any]
    ) -> FetchedImage | None:
        url = self.image_url(image_type, relative_path)
        try:
            payload, content_type = await fetch_bytes(url, source=self.source_name)
        except Exception as exc:  # noqa: BLE001
            await self.monitor.record_degraded(
                self.source_name, image_type.value.lower(), exc, context={**context, "url": url}
            )
            return None
        if not payload:
            logger.warning("Empty %s payload from %s", image_type.value, url)
            return None
        if not content_type or not content_type.startswith("image/"):
            content_type = DEFAULT_IMAGE_CONTENT_TYPE
        return FetchedImage(image_type=image_type, payload=payload, content_type=content_type)
