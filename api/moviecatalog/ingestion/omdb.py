"""OMDb connector: the authoritative source for title, year, director, and id."""

from __future__ import annotations

from moviecatalog.core.config import settings
from moviecatalog.core.errors import AuthError, NotFoundError, ProviderError, ValidationError
from moviecatalog.ingestion.base import BaseConnector, PrimaryRecord
from moviecatalog.ingestion.http import fetch_json
from moviecatalog.utils.datetime import parse_date

IMDB_ID_PREFIX = "tt"
_MISSING = "N/A"
_AUTH_ERROR_MARKERS = ("api key", "apikey", "unauthorized")


def parse_external_id(reference_id: str | None) -> int:
    """Strip the ``tt`` prefix from an IMDb reference id and parse the rest."""
    if not reference_id or not reference_id.startswith(IMDB_ID_PREFIX):
        raise ValidationError(f"Malformed reference id {reference_id!r}: missing {IMDB_ID_PREFIX!r} prefix", source="omdb")
    remainder = reference_id[len(IMDB_ID_PREFIX):]
    if not remainder.isdigit():
        raise ValidationError(f"Malformed reference id {reference_id!r}: non-numeric remainder", source="omdb")
    return int(remainder)


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == _MISSING:
        return None
    return text


class OMDbConnector(BaseConnector):
    """Single-request title lookup against the OMDb API."""
    source_name = "omdb"

    def __init__(self, api_key: str | None = None, api_url: str | None = None) -> None:
        self.api_key = api_key or settings.omdb_api_key
        self.api_url = api_url or settings.omdb_api_url

    def _params(self, title: str) -> dict[str, str]:
        if not self.api_key:
            raise AuthError("OMDb API key missing; set OMDB_API_KEY", source=self.source_name)
        return {"apikey": self.api_key, "t": title, "type": "movie"}

    async def fetch(self, title: str) -> PrimaryRecord:
        lookup = self.parse_title(title)
        payload = await fetch_json(
            self.api_url, source=self.source_name, params=self._params(lookup), not_found=ProviderError
        )

        if str(payload.get("Response", "")).lower() != "true":
            message = str(payload.get("Error") or "no match")
            if any(marker in message.lower() for marker in _AUTH_ERROR_MARKERS):
                raise AuthError(f"OMDb rejected credentials: {message}", source=self.source_name)
            if "not found" in message.lower():
                raise NotFoundError(f"OMDb has no match for {lookup!r}: {message}", source=self.source_name)
            raise ProviderError(f"OMDb error for {lookup!r}: {message}", source=self.source_name)

        resolved_title = _clean(payload.get("Title"))
        if not resolved_title:
            raise ProviderError(f"OMDb returned no title for {lookup!r}", source=self.source_name)
        reference_id = _clean(payload.get("imdbID"))
        return PrimaryRecord(
            title=resolved_title,
            year=_clean(payload.get("Year")),
            director=_clean(payload.get("Director")),
            external_id=parse_external_id(reference_id),
            imdb_id=reference_id or "",
            plot=_clean(payload.get("Plot")),
            release_date=parse_date(_clean(payload.get("Released"))),
        )
