"""Single-attempt HTTP helpers that translate failures into catalog errors."""

from __future__ import annotations

import httpx

from moviecatalog.core.config import settings
from moviecatalog.core.errors import AuthError, CatalogError, NotFoundError, ProviderError
from moviecatalog.utils.redaction import redact_secrets


async def _request(
    url: str,
    *,
    source: str,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
    not_found: type[CatalogError] = NotFoundError,
) -> httpx.Response:
    try:
        async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
            response = await client.request("GET", url, headers=headers, params=params)
    except httpx.HTTPError as exc:
        raise ProviderError(
            f"{source} transport error: {redact_secrets(str(exc)) or type(exc).__name__}", source=source
        ) from exc
    status = response.status_code
    if status in (401, 403):
        raise AuthError(f"{source} rejected credentials ({status})", source=source)
    if status == 404:
        raise not_found(f"{source} resource not found", source=source)
    if status >= 400:
        raise ProviderError(f"{source} returned status {status}", source=source)
    return response


async def fetch_json(
    url: str,
    *,
    source: str,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
    not_found: type[CatalogError] = NotFoundError,
) -> dict:
    """GET a JSON object; one attempt, no retries."""
    response = await _request(url, source=source, headers=headers, params=params, not_found=not_found)
    try:
        payload = response.json()
    except ValueError as exc:
        raise ProviderError(f"{source} returned a non-JSON body", source=source) from exc
    if not isinstance(payload, dict):
        raise ProviderError(f"{source} returned an unexpected payload", source=source)
    return payload


async def fetch_bytes(url: str, *, source: str) -> tuple[bytes, str | None]:
    """GET raw bytes and the reported content type."""
    response = await _request(url, source=source)
    content_type = response.headers.get("content-type")
    if content_type:
        content_type = content_type.split(";", 1)[0].strip().lower()
    return response.content, content_type or None
