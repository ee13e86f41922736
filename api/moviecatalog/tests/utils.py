"""Shared helpers for catalog tests: stub connectors and HTTP doubles."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from moviecatalog.ingestion.base import BaseConnector, FetchedImage, PrimaryRecord, SecondaryRecord
from moviecatalog.models.movie import ImageType


class StubConnector(BaseConnector):
    """Connector double returning a canned record or raising a canned error."""

    def __init__(self, source_name: str, result: Any = None, error: Exception | None = None) -> None:
        self.source_name = source_name
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, title: str) -> Any:
        self.calls.append(title)
        if self.error is not None:
            raise self.error
        return self.result


def flash_primary(**overrides: Any) -> PrimaryRecord:
    values: dict[str, Any] = {
        "title": "Flash",
        "year": "2023",
        "director": "",
        "external_id": 1234567,
        "imdb_id": "tt1234567",
    }
    values.update(overrides)
    return PrimaryRecord(**values)


def flash_secondary(**overrides: Any) -> SecondaryRecord:
    values: dict[str, Any] = {
        "source_id": "298618",
        "title": "The Flash",
        "year": "2023",
        "director": "Andy Muschietti",
        "genre": "Action",
        "similar_title": "Justice League",
        "images": [
            FetchedImage(
                image_type=ImageType.POSTER,
                payload=b"poster-bytes",
                content_type="image/jpeg",
            )
        ],
    }
    values.update(overrides)
    return SecondaryRecord(**values)


def build_response(
    url: str,
    *,
    status: int = 200,
    json_data: Any | None = None,
    content: bytes | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    request = httpx.Request("GET", url)
    if content is not None:
        return httpx.Response(status_code=status, content=content, headers=headers, request=request)
    return httpx.Response(status_code=status, json=json_data if json_data is not None else {}, request=request)


def _make_async_client(routes: dict[str, httpx.Response | Exception], call_log: list[dict[str, Any]]) -> type:
    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self.timeout = kwargs.get("timeout")

        async def __aenter__(self) -> "DummyAsyncClient":
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
            call_log.append(
                {"method": method, "url": url, "params": kwargs.get("params") or {}, "headers": kwargs.get("headers") or {}}
            )
            outcome = routes.get(url)
            if outcome is None:
                return build_response(url, status=404)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

    return DummyAsyncClient


def install_http_routes(
    monkeypatch: pytest.MonkeyPatch, routes: dict[str, httpx.Response | Exception]
) -> list[dict[str, Any]]:
    """Route provider HTTP calls to canned responses keyed by URL (no query)."""
    call_log: list[dict[str, Any]] = []
    monkeypatch.setattr("moviecatalog.ingestion.http.httpx.AsyncClient", _make_async_client(routes, call_log))
    return call_log
