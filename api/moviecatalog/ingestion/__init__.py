"""Connector registry for metadata providers."""

from __future__ import annotations

from typing import Dict

from moviecatalog.ingestion.base import BaseConnector
from moviecatalog.ingestion.omdb import OMDbConnector
from moviecatalog.ingestion.tmdb import TMDBConnector

PRIMARY_SOURCE = "omdb"
SECONDARY_SOURCE = "tmdb"

_CONNECTORS: Dict[str, BaseConnector] = {}


def get_connector(source: str) -> BaseConnector:
    """Return a connector instance for the given source name."""
    key = source.lower()
    if key not in _CONNECTORS:
        if key == PRIMARY_SOURCE:
            _CONNECTORS[key] = OMDbConnector()
        elif key == SECONDARY_SOURCE:
            _CONNECTORS[key] = TMDBConnector()
        else:
            raise ValueError(f"Unsupported source {source}")
    return _CONNECTORS[key]


def reset_connectors() -> None:
    """Drop cached connectors so they pick up changed settings."""
    _CONNECTORS.clear()
