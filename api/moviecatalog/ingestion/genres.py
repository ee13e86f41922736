"""Static TMDB movie genre table, resolved once per process."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

UNKNOWN_GENRE = "Unknown"

TMDB_GENRES: Mapping[int, str] = MappingProxyType(
    {
        28: "Action",
        12: "Adventure",
        16: "Animation",
        35: "Comedy",
        80: "Crime",
        99: "Documentary",
        18: "Drama",
        10751: "Family",
        14: "Fantasy",
        36: "History",
        27: "Horror",
        10402: "Music",
        9648: "Mystery",
        10749: "Romance",
        878: "Science Fiction",
        10770: "TV Movie",
        53: "Thriller",
        10752: "War",
        37: "Western",
    }
)


def genre_name(genre_id: int | None) -> str:
    """Map a TMDB genre id to its name; unmapped ids resolve to ``Unknown``."""
    if genre_id is None:
        return UNKNOWN_GENRE
    return TMDB_GENRES.get(genre_id, UNKNOWN_GENRE)
