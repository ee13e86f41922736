from . import catalog_store, merge, movie_service

__all__ = ["catalog_store", "merge", "movie_service"]
"""Service-layer helpers for catalog operations."""
