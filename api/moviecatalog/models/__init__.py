"""SQLAlchemy ORM models for the movie catalog."""

from moviecatalog.models.movie import ImageType, Movie, MovieImage

__all__ = ["ImageType", "Movie", "MovieImage"]
