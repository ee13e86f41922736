"""Import all models here for Alembic autogenerate."""

from moviecatalog.db.base_class import Base
from moviecatalog.models import movie  # noqa: F401

__all__ = ["Base"]
