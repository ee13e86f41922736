"""Catalog models: the canonical movie record and the artwork it owns."""

from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from moviecatalog.db.base_class import Base


class ImageType(str, enum.Enum):
    """Artwork kinds downloaded from the secondary provider CDN."""
    POSTER = "POSTER"
    BACKDROP = "BACKDROP"


class Movie(Base):
    """Canonical movie record merged from the primary and secondary providers.

    Images are composed into the record: they are added only through
    ``attach_image`` and are removed together with the record.
    """
    __tablename__ = "movies"
    __table_args__ = (CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_movies_rating_range"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    imdb_id: Mapped[str | None] = mapped_column(String(32))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    year: Mapped[str | None] = mapped_column(String(20))
    director: Mapped[str | None] = mapped_column(String(255))
    genre: Mapped[str | None] = mapped_column(String(255))
    plot: Mapped[str | None] = mapped_column(Text)
    release_date: Mapped[date | None] = mapped_column(Date)
    watched: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating: Mapped[int | None] = mapped_column(Integer)
    similar_title: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )

    _images: Mapped[list["MovieImage"]] = relationship(
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by="MovieImage.id",
        lazy="selectin",
        passive_deletes=True,
    )

    @property
    def images(self) -> tuple["MovieImage", ...]:
        """Owned images in insertion order; read-only view."""
        return tuple(self._images)

    def attach_image(self, image: "MovieImage") -> "MovieImage":
        """Take ownership of an image and point its back-reference here."""
        if image.movie is not None and image.movie is not self:
            raise ValueError("Image already belongs to another movie")
        if image not in self._images:
            # backref assigns image.movie
            self._images.append(image)
        return image


class MovieImage(Base):
    """Binary artwork owned by a movie; ``movie_id`` is a lookup-only reference."""
    __tablename__ = "movie_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_type: Mapped[ImageType] = mapped_column(
        Enum(ImageType, name="image_type", values_callable=lambda enum_cls: [e.value for e in enum_cls]),
        nullable=False,
    )
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)

    movie: Mapped[Movie | None] = relationship(back_populates="_images")

    @property
    def size_bytes(self) -> int:
        return len(self.payload or b"")


# Authoritative duplicate guard: one record per case-insensitive title.
Index("uq_movies_title_ci", func.lower(Movie.title), unique=True)
