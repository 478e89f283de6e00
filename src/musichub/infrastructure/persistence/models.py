"""SQLAlchemy ORM models for musichub."""

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import JSON, Float, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me, one row per logged-in account! The integer id doubles as the client identifier
# (stringified) - never renumber rows. service holds the ServiceType VALUE ("google", "tunez"),
# not an int, so old rows stay readable when the enum grows. extra_data is the client's opaque
# blob (tokens JSON, Tunez server address) - the DB never looks inside.
class ServiceConfigModel(Base):
    """Persisted per-account service configuration."""

    __tablename__ = "service_configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    service: Mapped[str] = mapped_column(String(32), nullable=False)
    device_id: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    extra_data: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (Index("ix_service_configs_service", "service"),)


# Listen up, (service_id, track_id) is UNIQUE - that's what makes re-syncing the same catalog
# idempotent. service_id is the provider id (= ServiceConfigModel.id as string), track_id the
# remote id. seen_at marks the last sync pass that touched the row; finalize deletes rows
# older than the pass start.
class TrackModel(Base):
    """Track ingested from a provider into the shared library."""

    __tablename__ = "library_tracks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[str] = mapped_column(String(64), nullable=False)
    track_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    artist: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    album_artist: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    album: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    genre: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    disc: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    track_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_extension: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    media_type: Mapped[str] = mapped_column(String(16), nullable=False, default="audio")
    album_artwork: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    artist_artwork: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    seen_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        UniqueConstraint("service_id", "track_id", name="uq_library_tracks_service_track"),
        Index("ix_library_tracks_service", "service_id"),
    )
