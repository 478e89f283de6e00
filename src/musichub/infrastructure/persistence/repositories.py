"""Repository implementations for the persisted config records and the track library."""

import logging
from datetime import datetime

from sqlalchemy import delete, func, select

from musichub.domain.entities import MediaType, ServiceConfigRecord, ServiceType, Track
from musichub.domain.ports import IServiceConfigStore, ITrackLibrary
from musichub.infrastructure.persistence.database import Database
from musichub.infrastructure.persistence.models import (
    ServiceConfigModel,
    TrackModel,
    utc_now,
)

logger = logging.getLogger(__name__)

# SQLite caps bound parameters per statement
_LOOKUP_CHUNK = 500


class ServiceConfigRepository(IServiceConfigStore):
    """Store for ServiceConfigRecords backed by the service_configs table."""

    def __init__(self, database: Database) -> None:
        """Initialize repository with the database manager."""
        self._db = database

    async def add(self, record: ServiceConfigRecord) -> None:
        """Insert or update a record."""
        async with self._db.session_scope() as session:
            model = await session.get(ServiceConfigModel, record.id)
            if model is None:
                session.add(
                    ServiceConfigModel(
                        id=record.id,
                        service=record.service.value,
                        device_id=record.device_id,
                        extra_data=record.extra_data,
                    )
                )
            else:
                model.service = record.service.value
                model.device_id = record.device_id
                model.extra_data = record.extra_data

    async def delete(self, record: ServiceConfigRecord) -> None:
        """Delete a record by id."""
        async with self._db.session_scope() as session:
            await session.execute(
                delete(ServiceConfigModel).where(ServiceConfigModel.id == record.id)
            )

    async def all(self) -> list[ServiceConfigRecord]:
        """Get every persisted record, ordered by id.

        Hey future me - rows with an unknown service string are SKIPPED (and logged), not
        raised. One corrupt row must never block loading the others.
        """
        async with self._db.session_scope() as session:
            result = await session.execute(
                select(ServiceConfigModel).order_by(ServiceConfigModel.id)
            )
            models = list(result.scalars().all())

        records: list[ServiceConfigRecord] = []
        for model in models:
            try:
                service = ServiceType(model.service)
            except ValueError:
                logger.warning(
                    "Skipping service config %s with unknown service '%s'",
                    model.id,
                    model.service,
                )
                continue
            records.append(
                ServiceConfigRecord(
                    id=model.id,
                    service=service,
                    device_id=model.device_id,
                    extra_data=model.extra_data,
                )
            )
        return records

    async def next_id(self) -> int:
        """Allocate the next record id (max + 1, starting at 1)."""
        async with self._db.session_scope() as session:
            result = await session.execute(select(func.max(ServiceConfigModel.id)))
            current = result.scalar_one_or_none()
        return (current or 0) + 1


class TrackLibraryRepository(ITrackLibrary):
    """Shared track library backed by the library_tracks table.

    Hey future me - process_tracks() is an UPSERT keyed by (service_id, track_id)! Every row
    touched gets seen_at = now. The first process_tracks() call after a finalize opens a
    "pass" for that service; finalize_processing() deletes rows not seen since that pass
    started (= tracks deleted on the remote side) and closes it.
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository with the database manager."""
        self._db = database
        self._pass_started: dict[str, datetime] = {}

    async def process_tracks(self, service_id: str, tracks: list[Track]) -> int:
        """Upsert tracks for a service."""
        started = self._pass_started.setdefault(service_id, utc_now())
        # Last entry wins for duplicate ids inside one payload
        by_id = {track.id: track for track in tracks}
        track_ids = list(by_id)

        async with self._db.session_scope() as session:
            existing: dict[str, TrackModel] = {}
            for offset in range(0, len(track_ids), _LOOKUP_CHUNK):
                chunk = track_ids[offset : offset + _LOOKUP_CHUNK]
                result = await session.execute(
                    select(TrackModel).where(
                        TrackModel.service_id == service_id,
                        TrackModel.track_id.in_(chunk),
                    )
                )
                existing.update({model.track_id: model for model in result.scalars()})

            seen_at = max(utc_now(), started)
            for track_id, track in by_id.items():
                model = existing.get(track_id)
                if model is None:
                    model = TrackModel(service_id=service_id, track_id=track_id)
                    session.add(model)
                self._apply(model, track)
                model.seen_at = seen_at

        logger.debug("Processed %d tracks for service %s", len(by_id), service_id)
        return len(by_id)

    async def finalize_processing(self, service_id: str) -> int:
        """Drop tracks of a service not seen in the current pass."""
        started = self._pass_started.pop(service_id, None)
        if started is None:
            return 0

        async with self._db.session_scope() as session:
            result = await session.execute(
                delete(TrackModel).where(
                    TrackModel.service_id == service_id,
                    TrackModel.seen_at < started,
                )
            )
        removed = result.rowcount or 0
        if removed:
            logger.info("Removed %d stale tracks for service %s", removed, service_id)
        return removed

    async def remove_service_tracks(self, service_id: str) -> int:
        """Delete every track of a service."""
        self._pass_started.pop(service_id, None)
        async with self._db.session_scope() as session:
            result = await session.execute(
                delete(TrackModel).where(TrackModel.service_id == service_id)
            )
        return result.rowcount or 0

    async def get_tracks(self, service_id: str) -> list[Track]:
        """Get all tracks of a service, ordered by remote id."""
        async with self._db.session_scope() as session:
            result = await session.execute(
                select(TrackModel)
                .where(TrackModel.service_id == service_id)
                .order_by(TrackModel.track_id)
            )
            models = list(result.scalars().all())
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _apply(model: TrackModel, track: Track) -> None:
        model.name = track.name
        model.artist = track.artist
        model.album_artist = track.album_artist
        model.album = track.album
        model.genre = track.genre
        model.duration = track.duration
        model.disc = track.disc
        model.track_number = track.track_number
        model.file_extension = track.file_extension
        model.media_type = track.media_type.value
        model.album_artwork = list(track.album_artwork)
        model.artist_artwork = list(track.artist_artwork)

    @staticmethod
    def _to_entity(model: TrackModel) -> Track:
        return Track(
            id=model.track_id,
            service_id=model.service_id,
            name=model.name,
            artist=model.artist,
            album_artist=model.album_artist,
            album=model.album,
            genre=model.genre,
            duration=model.duration,
            disc=model.disc,
            track_number=model.track_number,
            file_extension=model.file_extension,
            media_type=MediaType(model.media_type),
            album_artwork=list(model.album_artwork or []),
            artist_artwork=list(model.artist_artwork or []),
        )
