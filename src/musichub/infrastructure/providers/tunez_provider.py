"""Provider for a Tunez server on the local network.

Hey future me - Tunez is read-only from our side! The server hands out a catalog snapshot,
audio streams and artwork, nothing else. Every catalog mutation (playlists, ratings, sharing,
search) raises CapabilityNotSupportedError via the IMusicProvider defaults. Don't add
best-effort emulations here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from musichub.domain.entities import MediaType, ProviderCapability, ServiceType, Track
from musichub.infrastructure.clients.tunez_client import TunezClient
from musichub.infrastructure.integrations.tunez_server import (
    FetchAlbumArtMessage,
    FetchArtistArtMessage,
    FetchTrackMessage,
    Messages,
    ServerDetails,
    TunezServer,
    TunezTrack,
    message_url,
)
from musichub.infrastructure.providers.base import MusicProvider

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)

# The server transcodes everything to mp3 before streaming
FILE_EXTENSION = "mp3"
DEFAULT_GENRE = "Genre"


class TunezProvider(MusicProvider):
    """Provider backed by one Tunez server."""

    def __init__(self, client: TunezClient, context: ServiceContext) -> None:
        super().__init__(context)
        self.client = client
        self.server = TunezServer(
            ServerDetails(hostname=client.host, port=client.port),
            client.transport,
        )

    @property
    def id(self) -> str:
        return self.client.identifier

    @property
    def email(self) -> str:
        return self.client.base_address

    @property
    def service_type(self) -> ServiceType:
        return ServiceType.TUNEZ

    @property
    def requires_authentication(self) -> bool:
        return False

    @property
    def capabilities(self) -> frozenset[ProviderCapability]:
        return frozenset({ProviderCapability.NONE})

    async def _sync(self) -> bool:
        catalog = await self.server.fetch_catalog(
            self._context.settings.catalog_cache_path,
            self._cancel_event,
        )
        tracks = [self._to_track(entry) for entry in catalog]

        library = self._context.library
        await library.process_tracks(self.id, tracks)
        await library.finalize_processing(self.id)
        # Re-persist: the round trip may have refreshed client state
        await self._context.providers.save_client(self.client)

        logger.info("Synced %d tracks from Tunez server %s", len(tracks), self.email)
        return True

    async def logout(self) -> None:
        """Forget the server: record, collection entry, tracks, address."""
        provider_id = self.id
        await self._context.providers.remove_provider(self.client)
        await self._context.library.remove_service_tracks(provider_id)
        self.client.reset_data()

    async def get_playback_uri(self, track: Track) -> str:
        return message_url(
            self.client.base_address,
            Messages.FETCH_TRACK,
            FetchTrackMessage(uuid=int(track.id), offset=0),
        )

    async def get_download_uri(self, track: Track) -> str:
        return await self.get_playback_uri(track)

    async def record_playback(self, track: Track) -> bool:
        # The server keeps no play history
        return True

    def _to_track(self, entry: TunezTrack) -> Track:
        track = Track(
            id=str(entry.uuid),
            service_id=self.id,
            name=entry.name,
            artist=entry.track_artist,
            album_artist=entry.album_artist,
            album=entry.album,
            genre=DEFAULT_GENRE,
            duration=entry.duration,
            disc=entry.disc,
            track_number=entry.number,
            file_extension=FILE_EXTENSION,
            media_type=MediaType.AUDIO,
        )
        if entry.album_art is not None:
            base = self.client.base_address
            track.album_artwork = [
                message_url(
                    base,
                    Messages.FETCH_ALBUM_ART,
                    FetchAlbumArtMessage(album_artist=entry.album_artist, album=entry.album),
                )
            ]
            track.artist_artwork = [
                message_url(
                    base,
                    Messages.FETCH_ARTIST_ART,
                    FetchArtistArtMessage(album_artist=entry.album_artist),
                )
            ]
        return track
