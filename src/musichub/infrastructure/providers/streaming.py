"""
Providers for the OAuth-backed services.

Hey future me – all of these wrap exactly ONE OAuthClient and sync the same way:
fetch library → map to Track → process + finalize → re-save the client record
(tokens may have been refreshed during the round trip).

YouTube is special: it also exists as an anonymous DEFAULT provider (id "youtube") with an
account-less client. That one is never persisted and its sync is a no-op. See
application/services/youtube_fallback.py for when it gets swapped for a real account.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from musichub.domain.entities import ProviderCapability, ServiceType, Track
from musichub.infrastructure.clients.oauth import OAuthClient, RemoteTrack
from musichub.infrastructure.providers.base import MusicProvider

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)


class StreamingProvider(MusicProvider):
    """Provider over one OAuth client."""

    SERVICE_TYPE: ClassVar[ServiceType]
    CAPABILITIES: ClassVar[frozenset[ProviderCapability]] = frozenset({ProviderCapability.NONE})

    def __init__(self, client: OAuthClient, context: ServiceContext) -> None:
        super().__init__(context)
        self.client = client

    @property
    def id(self) -> str:
        return self.client.identifier

    @property
    def email(self) -> str:
        account = self.client.current_account
        if account is None:
            return ""
        return account.email or ""

    @property
    def service_type(self) -> ServiceType:
        return self.SERVICE_TYPE

    @property
    def requires_authentication(self) -> bool:
        return True

    @property
    def has_account(self) -> bool:
        # Restored token blobs may carry an access token without an email
        return self.client.current_account is not None

    @property
    def capabilities(self) -> frozenset[ProviderCapability]:
        return self.CAPABILITIES

    async def _sync(self) -> bool:
        remote = await self.client.fetch_library(self._cancel_event)
        tracks = [self._to_track(item) for item in remote]

        library = self._context.library
        await library.process_tracks(self.id, tracks)
        await library.finalize_processing(self.id)
        await self._context.providers.save_client(self.client)

        logger.info("Synced %d tracks from %s account %s", len(tracks), self.service_type.value, self.id)
        return True

    async def logout(self) -> None:
        """Drop the account record, its tracks and the local tokens."""
        provider_id = self.id
        await self._context.providers.remove_provider(self.client)
        await self._context.library.remove_service_tracks(provider_id)
        self.client.reset_data()

    async def search(self, query: str) -> list[Track]:
        if ProviderCapability.SEARCHABLE not in self.capabilities:
            raise self._unsupported("search")
        remote = await self.client.search(query)
        return [self._to_track(item) for item in remote]

    def _to_track(self, item: RemoteTrack) -> Track:
        return Track(
            id=item.id,
            service_id=self.id,
            name=item.title,
            artist=item.artist,
            album_artist=item.album_artist or item.artist,
            album=item.album,
            genre=item.genre,
            duration=item.duration,
            disc=item.disc,
            track_number=item.track_number,
            file_extension=item.file_extension,
            media_type=item.media_type,
            album_artwork=[item.artwork_url] if item.artwork_url else [],
            artist_artwork=[item.artist_artwork_url] if item.artist_artwork_url else [],
        )


class GoogleMusicProvider(StreamingProvider):
    SERVICE_TYPE = ServiceType.GOOGLE
    CAPABILITIES = frozenset({ProviderCapability.SEARCHABLE})


class SoundCloudProvider(StreamingProvider):
    SERVICE_TYPE = ServiceType.SOUNDCLOUD
    CAPABILITIES = frozenset({ProviderCapability.SEARCHABLE})


class AmazonMusicProvider(StreamingProvider):
    SERVICE_TYPE = ServiceType.AMAZON


class OneDriveProvider(StreamingProvider):
    SERVICE_TYPE = ServiceType.ONEDRIVE


class YouTubeProvider(StreamingProvider):
    """YouTube account provider, or the anonymous default instance."""

    SERVICE_TYPE = ServiceType.YOUTUBE
    CAPABILITIES = frozenset({ProviderCapability.SEARCHABLE})
    DEFAULT_ID: ClassVar[str] = "youtube"

    @property
    def is_default(self) -> bool:
        return self.id == self.DEFAULT_ID

    @property
    def requires_authentication(self) -> bool:
        return not self.is_default

    async def _sync(self) -> bool:
        if self.client.current_account is None:
            # Anonymous access has no library to pull
            return True
        return await super()._sync()

    async def logout(self) -> None:
        if self.is_default:
            await self._context.providers.discard(self.id)
            return
        await super().logout()
