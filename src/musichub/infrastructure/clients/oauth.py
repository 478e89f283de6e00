"""
OAuth-backed clients (Google, YouTube, SoundCloud, Amazon Cloud Drive, OneDrive).

Hey future me – the interactive part of OAuth (browser, redirect, code exchange) is done by
the IOAuthFlow collaborator! These clients only:
1. hand their OAuthServiceSettings to the flow and wrap the returned account,
2. persist tokens in extra_data_string (JSON, never parsed anywhere else),
3. page through the account's library and run searches with a bearer token.

The service-specific classes at the bottom only differ in endpoints and capabilities.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, ClassVar
from urllib.parse import urljoin

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from musichub.config import OAuthServiceSettings
from musichub.domain.entities import Account, MediaType, ServiceType
from musichub.domain.exceptions import ProviderOperationError, SyncCancelled
from musichub.domain.ports import IOAuthFlow
from musichub.infrastructure.clients.base import AuthenticatedClient

logger = logging.getLogger(__name__)


class _TokenState(BaseModel):
    """What we persist in extra_data for OAuth clients."""

    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: datetime | None = None


class RemoteTrack(BaseModel):
    """Library/search entry as returned by an OAuth service."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    artist: str = ""
    album_artist: str = ""
    album: str = ""
    genre: str = ""
    duration: float = 0.0
    disc: int = 0
    track_number: int = 0
    file_extension: str = ""
    media_type: MediaType = MediaType.AUDIO
    artwork_url: str | None = None
    artist_artwork_url: str | None = None
    share_url: str | None = Field(default=None)


class OAuthClient(AuthenticatedClient):
    """Base client for OAuth services."""

    LIBRARY_PATH: ClassVar[str]
    SEARCH_PATH: ClassVar[str | None] = None
    # Safety net against a server that keeps returning "next"
    MAX_PAGES: ClassVar[int] = 500

    def __init__(
        self,
        identifier: str,
        transport: httpx.AsyncClient,
        settings: OAuthServiceSettings,
        oauth_flow: IOAuthFlow,
    ) -> None:
        """Initialize client.

        Args:
            identifier: Stable id (the persisted record id as string)
            transport: Shared HTTP client
            settings: App credentials and endpoints of this service
            oauth_flow: Interactive OAuth collaborator
        """
        super().__init__(identifier, transport)
        self.settings = settings
        self._oauth_flow = oauth_flow

    @property
    def base_address(self) -> str:
        return self.settings.api_base_url

    @property
    def extra_data_string(self) -> str:
        if self.current_account is None:
            return ""
        return _TokenState(
            email=self.current_account.email,
            access_token=self.current_account.access_token,
            refresh_token=self.current_account.refresh_token,
            expires_at=self.current_account.expires_at,
        ).model_dump_json()

    @extra_data_string.setter
    def extra_data_string(self, value: str) -> None:
        if not value:
            self.current_account = None
            return
        try:
            state = _TokenState.model_validate_json(value)
        except ValidationError as e:
            # Corrupt blob - behave like a logged-out account instead of failing the load
            logger.warning(
                "Ignoring unreadable token data for %s client %s: %s",
                self.service_type.value,
                self.identifier,
                e,
            )
            self.current_account = None
            return
        self.current_account = Account(
            identifier=self.identifier,
            email=state.email,
            access_token=state.access_token,
            refresh_token=state.refresh_token,
            expires_at=state.expires_at,
        )

    async def _perform_authenticate(self) -> Account | None:
        granted = await self._oauth_flow.authorize(self.service_type, self.settings)
        if granted is None:
            return None
        return Account(
            identifier=self.identifier,
            email=granted.email,
            access_token=granted.access_token,
            refresh_token=granted.refresh_token,
            expires_at=granted.expires_at,
        )

    async def fetch_library(
        self, cancel_event: asyncio.Event | None = None
    ) -> list[RemoteTrack]:
        """Page through the account's whole library.

        Args:
            cancel_event: Set it to stop between pages

        Returns:
            Every library entry

        Raises:
            ProviderOperationError: HTTP or payload failure
            SyncCancelled: cancel_event was set
        """
        url: str | None = urljoin(self.base_address, self.LIBRARY_PATH)
        tracks: list[RemoteTrack] = []
        pages = 0
        while url and pages < self.MAX_PAGES:
            if cancel_event is not None and cancel_event.is_set():
                raise SyncCancelled("Library fetch cancelled")
            payload = await self._get_json(url)
            tracks.extend(self._parse_items(payload.get("items", [])))
            url = payload.get("next")
            pages += 1

        logger.debug(
            "Fetched %d library entries from %s in %d pages",
            len(tracks),
            self.service_type.value,
            pages,
        )
        return tracks

    async def search(self, query: str) -> list[RemoteTrack]:
        """Run a catalog search."""
        if self.SEARCH_PATH is None:
            return []
        url = urljoin(self.base_address, self.SEARCH_PATH)
        payload = await self._get_json(url, params={"q": query})
        return self._parse_items(payload.get("items", []))

    def _parse_items(self, items: list[Any]) -> list[RemoteTrack]:
        parsed: list[RemoteTrack] = []
        for item in items:
            try:
                parsed.append(RemoteTrack.model_validate(item))
            except ValidationError as e:
                # One odd entry shouldn't sink a whole library sync
                logger.debug("Skipping unparseable %s entry: %s", self.service_type.value, e)
        return parsed

    async def _get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> dict[str, Any]:
        headers: dict[str, str] = {}
        if self.current_account is not None and self.current_account.access_token:
            headers["Authorization"] = f"Bearer {self.current_account.access_token}"
        try:
            response = await self.transport.get(url, params=params, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise ProviderOperationError(
                f"Request to {url} failed: {e}",
                service=self.service_type,
                provider_id=self.identifier,
                original_error=e,
            ) from e
        except ValueError as e:
            raise ProviderOperationError(
                f"Invalid JSON from {url}",
                service=self.service_type,
                provider_id=self.identifier,
                original_error=e,
            ) from e
        if not isinstance(payload, dict):
            raise ProviderOperationError(
                f"Unexpected payload from {url}",
                service=self.service_type,
                provider_id=self.identifier,
            )
        return payload


class GoogleMusicClient(OAuthClient):
    SERVICE_TYPE = ServiceType.GOOGLE
    LIBRARY_PATH = "trackfeed"
    SEARCH_PATH = "query"


class YouTubeOAuthClient(OAuthClient):
    SERVICE_TYPE = ServiceType.YOUTUBE
    LIBRARY_PATH = "library/tracks"
    SEARCH_PATH = "search"


class SoundCloudClient(OAuthClient):
    SERVICE_TYPE = ServiceType.SOUNDCLOUD
    LIBRARY_PATH = "me/favorites"
    SEARCH_PATH = "tracks"


class CloudDriveClient(OAuthClient):
    SERVICE_TYPE = ServiceType.AMAZON
    LIBRARY_PATH = "nodes?filters=kind:FILE"


class OneDriveClient(OAuthClient):
    SERVICE_TYPE = ServiceType.ONEDRIVE
    LIBRARY_PATH = "drive/special/music/children"
