"""
Provider and client interfaces for musichub.

Hey future me – das ist das HERZSTÜCK der Provider-Architektur!
Every remote service (Google, YouTube, SoundCloud, Amazon, OneDrive, Tunez) is reached
through exactly two objects:

1. IAuthenticatedClient – the per-account network/auth handle. Its identifier is the
   primary key of the persisted ServiceConfigRecord (as string).
2. IMusicProvider – the uniform wrapper the orchestrators talk to (sync, resync, logout)
   plus a CLOSED set of catalog operations. Variants that can't do an operation raise
   CapabilityNotSupportedError – no best-effort emulation!

service_type is an explicit attribute on BOTH. Never derive it from isinstance() checks.
"""

from abc import ABC, abstractmethod

from musichub.domain.entities import Account, ProviderCapability, ServiceType, Track
from musichub.domain.exceptions import CapabilityNotSupportedError


class IAuthenticatedClient(ABC):
    """Per-account network client ("Authenticated API" capability)."""

    identifier: str
    device_id: str
    current_account: Account | None

    @property
    @abstractmethod
    def service_type(self) -> ServiceType:
        """Service this client talks to."""
        ...

    @property
    @abstractmethod
    def base_address(self) -> str:
        """Root URL of the remote service for this account."""
        ...

    @property
    @abstractmethod
    def extra_data_string(self) -> str:
        """Opaque serialized client state (tokens, addresses)."""
        ...

    @extra_data_string.setter
    @abstractmethod
    def extra_data_string(self, value: str) -> None: ...

    @abstractmethod
    async def authenticate(self) -> Account | None:
        """Run (possibly interactive) authentication.

        Returns:
            The account, or None if the user abandoned the attempt
        """
        ...

    @abstractmethod
    def reset_data(self) -> None:
        """Forget every piece of local account state."""
        ...


class IMusicProvider(ABC):
    """
    Uniform contract of every provider variant.

    Hey future me – sync_database() is what the fan-out calls, resync() is the
    "user pressed refresh" path. Both MUST serialize per provider (see the
    sync guard in infrastructure/providers/base.py), the orchestrator won't do it.
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Collection key (client identifier, or a fixed default id)."""
        ...

    @property
    @abstractmethod
    def email(self) -> str:
        """Account label, empty until authenticated."""
        ...

    @property
    @abstractmethod
    def service_type(self) -> ServiceType:
        """Service this provider wraps."""
        ...

    @property
    @abstractmethod
    def requires_authentication(self) -> bool:
        """True if the provider only works with a logged-in account."""
        ...

    @property
    def has_account(self) -> bool:
        """True if an account is attached, even one restored without an email."""
        return bool(self.email)

    @property
    @abstractmethod
    def capabilities(self) -> frozenset[ProviderCapability]:
        """Optional features this provider supports."""
        ...

    @abstractmethod
    async def sync_database(self) -> bool:
        """Pull the remote catalog into the shared library."""
        ...

    @abstractmethod
    async def resync(self) -> bool:
        """Full re-sync of the remote catalog."""
        ...

    @abstractmethod
    async def logout(self) -> None:
        """Drop the account: persisted record, library tracks, local state."""
        ...

    # =========================================================================
    # CATALOG OPERATIONS (closed set, default = not supported)
    # =========================================================================

    def _unsupported(self, operation: str) -> CapabilityNotSupportedError:
        return CapabilityNotSupportedError(operation, self.service_type)

    async def search(self, query: str) -> list[Track]:
        """Search the remote catalog."""
        raise self._unsupported("search")

    async def add_to_library(self, track: Track) -> bool:
        """Save a remote track into the user's library."""
        raise self._unsupported("add_to_library")

    async def add_to_playlist(self, tracks: list[Track], playlist_name: str) -> bool:
        """Append tracks to a (possibly new) playlist."""
        raise self._unsupported("add_to_playlist")

    async def delete_playlist(self, playlist_id: str) -> bool:
        """Delete a remote playlist."""
        raise self._unsupported("delete_playlist")

    async def delete_playlist_song(self, playlist_id: str, track_id: str) -> bool:
        """Remove one entry from a remote playlist."""
        raise self._unsupported("delete_playlist_song")

    async def move_song(
        self,
        playlist_id: str,
        track_id: str,
        previous_id: str | None,
        next_id: str | None,
        index: int,
    ) -> bool:
        """Reorder an entry inside a remote playlist."""
        raise self._unsupported("move_song")

    async def set_rating(self, track: Track, rating: int) -> bool:
        """Rate a track."""
        raise self._unsupported("set_rating")

    async def get_share_url(self, track: Track) -> str:
        """Public share link for a track."""
        raise self._unsupported("get_share_url")

    async def get_playback_uri(self, track: Track) -> str:
        """URI the playback pipeline can stream from."""
        raise self._unsupported("get_playback_uri")

    async def get_download_uri(self, track: Track) -> str:
        """URI for an offline download of a track."""
        raise self._unsupported("get_download_uri")

    async def record_playback(self, track: Track) -> bool:
        """Report a finished playback to the service."""
        raise self._unsupported("record_playback")


__all__ = [
    "IAuthenticatedClient",
    "IMusicProvider",
]
