"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Any

from musichub.domain.entities import Account, ServiceConfigRecord, ServiceType, Track

# Hey future me – Provider/Client interfaces are in a separate module!
# Import here for easy access: from musichub.domain.ports import IMusicProvider
from musichub.domain.ports.provider import IAuthenticatedClient, IMusicProvider


class IServiceConfigStore(ABC):
    """Keyed store of persisted ServiceConfigRecords."""

    @abstractmethod
    async def add(self, record: ServiceConfigRecord) -> None:
        """Insert or update a record (keyed by record.id)."""
        pass

    @abstractmethod
    async def delete(self, record: ServiceConfigRecord) -> None:
        """Delete a record. Deleting a missing record is a no-op."""
        pass

    @abstractmethod
    async def all(self) -> list[ServiceConfigRecord]:
        """Get every persisted record, ordered by id."""
        pass

    @abstractmethod
    async def next_id(self) -> int:
        """Allocate an id for a new record."""
        pass


# Yo, this is the shared track store every provider writes into! Ingestion MUST be idempotent
# keyed by (service_id, track id) - re-running a sync with the same payload must not create
# duplicates. finalize_processing() drops tracks of that service which weren't seen since
# the previous finalize (they were deleted remotely).
class ITrackLibrary(ABC):
    """Shared track/catalog store."""

    @abstractmethod
    async def process_tracks(self, service_id: str, tracks: list[Track]) -> int:
        """Upsert tracks for a service.

        Returns:
            Number of tracks processed
        """
        pass

    @abstractmethod
    async def finalize_processing(self, service_id: str) -> int:
        """Close a sync pass for a service.

        Returns:
            Number of stale tracks removed
        """
        pass

    @abstractmethod
    async def remove_service_tracks(self, service_id: str) -> int:
        """Delete every track of a service.

        Returns:
            Number of tracks removed
        """
        pass


class IUserNotifier(ABC):
    """User-visible surface (toasts, spinners). Implemented by the UI layer."""

    @abstractmethod
    def show_not_implemented(self, details: dict[str, str]) -> None:
        """Tell the user a feature/service is not available."""
        pass

    @abstractmethod
    def show_progress(self, title: str) -> Any:
        """Show a progress indicator.

        Returns:
            Opaque handle passed back to hide_progress()
        """
        pass

    @abstractmethod
    def hide_progress(self, handle: Any) -> None:
        """Hide a progress indicator shown by show_progress()."""
        pass


class ITextPrompt(ABC):
    """Interactive text input."""

    @abstractmethod
    async def get_text_input(self, title: str, default: str = "") -> str:
        """Ask the user for a line of text.

        Raises:
            AuthenticationAbandoned: If the user dismissed the prompt
        """
        pass


class IOAuthFlow(ABC):
    """Interactive OAuth hand-off (browser, redirect capture, code exchange)."""

    @abstractmethod
    async def authorize(self, service_type: ServiceType, settings: Any) -> Account | None:
        """Run the interactive flow for a service.

        Args:
            service_type: Service being authorized
            settings: OAuthServiceSettings for that service

        Returns:
            Account with tokens, or None if the user abandoned it
        """
        pass


__all__ = [
    "IAuthenticatedClient",
    "IMusicProvider",
    "IOAuthFlow",
    "IServiceConfigStore",
    "ITextPrompt",
    "ITrackLibrary",
    "IUserNotifier",
]
