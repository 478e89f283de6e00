"""Domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


# Hey future me, ServiceType is THE key of the whole system! The registry dispatches on it,
# records persist it (as the string value, not an int), the UI looks up titles/icons by it.
# FILE_SYSTEM is a RETIRED identity - old records used it for OneDrive. It stays in the enum
# only so those records can still be parsed; the registry normalizes it on load.
class ServiceType(str, Enum):
    """Closed set of remote music services."""

    AMAZON = "amazon"
    DROPBOX = "dropbox"
    FILE_SYSTEM = "filesystem"
    GOOGLE = "google"
    ONEDRIVE = "onedrive"
    SOUNDCLOUD = "soundcloud"
    YOUTUBE = "youtube"
    TUNEZ = "tunez"


class ProviderCapability(str, Enum):
    """Optional features a provider may advertise."""

    NONE = "none"
    SEARCHABLE = "searchable"


class MediaType(str, Enum):
    """Kind of media a track points at."""

    AUDIO = "audio"
    VIDEO = "video"


@dataclass
class Account:
    """Result of a successful authentication.

    A ``None`` account (instead of this object) means the attempt was
    abandoned without an error.
    """

    identifier: str
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: datetime | None = None


# Listen up, this is the ONLY thing we persist per account! id is the integer primary key and
# ALSO the client's identifier (as string) - that's the foreign key between a live provider and
# its row. extra_data is an opaque blob owned by the client (tokens, server address, ...).
# Never parse extra_data outside the client class that wrote it!
@dataclass
class ServiceConfigRecord:
    """Durable per-account configuration."""

    id: int
    service: ServiceType
    device_id: str = ""
    extra_data: str = ""


@dataclass
class Track:
    """Track metadata handed to the shared library.

    Identity is ``(service_id, id)``: the same remote id from two accounts
    are two different tracks.
    """

    id: str
    service_id: str
    name: str
    artist: str = ""
    album_artist: str = ""
    album: str = ""
    genre: str = ""
    duration: float = 0.0
    disc: int = 0
    track_number: int = 0
    file_extension: str = ""
    media_type: MediaType = MediaType.AUDIO
    album_artwork: list[str] = field(default_factory=list)
    artist_artwork: list[str] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        """Unique library key."""
        return (self.service_id, self.id)


__all__ = [
    "Account",
    "MediaType",
    "ProviderCapability",
    "ServiceConfigRecord",
    "ServiceType",
    "Track",
]
