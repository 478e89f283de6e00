"""Per-account service clients."""

from musichub.infrastructure.clients.base import AuthenticatedClient
from musichub.infrastructure.clients.oauth import (
    CloudDriveClient,
    GoogleMusicClient,
    OAuthClient,
    OneDriveClient,
    RemoteTrack,
    SoundCloudClient,
    YouTubeOAuthClient,
)
from musichub.infrastructure.clients.tunez_client import TunezClient

__all__ = [
    "AuthenticatedClient",
    "CloudDriveClient",
    "GoogleMusicClient",
    "OAuthClient",
    "OneDriveClient",
    "RemoteTrack",
    "SoundCloudClient",
    "TunezClient",
    "YouTubeOAuthClient",
]
