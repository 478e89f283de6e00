"""Provider implementations and the service type registry.

Architektur:
    domain/ports/provider.py           ← IMusicProvider / IAuthenticatedClient
    infrastructure/clients/            ← per-account clients
    infrastructure/providers/          ← providers + registry (this package)
"""

from musichub.infrastructure.providers.base import MusicProvider
from musichub.infrastructure.providers.registry import (
    LEGACY_SERVICE_ALIASES,
    ServiceTypeRegistry,
    build_default_registry,
    normalize_service_type,
)
from musichub.infrastructure.providers.streaming import (
    AmazonMusicProvider,
    GoogleMusicProvider,
    OneDriveProvider,
    SoundCloudProvider,
    StreamingProvider,
    YouTubeProvider,
)
from musichub.infrastructure.providers.tunez_provider import TunezProvider

__all__ = [
    "LEGACY_SERVICE_ALIASES",
    "AmazonMusicProvider",
    "GoogleMusicProvider",
    "MusicProvider",
    "OneDriveProvider",
    "ServiceTypeRegistry",
    "SoundCloudProvider",
    "StreamingProvider",
    "TunezProvider",
    "YouTubeProvider",
    "build_default_registry",
    "normalize_service_type",
]
