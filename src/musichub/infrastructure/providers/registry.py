"""
Service Type Registry for musichub.

Hey future me – das ist die ZENTRALE STELLE für "which class talks to which service"!
Two explicit dispatch tables, both keyed by ServiceType:

    clients:   ServiceType → (client class, factory(identifier, transport))
    providers: ServiceType → factory(client, context)

Provider lookup uses client.service_type (an explicit field), NOT the client's runtime class.
Missing entries raise UnsupportedServiceError – the caller turns that into a "not
implemented" notice. Dropbox (and the retired FileSystem identity) are intentionally NOT
registered.

Verwendung:
    registry = build_default_registry(settings, oauth_flow, prompt)
    client = registry.create_client(ServiceType.TUNEZ, "7", transport)
    provider = registry.create_provider(client, context)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx

from musichub.config import Settings
from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import UnsupportedServiceError
from musichub.domain.ports import IAuthenticatedClient, IMusicProvider, IOAuthFlow, ITextPrompt
from musichub.infrastructure.clients import (
    CloudDriveClient,
    GoogleMusicClient,
    OneDriveClient,
    SoundCloudClient,
    TunezClient,
    YouTubeOAuthClient,
)
from musichub.infrastructure.providers.streaming import (
    AmazonMusicProvider,
    GoogleMusicProvider,
    OneDriveProvider,
    SoundCloudProvider,
    YouTubeProvider,
)
from musichub.infrastructure.providers.tunez_provider import TunezProvider

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, httpx.AsyncClient], IAuthenticatedClient]
ProviderFactory = Callable[[Any, "ServiceContext"], IMusicProvider]

# Old records stored OneDrive accounts under the FileSystem identity
LEGACY_SERVICE_ALIASES: dict[ServiceType, ServiceType] = {
    ServiceType.FILE_SYSTEM: ServiceType.ONEDRIVE,
}


def normalize_service_type(service: ServiceType) -> ServiceType:
    """Apply the legacy alias mapping to a persisted service identity."""
    return LEGACY_SERVICE_ALIASES.get(service, service)


class ServiceTypeRegistry:
    """Explicit factory tables for clients and providers."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._clients: dict[ServiceType, tuple[type[IAuthenticatedClient], ClientFactory]] = {}
        self._providers: dict[ServiceType, ProviderFactory] = {}
        self._default_ids: dict[ServiceType, str] = {}

    def register_client(
        self,
        service_type: ServiceType,
        client_type: type[IAuthenticatedClient],
        factory: ClientFactory | None = None,
    ) -> None:
        """Register the client class of a service.

        Args:
            service_type: Service key
            client_type: Concrete client class (what create_client() returns)
            factory: Builder taking (identifier, transport), defaults to the class itself
        """
        self._clients[service_type] = (client_type, factory or client_type)

    def register_provider(
        self,
        service_type: ServiceType,
        factory: ProviderFactory,
        default_id: str | None = None,
    ) -> None:
        """Register the provider builder of a service.

        Args:
            service_type: Service key (matched against client.service_type)
            factory: Builder taking (client, context)
            default_id: Id of the anonymous default instance, if the service has one
        """
        self._providers[service_type] = factory
        if default_id is not None:
            self._default_ids[service_type] = default_id

    def client_type(self, service_type: ServiceType) -> type[IAuthenticatedClient]:
        """Get the concrete client class registered for a service."""
        entry = self._clients.get(service_type)
        if entry is None:
            raise UnsupportedServiceError(service_type, "client")
        return entry[0]

    def create_client(
        self,
        service_type: ServiceType,
        identifier: str,
        transport: httpx.AsyncClient,
    ) -> IAuthenticatedClient:
        """Build a client for a service.

        Raises:
            UnsupportedServiceError: If no client is registered for the service
        """
        entry = self._clients.get(service_type)
        if entry is None:
            raise UnsupportedServiceError(service_type, "client")
        _, factory = entry
        return factory(identifier, transport)

    def create_provider(
        self, client: IAuthenticatedClient, context: ServiceContext
    ) -> IMusicProvider:
        """Build the provider wrapping a client.

        Raises:
            UnsupportedServiceError: If no provider is registered for client.service_type
        """
        factory = self._providers.get(client.service_type)
        if factory is None:
            raise UnsupportedServiceError(client.service_type, "provider")
        return factory(client, context)

    def default_id(self, service_type: ServiceType) -> str | None:
        """Id of a service's anonymous default provider (None if it has none)."""
        return self._default_ids.get(service_type)

    def create_default_provider(
        self, service_type: ServiceType, context: ServiceContext
    ) -> IMusicProvider:
        """Build the anonymous default provider of a service.

        Hey future me - this is a normal client+provider pair, just with the fixed default
        id and no account. It is never persisted.

        Raises:
            UnsupportedServiceError: If the service has no default provider
        """
        default_id = self._default_ids.get(service_type)
        if default_id is None:
            raise UnsupportedServiceError(service_type, "default provider")
        client = self.create_client(service_type, default_id, context.transport)
        return self.create_provider(client, context)

    def is_registered(self, service_type: ServiceType) -> bool:
        """Check if a service has both a client and a provider."""
        return service_type in self._clients and service_type in self._providers

    @property
    def registered_services(self) -> list[ServiceType]:
        """Services with a registered client, in registration order."""
        return list(self._clients.keys())


def build_default_registry(
    settings: Settings,
    oauth_flow: IOAuthFlow,
    prompt: ITextPrompt,
) -> ServiceTypeRegistry:
    """Registry with every supported service.

    Args:
        settings: App settings (OAuth endpoints, Tunez defaults)
        oauth_flow: Interactive OAuth collaborator for the OAuth clients
        prompt: Text input collaborator for the Tunez client
    """
    registry = ServiceTypeRegistry()

    registry.register_client(
        ServiceType.AMAZON,
        CloudDriveClient,
        lambda identifier, transport: CloudDriveClient(
            identifier, transport, settings.amazon, oauth_flow
        ),
    )
    registry.register_client(
        ServiceType.GOOGLE,
        GoogleMusicClient,
        lambda identifier, transport: GoogleMusicClient(
            identifier, transport, settings.google, oauth_flow
        ),
    )
    registry.register_client(
        ServiceType.ONEDRIVE,
        OneDriveClient,
        lambda identifier, transport: OneDriveClient(
            identifier, transport, settings.onedrive, oauth_flow
        ),
    )
    registry.register_client(
        ServiceType.SOUNDCLOUD,
        SoundCloudClient,
        lambda identifier, transport: SoundCloudClient(
            identifier, transport, settings.soundcloud, oauth_flow
        ),
    )
    registry.register_client(
        ServiceType.YOUTUBE,
        YouTubeOAuthClient,
        lambda identifier, transport: YouTubeOAuthClient(
            identifier, transport, settings.youtube, oauth_flow
        ),
    )
    registry.register_client(
        ServiceType.TUNEZ,
        TunezClient,
        lambda identifier, transport: TunezClient(
            identifier, transport, prompt, settings.tunez.default_address
        ),
    )

    registry.register_provider(ServiceType.AMAZON, AmazonMusicProvider)
    registry.register_provider(ServiceType.GOOGLE, GoogleMusicProvider)
    registry.register_provider(ServiceType.ONEDRIVE, OneDriveProvider)
    registry.register_provider(ServiceType.SOUNDCLOUD, SoundCloudProvider)
    registry.register_provider(
        ServiceType.YOUTUBE, YouTubeProvider, default_id=YouTubeProvider.DEFAULT_ID
    )
    registry.register_provider(ServiceType.TUNEZ, TunezProvider)

    logger.debug(
        "Service registry built: %s",
        ", ".join(service.value for service in registry.registered_services),
    )
    return registry
