"""Tests for the service type registry."""

import httpx
import pytest

from musichub.application.context import ServiceContext
from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import UnsupportedServiceError
from musichub.infrastructure.clients import (
    CloudDriveClient,
    GoogleMusicClient,
    OneDriveClient,
    SoundCloudClient,
    TunezClient,
    YouTubeOAuthClient,
)
from musichub.infrastructure.providers import (
    AmazonMusicProvider,
    GoogleMusicProvider,
    OneDriveProvider,
    ServiceTypeRegistry,
    SoundCloudProvider,
    TunezProvider,
    YouTubeProvider,
    normalize_service_type,
)

# Hey future me - "exact type" matters here: a subclass sneaking in (e.g. the YouTube OAuth
# client being returned for Google) would still pass an isinstance() check.


class TestCreateClient:
    """Client dispatch by service type."""

    @pytest.mark.parametrize(
        ("service", "expected"),
        [
            (ServiceType.AMAZON, CloudDriveClient),
            (ServiceType.GOOGLE, GoogleMusicClient),
            (ServiceType.ONEDRIVE, OneDriveClient),
            (ServiceType.SOUNDCLOUD, SoundCloudClient),
            (ServiceType.YOUTUBE, YouTubeOAuthClient),
            (ServiceType.TUNEZ, TunezClient),
        ],
    )
    def test_returns_exact_client_type(
        self,
        registry: ServiceTypeRegistry,
        transport: httpx.AsyncClient,
        service: ServiceType,
        expected: type,
    ) -> None:
        """Each registered service builds exactly its own client class."""
        client = registry.create_client(service, "7", transport)

        assert type(client) is expected
        assert client.identifier == "7"
        assert client.service_type == service
        assert registry.client_type(service) is expected

    @pytest.mark.parametrize("service", [ServiceType.DROPBOX, ServiceType.FILE_SYSTEM])
    def test_unregistered_service_raises(
        self,
        registry: ServiceTypeRegistry,
        transport: httpx.AsyncClient,
        service: ServiceType,
    ) -> None:
        """Dropbox and the retired FileSystem identity have no client."""
        with pytest.raises(UnsupportedServiceError) as exc_info:
            registry.create_client(service, "1", transport)
        assert exc_info.value.service == service

        with pytest.raises(UnsupportedServiceError):
            registry.client_type(service)


class TestCreateProvider:
    """Provider dispatch by the client's service_type."""

    @pytest.mark.parametrize(
        ("service", "expected"),
        [
            (ServiceType.AMAZON, AmazonMusicProvider),
            (ServiceType.GOOGLE, GoogleMusicProvider),
            (ServiceType.ONEDRIVE, OneDriveProvider),
            (ServiceType.SOUNDCLOUD, SoundCloudProvider),
            (ServiceType.YOUTUBE, YouTubeProvider),
        ],
    )
    def test_oauth_services(
        self,
        registry: ServiceTypeRegistry,
        context: ServiceContext,
        service: ServiceType,
        expected: type,
    ) -> None:
        client = registry.create_client(service, "3", context.transport)
        provider = registry.create_provider(client, context)

        assert type(provider) is expected
        assert provider.id == "3"
        assert provider.service_type == service

    def test_tunez_provider_uses_client_address(
        self, registry: ServiceTypeRegistry, context: ServiceContext
    ) -> None:
        client = registry.create_client(ServiceType.TUNEZ, "4", context.transport)
        client.extra_data_string = '{"base_address": "http://tunez.local:51986/"}'

        provider = registry.create_provider(client, context)

        assert type(provider) is TunezProvider
        assert provider.email == "http://tunez.local:51986/"
        assert provider.server.details.hostname == "tunez.local"
        assert provider.server.details.port == 51986

    def test_empty_registry_raises_for_provider(
        self, registry: ServiceTypeRegistry, context: ServiceContext
    ) -> None:
        client = registry.create_client(ServiceType.GOOGLE, "1", context.transport)

        with pytest.raises(UnsupportedServiceError) as exc_info:
            ServiceTypeRegistry().create_provider(client, context)
        assert exc_info.value.kind == "provider"


class TestDefaultProvider:
    """Anonymous default provider support."""

    def test_youtube_has_default(
        self, registry: ServiceTypeRegistry, context: ServiceContext
    ) -> None:
        provider = registry.create_default_provider(ServiceType.YOUTUBE, context)

        assert registry.default_id(ServiceType.YOUTUBE) == YouTubeProvider.DEFAULT_ID
        assert isinstance(provider, YouTubeProvider)
        assert provider.id == "youtube"
        assert provider.is_default
        assert provider.requires_authentication is False
        assert provider.email == ""

    def test_service_without_default_raises(
        self, registry: ServiceTypeRegistry, context: ServiceContext
    ) -> None:
        assert registry.default_id(ServiceType.GOOGLE) is None
        with pytest.raises(UnsupportedServiceError):
            registry.create_default_provider(ServiceType.GOOGLE, context)


class TestRegistration:
    """Registration helpers and legacy aliases."""

    def test_registered_services(self, registry: ServiceTypeRegistry) -> None:
        assert ServiceType.DROPBOX not in registry.registered_services
        assert registry.is_registered(ServiceType.TUNEZ)
        assert not registry.is_registered(ServiceType.DROPBOX)

    def test_legacy_filesystem_alias(self) -> None:
        assert normalize_service_type(ServiceType.FILE_SYSTEM) == ServiceType.ONEDRIVE
        assert normalize_service_type(ServiceType.GOOGLE) == ServiceType.GOOGLE

    def test_register_client_without_factory_uses_class(
        self, transport: httpx.AsyncClient
    ) -> None:
        registry = ServiceTypeRegistry()
        registry.register_client(ServiceType.DROPBOX, _PlainClient)

        client = registry.create_client(ServiceType.DROPBOX, "9", transport)

        assert type(client) is _PlainClient
        assert client.identifier == "9"


class _PlainClient(TunezClient):
    """Client whose constructor matches (identifier, transport)."""

    def __init__(self, identifier: str, transport: httpx.AsyncClient) -> None:
        super().__init__(identifier, transport, prompt=None)  # type: ignore[arg-type]
