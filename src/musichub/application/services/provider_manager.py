"""
Provider collection and lifecycle.

Hey future me – das ist die EINZIGE Stelle, die die Provider-Collection verändert!
The collection is a dict keyed by provider id (client identifier as string, or a fixed
default id like "youtube"). Insertion order matters: get_by_service() returns the FIRST
match, searchable_service_types() keeps collection order.

Flow:
    load()          → rebuild every provider from persisted ServiceConfigRecords
    create_client() → fresh client with a newly allocated id (not persisted yet)
    add_provider()  → wrap client, persist record, insert
    remove_provider() → delete record + collection entry

Writes go through self._lock (single writer). Readers that fan out (sync orchestrator)
take a snapshot via providers() so a concurrent logout can't break their iteration.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from musichub.domain.entities import ProviderCapability, ServiceConfigRecord, ServiceType
from musichub.domain.exceptions import UnsupportedServiceError
from musichub.domain.ports import IAuthenticatedClient, IMusicProvider
from musichub.infrastructure.providers.registry import normalize_service_type

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext
    from musichub.application.services.youtube_fallback import FallbackOutcome

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of ProviderManager.load()."""

    loaded: list[str] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    fallback: FallbackOutcome | None = None


class ProviderManager:
    """Owns the live provider collection."""

    def __init__(self, context: ServiceContext) -> None:
        """Initialize manager.

        Args:
            context: Shared collaborators (registry, config store, notifier, transport)
        """
        self._context = context
        self._providers: dict[str, IMusicProvider] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    # =========================================================================
    # STARTUP
    # =========================================================================

    async def load(self) -> LoadResult:
        """Rebuild providers from persisted records, then apply the YouTube fallback.

        Hey future me - one broken record (unknown service, corrupt extra data) must NEVER
        stop the others from loading. Failures are logged, reported in the result and the
        loop goes on. Second call is a no-op.
        """
        from musichub.application.services.youtube_fallback import YouTubeFallbackPolicy

        result = LoadResult()
        if self._loaded:
            logger.debug("Provider collection already loaded, skipping")
            return result

        # A store failure here propagates and leaves load() retryable
        records = await self._context.config_store.all()
        self._loaded = True
        for record in records:
            try:
                provider = self._build_from_record(record)
            except UnsupportedServiceError as e:
                logger.warning("Skipping service record %s: %s", record.id, e.message)
                self._context.notifier.show_not_implemented({"Service Type": record.service.value})
                result.failed.append(record.id)
                continue
            except Exception as e:
                logger.exception("Failed to restore service record %s: %s", record.id, e)
                result.failed.append(record.id)
                continue

            await self.insert(provider)
            result.loaded.append(provider.id)

        result.fallback = await YouTubeFallbackPolicy(self._context).apply()

        logger.info(
            "Loaded %d provider(s), %d record(s) failed",
            len(result.loaded),
            len(result.failed),
        )
        return result

    def _build_from_record(self, record: ServiceConfigRecord) -> IMusicProvider:
        service = normalize_service_type(record.service)
        registry = self._context.registry
        client = registry.create_client(service, str(record.id), self._context.transport)
        client.device_id = record.device_id
        client.extra_data_string = record.extra_data
        return registry.create_provider(client, self._context)

    # =========================================================================
    # CLIENT / PROVIDER CREATION
    # =========================================================================

    async def create_client(self, service_type: ServiceType) -> IAuthenticatedClient | None:
        """Build a fresh client with a newly allocated record id.

        Returns:
            The client, or None if the service has no implementation (user is notified)
        """
        try:
            client_type = self._context.registry.client_type(service_type)
        except UnsupportedServiceError:
            self._context.notifier.show_not_implemented({"Service Type": service_type.value})
            return None

        new_id = await self._context.config_store.next_id()
        logger.debug("Creating %s for new %s account %s", client_type.__name__, service_type.value, new_id)
        return self._context.registry.create_client(
            service_type, str(new_id), self._context.transport
        )

    async def add_provider(self, client: IAuthenticatedClient) -> IMusicProvider | None:
        """Wrap a client in its provider, persist it and add it to the collection.

        Returns:
            The new provider, or None if the service has no provider (user is notified)
        """
        try:
            provider = self._context.registry.create_provider(client, self._context)
        except UnsupportedServiceError as e:
            logger.warning("Cannot add provider: %s", e.message)
            self._context.notifier.show_not_implemented({"Service Type": client.service_type.value})
            return None

        await self.save_client(client)
        await self.insert(provider)
        logger.info("Added %s provider %s", provider.service_type.value, provider.id)
        return provider

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    async def save_client(self, client: IAuthenticatedClient) -> None:
        """Upsert the record of a client (tokens/addresses may have changed)."""
        record = self._to_record(client)
        if record is None:
            return
        await self._context.config_store.add(record)

    async def delete_client(self, client: IAuthenticatedClient) -> None:
        """Delete the record of a client."""
        record = self._to_record(client)
        if record is None:
            return
        await self._context.config_store.delete(record)

    async def remove_provider(self, client: IAuthenticatedClient) -> None:
        """Delete the record and the collection entry of a client."""
        await self.delete_client(client)
        await self.discard(client.identifier)
        logger.info("Removed %s provider %s", client.service_type.value, client.identifier)

    def _to_record(self, client: IAuthenticatedClient) -> ServiceConfigRecord | None:
        # Default providers use a fixed non-numeric id and are never persisted
        if not client.identifier.isdigit():
            logger.debug("Client %s has no persistent record", client.identifier)
            return None
        return ServiceConfigRecord(
            id=int(client.identifier),
            service=self._record_service(client),
            device_id=client.device_id,
            extra_data=client.extra_data_string,
        )

    def _record_service(self, client: IAuthenticatedClient) -> ServiceType:
        try:
            self._context.registry.client_type(client.service_type)
        except UnsupportedServiceError:
            self._context.notifier.show_not_implemented({"Api type": type(client).__name__})
            return ServiceType.FILE_SYSTEM
        return client.service_type

    # =========================================================================
    # RAW COLLECTION MUTATION
    # =========================================================================

    async def insert(self, provider: IMusicProvider) -> None:
        """Put a provider into the collection (replaces one with the same id)."""
        async with self._lock:
            self._providers[provider.id] = provider

    async def discard(self, provider_id: str) -> IMusicProvider | None:
        """Take a provider out of the collection without touching persistence."""
        async with self._lock:
            return self._providers.pop(provider_id, None)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def providers(self) -> list[IMusicProvider]:
        """Snapshot of the collection, in insertion order."""
        return list(self._providers.values())

    def get(self, provider_id: str) -> IMusicProvider | None:
        return self._providers.get(provider_id)

    def get_by_service(self, service_type: ServiceType) -> IMusicProvider | None:
        """First provider of a service, in insertion order."""
        for provider in self._providers.values():
            if provider.service_type == service_type:
                return provider
        return None

    def get_account(self, service_type: ServiceType) -> str | None:
        """Email of the first provider of a service (None if there is none)."""
        provider = self.get_by_service(service_type)
        return provider.email if provider is not None else None

    def count_authenticated_google_accounts(self) -> int:
        """Google providers holding an account, with or without an email."""
        return sum(
            1
            for provider in self._providers.values()
            if provider.service_type == ServiceType.GOOGLE
            and provider.requires_authentication
            and provider.has_account
        )

    def searchable_service_types(self) -> list[ServiceType]:
        """Distinct services with at least one searchable provider, in collection order."""
        services: list[ServiceType] = []
        for provider in self._providers.values():
            if (
                ProviderCapability.SEARCHABLE in provider.capabilities
                and provider.service_type not in services
            ):
                services.append(provider.service_type)
        return services

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers
