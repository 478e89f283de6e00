"""
Login/logout toggle for the service buttons.

Hey future me – log_in_out() is a three-state machine per service:

    no provider         → create_and_login()
    provider, no email  → resync()   (e.g. anonymous default YouTube, restored Tunez)
    provider with email → logout()

NOTHING in here may raise into the UI. A cancelled prompt/browser is a normal outcome,
everything else gets logged with traceback and swallowed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from musichub.application.services.progress import progress_scope
from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import AuthenticationAbandoned, SyncCancelled

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)


class AuthOrchestrator:
    """Drives interactive login, re-sync and logout of providers."""

    def __init__(self, context: ServiceContext) -> None:
        self._context = context

    async def log_in_out(self, service_type: ServiceType) -> None:
        """Toggle the login state of a service."""
        provider = self._context.providers.get_by_service(service_type)
        try:
            if provider is None:
                await self.create_and_login(service_type)
            elif not provider.email:
                await provider.resync()
            else:
                await provider.logout()
        except (AuthenticationAbandoned, SyncCancelled, asyncio.CancelledError):
            logger.info("Login/logout of %s cancelled by user", service_type.value)
        except Exception as e:
            logger.exception("Login/logout of %s failed: %s", service_type.value, e)

    async def create_and_login(self, service_type: ServiceType) -> bool:
        """Create a client, authenticate it and register its provider.

        Returns:
            True if a provider was added (even if its first sync failed)
        """
        manager = self._context.providers
        client = await manager.create_client(service_type)
        if client is None:
            return False

        client.reset_data()
        try:
            account = await client.authenticate()
        except (AuthenticationAbandoned, asyncio.CancelledError):
            logger.info("Authentication for %s abandoned", service_type.value)
            return False
        except Exception as e:
            logger.exception("Authentication for %s failed: %s", service_type.value, e)
            return False
        if account is None:
            return False

        provider = await manager.add_provider(client)
        if provider is None:
            return False

        with progress_scope(self._context.notifier, "Syncing Database"):
            try:
                await provider.resync()
            except SyncCancelled:
                logger.info("Initial sync of %s provider %s cancelled", service_type.value, provider.id)
            except Exception as e:
                # Account is registered and persisted already; the next sync retries
                logger.exception("Initial sync of %s provider %s failed: %s", service_type.value, provider.id, e)
        return True
