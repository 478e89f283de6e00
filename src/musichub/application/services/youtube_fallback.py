"""
YouTube fallback resolution, run once at the end of ProviderManager.load().

Hey future me – YouTube is the one service that works WITHOUT an account (anonymous
default provider, id "youtube"). Google accounts can authorize YouTube too, so when the
user has a Google login we try to upgrade the anonymous default to a real account.

Rules, in order:
1. YouTube not configured (blank client id)  → SKIPPED
2. Any non-default YouTube provider exists   → LEFT_AS_IS (user already has an account)
3. Authenticated Google account present      → drop default, try to authenticate YouTube:
      account  → AUTHENTICATED
      no account/abandoned/error → default goes back in, DEFAULT_INSERTED
4. No YouTube provider at all                → DEFAULT_INSERTED
5. Otherwise                                 → UNCHANGED

Invariant: default and authenticated YouTube providers never coexist.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import AuthenticationAbandoned

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)


class FallbackOutcome(str, Enum):
    SKIPPED = "skipped"
    LEFT_AS_IS = "left_as_is"
    AUTHENTICATED = "authenticated"
    DEFAULT_INSERTED = "default_inserted"
    UNCHANGED = "unchanged"


class YouTubeFallbackPolicy:
    """Decides between the anonymous default and an authenticated YouTube provider."""

    def __init__(self, context: ServiceContext) -> None:
        self._context = context

    async def apply(self) -> FallbackOutcome:
        context = self._context
        if not context.settings.youtube.is_configured():
            logger.debug("YouTube not configured, skipping fallback resolution")
            return FallbackOutcome.SKIPPED

        manager = context.providers
        default_id = context.registry.default_id(ServiceType.YOUTUBE)
        youtube = [p for p in manager.providers() if p.service_type == ServiceType.YOUTUBE]
        if any(p.id != default_id for p in youtube):
            return FallbackOutcome.LEFT_AS_IS

        if manager.count_authenticated_google_accounts() > 0:
            for provider in youtube:
                await manager.discard(provider.id)
            if await self._authenticate():
                return FallbackOutcome.AUTHENTICATED
            await self._insert_default()
            return FallbackOutcome.DEFAULT_INSERTED

        if not youtube:
            await self._insert_default()
            return FallbackOutcome.DEFAULT_INSERTED
        return FallbackOutcome.UNCHANGED

    async def _authenticate(self) -> bool:
        manager = self._context.providers
        client = await manager.create_client(ServiceType.YOUTUBE)
        if client is None:
            return False
        try:
            account = await client.authenticate()
        except AuthenticationAbandoned:
            logger.info("YouTube authentication abandoned, using anonymous access")
            return False
        except Exception as e:
            logger.exception("YouTube authentication failed: %s", e)
            return False
        if account is None:
            return False
        return await manager.add_provider(client) is not None

    async def _insert_default(self) -> None:
        provider = self._context.registry.create_default_provider(ServiceType.YOUTUBE, self._context)
        await self._context.providers.insert(provider)
        logger.info("Using anonymous YouTube provider")
