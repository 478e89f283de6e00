# Hey future me - ProviderSyncOrchestrator ist der MULTI-PROVIDER Fan-out!
# Statt jeden Provider einzeln in der UI anzustoßen, startet dieser Service
# EINE Coroutine pro Provider und sammelt die Ergebnisse.
#
# WICHTIG: Dieser Service lockt NICHTS. Jeder Provider serialisiert seine eigenen
# Syncs (siehe infrastructure/providers/base.py). One failing provider never cancels
# the others - gather(return_exceptions=True) keeps them all running.
"""Multi-provider sync orchestrator."""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from musichub.application.services.progress import progress_scope
from musichub.domain.exceptions import SyncCancelled
from musichub.domain.ports import IMusicProvider
from musichub.infrastructure.observability import set_correlation_id

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass
class AggregatedSyncResult:
    """Result from a multi-provider sync.

    Hey future me - "failed" means the provider returned False, "errors" means it raised.
    Both are keyed by provider id so the UI can point at the broken account.
    """

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)  # provider id -> error

    @property
    def success(self) -> bool:
        return not self.failed and not self.errors

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.errors)


class ProviderSyncOrchestrator:
    """Runs sync passes over every provider concurrently."""

    def __init__(self, context: "ServiceContext") -> None:
        self._context = context

    async def start_sync(self) -> AggregatedSyncResult:
        """Background sync of all providers."""
        return await self._fan_out("start_sync", lambda provider: provider.sync_database())

    async def resync(self) -> AggregatedSyncResult:
        """User-triggered refresh of all providers, with a progress indicator."""
        with progress_scope(self._context.notifier, "Syncing"):
            return await self._fan_out("resync", lambda provider: provider.resync())

    async def _fan_out(
        self,
        operation: str,
        run: Callable[[IMusicProvider], Awaitable[bool]],
    ) -> AggregatedSyncResult:
        set_correlation_id(f"{operation}-{uuid.uuid4().hex[:8]}")

        # Snapshot: a logout during the pass must not break iteration
        providers = self._context.providers.providers()
        outcomes = await asyncio.gather(
            *(run(provider) for provider in providers),
            return_exceptions=True,
        )

        result = AggregatedSyncResult()
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, (SyncCancelled, asyncio.CancelledError)):
                # A cancelled pass did not complete, but it is not an error either
                logger.info("Sync of provider %s was cancelled", provider.id)
                result.failed.append(provider.id)
            elif isinstance(outcome, BaseException):
                logger.warning("Sync of provider %s failed: %s", provider.id, outcome)
                result.errors[provider.id] = str(outcome)
            elif outcome:
                result.succeeded.append(provider.id)
            else:
                result.failed.append(provider.id)

        logger.info(
            "ProviderSyncOrchestrator: %s complete - %d ok, %d failed, %d errors",
            operation,
            len(result.succeeded),
            len(result.failed),
            len(result.errors),
        )
        return result
