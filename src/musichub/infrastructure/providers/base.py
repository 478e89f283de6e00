"""Shared provider plumbing: per-provider sync guard and error wrapping."""

from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from typing import TYPE_CHECKING

from musichub.domain.exceptions import DomainException, ProviderOperationError, SyncCancelled
from musichub.domain.ports import IMusicProvider
from musichub.infrastructure.observability import log_operation

if TYPE_CHECKING:
    from musichub.application.context import ServiceContext

logger = logging.getLogger(__name__)


class MusicProvider(IMusicProvider):
    """Base for concrete providers.

    Hey future me - the sync lock lives HERE, per provider instance! The orchestrator fans
    out without any locking, so two overlapping resync() calls on the same provider would
    otherwise write the same disk cache and ingest the same tracks twice. The second caller
    simply waits for the first one to finish and then runs its own pass.
    """

    def __init__(self, context: ServiceContext) -> None:
        """Initialize provider.

        Args:
            context: Shared services (library, provider manager, settings)
        """
        self._context = context
        self._sync_lock = asyncio.Lock()
        self._cancel_event = asyncio.Event()
        self._pending_syncs = 0

    @property
    def is_syncing(self) -> bool:
        return self._sync_lock.locked()

    def cancel_sync(self) -> None:
        """Stop the running pass and every pass queued behind it.

        Passes notice it at their next I/O checkpoint. No-op while idle, so the next sync
        is never cancelled in advance.
        """
        if self._pending_syncs == 0:
            logger.debug("cancel_sync on idle provider %s ignored", self.id)
            return
        self._cancel_event.set()

    async def sync_database(self) -> bool:
        """Run one serialized sync pass.

        Raises:
            SyncCancelled: cancel_sync() was requested while this pass ran or waited
            ProviderOperationError: Any other failure inside the pass (wrapped if needed)
        """
        self._pending_syncs += 1
        try:
            async with self._sync_lock:
                if self._cancel_event.is_set():
                    raise SyncCancelled(f"Sync of provider {self.id} cancelled before start")
                async with log_operation(
                    logger,
                    "provider_sync",
                    provider_id=self.id,
                    service=self.service_type.value,
                ):
                    try:
                        return await self._sync()
                    except DomainException:
                        raise
                    except Exception as e:
                        raise ProviderOperationError(
                            f"Sync failed: {e}",
                            service=self.service_type,
                            provider_id=self.id,
                            original_error=e,
                        ) from e
        finally:
            self._pending_syncs -= 1
            # Cancel request is spent once nothing is running or queued
            if self._pending_syncs == 0:
                self._cancel_event.clear()

    async def resync(self) -> bool:
        """No incremental mode anywhere: a resync is a full sync."""
        return await self.sync_database()

    @abstractmethod
    async def _sync(self) -> bool: ...
