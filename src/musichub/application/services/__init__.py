"""Application services - provider lifecycle, login and sync orchestration."""

from musichub.application.services.auth_orchestrator import AuthOrchestrator
from musichub.application.services.progress import progress_scope

# Hey future me - ProviderManager is the ONLY writer of the provider collection.
# Everything else (auth, sync fan-out, YouTube fallback) goes through it.
from musichub.application.services.provider_manager import LoadResult, ProviderManager
from musichub.application.services.provider_sync_orchestrator import (
    AggregatedSyncResult,
    ProviderSyncOrchestrator,
)
from musichub.application.services.youtube_fallback import (
    FallbackOutcome,
    YouTubeFallbackPolicy,
)

__all__ = [
    "AggregatedSyncResult",
    "AuthOrchestrator",
    "FallbackOutcome",
    "LoadResult",
    "ProviderManager",
    "ProviderSyncOrchestrator",
    "YouTubeFallbackPolicy",
    "progress_scope",
]
