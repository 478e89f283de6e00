"""Shared collaborators of the provider system.

Hey future me - this replaces the old "static manager instance everyone reaches into".
Everything a provider, orchestrator or policy needs is handed over explicitly via ONE
ServiceContext. Tests build it with fakes (see tests/unit/conftest.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from musichub.config import Settings
from musichub.domain.ports import IServiceConfigStore, ITrackLibrary, IUserNotifier

if TYPE_CHECKING:
    from musichub.application.services.provider_manager import ProviderManager
    from musichub.infrastructure.providers.registry import ServiceTypeRegistry


@dataclass
class ServiceContext:
    """Settings, stores, UI surface and transport, plus the provider collection."""

    settings: Settings
    registry: ServiceTypeRegistry
    config_store: IServiceConfigStore
    library: ITrackLibrary
    notifier: IUserNotifier
    transport: httpx.AsyncClient
    providers: ProviderManager = field(init=False)

    def __post_init__(self) -> None:
        from musichub.application.services.provider_manager import ProviderManager

        self.providers = ProviderManager(self)
