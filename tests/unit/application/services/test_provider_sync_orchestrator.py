"""Tests for ProviderSyncOrchestrator fan-out."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import RecordingNotifier

from musichub.application.context import ServiceContext
from musichub.application.services.provider_sync_orchestrator import (
    AggregatedSyncResult,
    ProviderSyncOrchestrator,
)
from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import ProviderOperationError, SyncCancelled
from musichub.domain.ports import IMusicProvider


def _provider(provider_id: str, outcome: object = True) -> MagicMock:
    """Mock provider whose sync_database/resync return (or raise) `outcome`."""
    provider = MagicMock(spec=IMusicProvider)
    provider.id = provider_id
    provider.service_type = ServiceType.GOOGLE
    if isinstance(outcome, BaseException):
        provider.sync_database = AsyncMock(side_effect=outcome)
        provider.resync = AsyncMock(side_effect=outcome)
    else:
        provider.sync_database = AsyncMock(return_value=outcome)
        provider.resync = AsyncMock(return_value=outcome)
    return provider


class TestAggregatedSyncResult:
    def test_success_requires_no_failures_and_no_errors(self) -> None:
        assert AggregatedSyncResult(succeeded=["1"]).success
        assert not AggregatedSyncResult(succeeded=["1"], failed=["2"]).success
        assert not AggregatedSyncResult(errors={"3": "boom"}).success
        assert AggregatedSyncResult(succeeded=["1"], failed=["2"], errors={"3": "x"}).total == 3


class TestStartSync:
    @pytest.mark.asyncio
    async def test_one_failing_provider_does_not_stop_others(
        self, context: ServiceContext
    ) -> None:
        providers = [
            _provider("1"),
            _provider("2", ProviderOperationError("server down")),
            _provider("3"),
            _provider("4"),
        ]
        for provider in providers:
            await context.providers.insert(provider)

        result = await ProviderSyncOrchestrator(context).start_sync()

        assert result.succeeded == ["1", "3", "4"]
        assert list(result.errors) == ["2"]
        assert "server down" in result.errors["2"]
        assert not result.success
        for provider in providers:
            provider.sync_database.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_false_result_is_reported_as_failed(self, context: ServiceContext) -> None:
        await context.providers.insert(_provider("1", False))

        result = await ProviderSyncOrchestrator(context).start_sync()

        assert result.failed == ["1"]
        assert result.errors == {}

    @pytest.mark.asyncio
    async def test_cancelled_pass_is_failed_not_error(self, context: ServiceContext) -> None:
        await context.providers.insert(_provider("1"))
        await context.providers.insert(_provider("2", SyncCancelled()))

        result = await ProviderSyncOrchestrator(context).start_sync()

        assert result.succeeded == ["1"]
        assert result.failed == ["2"]
        assert result.errors == {}

    @pytest.mark.asyncio
    async def test_providers_run_concurrently(self, context: ServiceContext) -> None:
        """The first provider waits for the second one - sequential runs would hang."""
        second_started = asyncio.Event()

        async def wait_for_second() -> bool:
            await second_started.wait()
            return True

        async def start_second() -> bool:
            second_started.set()
            return True

        first, second = _provider("1"), _provider("2")
        first.sync_database = AsyncMock(side_effect=wait_for_second)
        second.sync_database = AsyncMock(side_effect=start_second)
        await context.providers.insert(first)
        await context.providers.insert(second)

        result = await asyncio.wait_for(ProviderSyncOrchestrator(context).start_sync(), timeout=2)

        assert result.succeeded == ["1", "2"]

    @pytest.mark.asyncio
    async def test_empty_collection(self, context: ServiceContext) -> None:
        result = await ProviderSyncOrchestrator(context).start_sync()

        assert result.total == 0
        assert result.success


class TestResync:
    @pytest.mark.asyncio
    async def test_progress_shown_and_hidden(
        self, context: ServiceContext, notifier: RecordingNotifier
    ) -> None:
        await context.providers.insert(_provider("1"))
        await context.providers.insert(_provider("2", RuntimeError("boom")))

        result = await ProviderSyncOrchestrator(context).resync()

        assert result.succeeded == ["1"]
        assert list(result.errors) == ["2"]
        assert notifier.shown == ["Syncing"]
        assert notifier.hidden == ["Syncing"]
