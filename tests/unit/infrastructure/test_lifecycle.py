"""Tests for the application lifespan (startup + shutdown wiring)."""

from pathlib import Path

import pytest
from conftest import RecordingNotifier, ScriptedOAuthFlow, ScriptedPrompt

from musichub.config import Settings
from musichub.domain.entities import ServiceConfigRecord, ServiceType
from musichub.infrastructure.integrations import HttpClientPool
from musichub.infrastructure.lifecycle import lifespan
from musichub.infrastructure.persistence import Database, ServiceConfigRepository
from musichub.infrastructure.providers import GoogleMusicProvider


@pytest.fixture
def app_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        lib_dir=tmp_path / "lib",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'db' / 'musichub.db'}"},
    )


class TestLifespan:
    @pytest.mark.asyncio
    async def test_startup_restores_providers_and_shutdown_closes_pool(
        self, app_settings: Settings
    ) -> None:
        app_settings._get_sqlite_db_path().parent.mkdir(parents=True)
        db = Database(app_settings)
        await db.create_tables()
        await ServiceConfigRepository(db).add(
            ServiceConfigRecord(1, ServiceType.GOOGLE, extra_data='{"email": "a@x.com"}')
        )
        await db.close()

        async with lifespan(
            RecordingNotifier(), ScriptedPrompt(), ScriptedOAuthFlow(), settings=app_settings
        ) as context:
            provider = context.providers.get("1")
            assert isinstance(provider, GoogleMusicProvider)
            assert provider.email == "a@x.com"
            assert app_settings.lib_dir.is_dir()
            assert HttpClientPool.is_initialized()

        assert not HttpClientPool.is_initialized()

    @pytest.mark.asyncio
    async def test_empty_database_starts_cleanly(self, app_settings: Settings) -> None:
        async with lifespan(
            RecordingNotifier(), ScriptedPrompt(), ScriptedOAuthFlow(), settings=app_settings
        ) as context:
            assert len(context.providers) == 0
            assert await context.config_store.next_id() == 1
