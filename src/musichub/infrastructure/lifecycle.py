"""Application lifecycle management for startup and shutdown tasks.

This module wires the provider system together and tears it down again:
logging → directories → database → HTTP pool → registry → context → load().

The UI shell enters lifespan() once and keeps the yielded ServiceContext for as
long as it runs.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from musichub.application.context import ServiceContext
from musichub.config import Settings, get_settings
from musichub.domain.exceptions import ConfigurationError
from musichub.domain.ports import IOAuthFlow, ITextPrompt, IUserNotifier
from musichub.infrastructure.integrations import HttpClientPool
from musichub.infrastructure.observability import configure_logging
from musichub.infrastructure.persistence import (
    Database,
    ServiceConfigRepository,
    TrackLibraryRepository,
)
from musichub.infrastructure.providers import build_default_registry

logger = logging.getLogger(__name__)


# Hey future me, this validates SQLite paths BEFORE we try creating the DB engine! SQLite needs
# to create temp files (-journal, -wal, -shm) in the same directory as the .db file, so we check
# the directory is writable. We DON'T pre-create the .db file - SQLite handles that.
# Only runs for file-based SQLite URLs (returns early for in-memory/other engines).
def _validate_sqlite_path(settings: Settings) -> None:
    """Validate SQLite database path accessibility before engine creation."""
    db_path = settings._get_sqlite_db_path()
    if db_path is None:
        return

    try:
        if db_path.parent and str(db_path.parent) != ".":
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug("Ensured SQLite parent directory exists: %s", db_path.parent)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Update MUSICHUB_DATABASE__URL or adjust directory permissions."
        ) from exc

    try:
        test_file = db_path.parent / f".{db_path.stem}_write_test"
        test_file.write_bytes(b"test")
        test_file.unlink()
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to write files in database directory '{db_path.parent}': {exc}. "
            "SQLite requires write permissions to create database and journal files."
        ) from exc


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# The try/finally makes sure the HTTP pool and DB engine get closed even if startup blows up
# half way (e.g. load() raising on a broken store).
@asynccontextmanager
async def lifespan(
    notifier: IUserNotifier,
    prompt: ITextPrompt,
    oauth_flow: IOAuthFlow,
    settings: Settings | None = None,
) -> AsyncGenerator[ServiceContext, None]:
    """Start the provider system and yield its ServiceContext.

    Args:
        notifier: UI surface for notices and progress indicators
        prompt: Text input used by the Tunez client
        oauth_flow: Interactive OAuth hand-off used by the OAuth clients
        settings: Settings override (defaults to get_settings())
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    db: Database | None = None
    try:
        settings.ensure_directories()
        _validate_sqlite_path(settings)

        db = Database(settings)
        await db.create_tables()
        logger.info("Database initialized: %s", settings.database.url)

        transport = await HttpClientPool.get_client()
        context = ServiceContext(
            settings=settings,
            registry=build_default_registry(settings, oauth_flow, prompt),
            config_store=ServiceConfigRepository(db),
            library=TrackLibraryRepository(db),
            notifier=notifier,
            transport=transport,
        )

        result = await context.providers.load()
        logger.info(
            "Providers ready: %d loaded, %d failed, fallback=%s",
            len(result.loaded),
            len(result.failed),
            result.fallback.value if result.fallback else "n/a",
        )

        yield context
    finally:
        logger.info("Shutting down application")
        await HttpClientPool.close()
        if db is not None:
            await db.close()
        logger.info("Application shutdown complete")
