"""Shared fakes and fixtures for the unit tests.

Hey future me - these fakes implement the domain ports in memory so the application and
provider tests never need a database or a real server. Repository tests use a real
aiosqlite file instead (see infrastructure/persistence/test_repositories.py).
"""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from musichub.application.context import ServiceContext
from musichub.config import OAuthServiceSettings, Settings
from musichub.domain.entities import Account, ServiceConfigRecord, ServiceType, Track
from musichub.domain.exceptions import AuthenticationAbandoned
from musichub.domain.ports import (
    IOAuthFlow,
    IServiceConfigStore,
    ITextPrompt,
    ITrackLibrary,
    IUserNotifier,
)
from musichub.infrastructure.providers import ServiceTypeRegistry, build_default_registry

TUNEZ_ADDRESS = "http://tunez.local:51986"

TUNEZ_CATALOG: list[dict[str, Any]] = [
    {
        "UUID": 1,
        "Name": "First Song",
        "TrackArtist": "Artist",
        "AlbumArtist": "Artist",
        "Album": "Album",
        "Duration": 180.5,
        "Disc": 1,
        "Number": 1,
        "AlbumArt": "cover.jpg",
    },
    {
        "UUID": 2,
        "Name": "Second Song",
        "TrackArtist": "Artist",
        "AlbumArtist": "Artist",
        "Album": "Album",
        "Duration": 201.0,
        "Disc": 1,
        "Number": 2,
    },
]


class InMemoryConfigStore(IServiceConfigStore):
    def __init__(self, records: list[ServiceConfigRecord] | None = None) -> None:
        self.records: dict[int, ServiceConfigRecord] = {r.id: r for r in records or []}

    async def add(self, record: ServiceConfigRecord) -> None:
        self.records[record.id] = record

    async def delete(self, record: ServiceConfigRecord) -> None:
        self.records.pop(record.id, None)

    async def all(self) -> list[ServiceConfigRecord]:
        return [self.records[key] for key in sorted(self.records)]

    async def next_id(self) -> int:
        return max(self.records, default=0) + 1


class InMemoryTrackLibrary(ITrackLibrary):
    def __init__(self) -> None:
        self.tracks: dict[tuple[str, str], Track] = {}
        self._seen: dict[str, set[str]] = {}

    async def process_tracks(self, service_id: str, tracks: list[Track]) -> int:
        seen = self._seen.setdefault(service_id, set())
        for track in tracks:
            self.tracks[track.key] = track
            seen.add(track.id)
        return len(tracks)

    async def finalize_processing(self, service_id: str) -> int:
        seen = self._seen.pop(service_id, set())
        stale = [key for key in self.tracks if key[0] == service_id and key[1] not in seen]
        for key in stale:
            del self.tracks[key]
        return len(stale)

    async def remove_service_tracks(self, service_id: str) -> int:
        keys = [key for key in self.tracks if key[0] == service_id]
        for key in keys:
            del self.tracks[key]
        return len(keys)

    def for_service(self, service_id: str) -> list[Track]:
        return sorted(
            (t for t in self.tracks.values() if t.service_id == service_id),
            key=lambda t: t.id,
        )


class RecordingNotifier(IUserNotifier):
    def __init__(self) -> None:
        self.not_implemented: list[dict[str, str]] = []
        self.shown: list[str] = []
        self.hidden: list[str] = []

    def show_not_implemented(self, details: dict[str, str]) -> None:
        self.not_implemented.append(details)

    def show_progress(self, title: str) -> Any:
        self.shown.append(title)
        return title

    def hide_progress(self, handle: Any) -> None:
        self.hidden.append(handle)


class ScriptedPrompt(ITextPrompt):
    """Answers every prompt with a fixed value (None = user cancels)."""

    def __init__(self, answer: str | None = TUNEZ_ADDRESS) -> None:
        self.answer = answer
        self.asked: list[str] = []

    async def get_text_input(self, title: str, default: str = "") -> str:
        self.asked.append(title)
        if self.answer is None:
            raise AuthenticationAbandoned()
        return self.answer


class ScriptedOAuthFlow(IOAuthFlow):
    """Grants accounts per service; services missing from `accounts` get None."""

    def __init__(self) -> None:
        self.accounts: dict[ServiceType, Account] = {}
        self.errors: dict[ServiceType, Exception] = {}
        self.calls: list[ServiceType] = []

    async def authorize(self, service_type: ServiceType, settings: Any) -> Account | None:
        self.calls.append(service_type)
        if service_type in self.errors:
            raise self.errors[service_type]
        return self.accounts.get(service_type)


def oauth_extra_data(email: str) -> str:
    """extra_data blob of a logged-in OAuth client."""
    return json.dumps({"email": email, "access_token": "token-" + email})


def tunez_handler(catalog: list[dict[str, Any]] | None = None) -> Any:
    """MockTransport handler serving a Tunez catalog."""
    payload = json.dumps(TUNEZ_CATALOG if catalog is None else catalog).encode()

    def handler(request: httpx.Request) -> httpx.Response:
        if "FetchCatalog" in str(request.url):
            return httpx.Response(200, content=payload)
        return httpx.Response(404)

    return handler


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with YouTube NOT configured (fallback policy is skipped)."""
    return Settings(
        _env_file=None,
        lib_dir=tmp_path / "lib",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"},
    )


@pytest.fixture
def youtube_settings(settings: Settings) -> Settings:
    """Settings with a YouTube client id, so the fallback policy runs."""
    return settings.model_copy(
        update={"youtube": OAuthServiceSettings(client_id="yt-client", api_base_url="https://yt.test/")}
    )


@pytest.fixture
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def library() -> InMemoryTrackLibrary:
    return InMemoryTrackLibrary()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def prompt() -> ScriptedPrompt:
    return ScriptedPrompt()


@pytest.fixture
def oauth_flow() -> ScriptedOAuthFlow:
    return ScriptedOAuthFlow()


@pytest.fixture
def transport() -> httpx.AsyncClient:
    """HTTP client whose requests are answered by a fake Tunez server.

    MockTransport holds no connections, so the client needs no closing.
    """
    return httpx.AsyncClient(transport=httpx.MockTransport(tunez_handler()))


@pytest.fixture
def registry(
    settings: Settings, oauth_flow: ScriptedOAuthFlow, prompt: ScriptedPrompt
) -> ServiceTypeRegistry:
    return build_default_registry(settings, oauth_flow, prompt)


@pytest.fixture
def context(
    settings: Settings,
    registry: ServiceTypeRegistry,
    config_store: InMemoryConfigStore,
    library: InMemoryTrackLibrary,
    notifier: RecordingNotifier,
    transport: httpx.AsyncClient,
) -> ServiceContext:
    return ServiceContext(
        settings=settings,
        registry=registry,
        config_store=config_store,
        library=library,
        notifier=notifier,
        transport=transport,
    )


@pytest.fixture
def youtube_context(
    youtube_settings: Settings,
    oauth_flow: ScriptedOAuthFlow,
    prompt: ScriptedPrompt,
    config_store: InMemoryConfigStore,
    library: InMemoryTrackLibrary,
    notifier: RecordingNotifier,
    transport: httpx.AsyncClient,
) -> ServiceContext:
    return ServiceContext(
        settings=youtube_settings,
        registry=build_default_registry(youtube_settings, oauth_flow, prompt),
        config_store=config_store,
        library=library,
        notifier=notifier,
        transport=transport,
    )
