"""Tests for the OAuth-backed clients."""

import asyncio

import httpx
import pytest
from conftest import ScriptedOAuthFlow, oauth_extra_data

from musichub.config import OAuthServiceSettings
from musichub.domain.entities import Account, ServiceType
from musichub.domain.exceptions import ProviderOperationError, SyncCancelled
from musichub.infrastructure.clients import CloudDriveClient, GoogleMusicClient

API = "https://music.test/api/"


def _client(handler, oauth_flow: ScriptedOAuthFlow) -> GoogleMusicClient:
    transport = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleMusicClient("1", transport, OAuthServiceSettings(api_base_url=API), oauth_flow)


def _item(track_id: str) -> dict[str, str]:
    return {"id": track_id, "title": f"Song {track_id}", "artist": "Artist"}


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_account_from_flow(self, oauth_flow: ScriptedOAuthFlow) -> None:
        oauth_flow.accounts[ServiceType.GOOGLE] = Account(
            identifier="", email="a@x.com", access_token="t1", refresh_token="r1"
        )
        client = _client(lambda request: httpx.Response(404), oauth_flow)

        account = await client.authenticate()

        assert account is not None
        assert account.identifier == "1"
        assert client.current_account is account
        assert oauth_flow.calls == [ServiceType.GOOGLE]

    @pytest.mark.asyncio
    async def test_no_account(self, oauth_flow: ScriptedOAuthFlow) -> None:
        client = _client(lambda request: httpx.Response(404), oauth_flow)

        assert await client.authenticate() is None
        assert client.current_account is None


class TestExtraData:
    def test_round_trip(self, oauth_flow: ScriptedOAuthFlow) -> None:
        client = _client(lambda request: httpx.Response(404), oauth_flow)
        client.extra_data_string = oauth_extra_data("a@x.com")

        restored = _client(lambda request: httpx.Response(404), oauth_flow)
        restored.extra_data_string = client.extra_data_string

        assert restored.current_account is not None
        assert restored.current_account.email == "a@x.com"
        assert restored.current_account.access_token == "token-a@x.com"

    def test_corrupt_blob_is_logged_out(self, oauth_flow: ScriptedOAuthFlow) -> None:
        client = _client(lambda request: httpx.Response(404), oauth_flow)

        client.extra_data_string = "not json"

        assert client.current_account is None
        assert client.extra_data_string == ""


class TestFetchLibrary:
    @pytest.mark.asyncio
    async def test_follows_next_links_with_bearer_token(
        self, oauth_flow: ScriptedOAuthFlow
    ) -> None:
        seen_auth: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen_auth.append(request.headers.get("Authorization"))
            if request.url.path.endswith("/trackfeed"):
                return httpx.Response(
                    200, json={"items": [_item("1"), _item("2")], "next": API + "page2"}
                )
            return httpx.Response(200, json={"items": [_item("3"), {"bogus": True}]})

        client = _client(handler, oauth_flow)
        client.extra_data_string = oauth_extra_data("a@x.com")

        tracks = await client.fetch_library()

        assert [t.id for t in tracks] == ["1", "2", "3"]
        assert seen_auth == ["Bearer token-a@x.com", "Bearer token-a@x.com"]

    @pytest.mark.asyncio
    async def test_http_error_becomes_provider_error(
        self, oauth_flow: ScriptedOAuthFlow
    ) -> None:
        client = _client(lambda request: httpx.Response(503), oauth_flow)

        with pytest.raises(ProviderOperationError) as exc_info:
            await client.fetch_library()
        assert exc_info.value.service == ServiceType.GOOGLE
        assert exc_info.value.provider_id == "1"

    @pytest.mark.asyncio
    async def test_invalid_json_becomes_provider_error(
        self, oauth_flow: ScriptedOAuthFlow
    ) -> None:
        client = _client(lambda request: httpx.Response(200, content=b"<html>"), oauth_flow)

        with pytest.raises(ProviderOperationError):
            await client.fetch_library()

    @pytest.mark.asyncio
    async def test_cancel_event_stops_paging(self, oauth_flow: ScriptedOAuthFlow) -> None:
        client = _client(lambda request: httpx.Response(200, json={"items": []}), oauth_flow)
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(SyncCancelled):
            await client.fetch_library(cancel)


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_sends_query(self, oauth_flow: ScriptedOAuthFlow) -> None:
        queries: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params.get("q"))
            return httpx.Response(200, json={"items": [_item("9")]})

        client = _client(handler, oauth_flow)

        tracks = await client.search("daft punk")

        assert [t.title for t in tracks] == ["Song 9"]
        assert queries == ["daft punk"]

    @pytest.mark.asyncio
    async def test_cloud_drive_has_no_search(self, oauth_flow: ScriptedOAuthFlow) -> None:
        transport = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        client = CloudDriveClient("2", transport, OAuthServiceSettings(api_base_url=API), oauth_flow)

        assert await client.search("anything") == []
