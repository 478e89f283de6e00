"""Tunez local-network server client.

Hey future me - Tunez is NOT a REST API! Every request is a plain GET against the server root
whose query string is the message NAME glued to the message as compact JSON, URI-escaped:

    GET http://host:51986/?FetchTrack%7B%22UUID%22:123,%22Offset%22:0%7D

The catalog is only ever fetched as a FULL snapshot (no paging, no deltas). We stream it into
a cache file first and parse from disk, so a server that's offline on the next start still
gives us the last known catalog.
"""

import asyncio
import contextlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from musichub.domain.entities import ServiceType
from musichub.domain.exceptions import ProviderOperationError, SyncCancelled

logger = logging.getLogger(__name__)

# Reserved + unreserved URI characters stay as-is, everything else gets percent-encoded
_URI_SAFE = ";/?:@&=+$,-_.!~*'()#[]"


class Messages:
    """Message names understood by a Tunez server."""

    FETCH_CATALOG = "FetchCatalog"
    FETCH_TRACK = "FetchTrack"
    FETCH_ALBUM_ART = "FetchAlbumArt"
    FETCH_ARTIST_ART = "FetchArtistArt"


class TunezMessage(BaseModel):
    """Base for request payloads. Field names on the wire are PascalCase aliases."""

    model_config = ConfigDict(populate_by_name=True)


class FetchCatalogMessage(TunezMessage):
    """Request the full catalog snapshot."""

    pass


class FetchTrackMessage(TunezMessage):
    """Request the audio stream of one track."""

    uuid: int = Field(alias="UUID")
    offset: int = Field(default=0, alias="Offset")


class FetchAlbumArtMessage(TunezMessage):
    """Request album artwork."""

    album_artist: str = Field(alias="AlbumArtist")
    album: str = Field(alias="Album")


class FetchArtistArtMessage(TunezMessage):
    """Request artist artwork."""

    album_artist: str = Field(alias="AlbumArtist")


class TunezTrack(BaseModel):
    """One catalog entry as sent by the server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uuid: int = Field(alias="UUID")
    name: str = Field(alias="Name")
    track_artist: str = Field(default="", alias="TrackArtist")
    album_artist: str = Field(default="", alias="AlbumArtist")
    album: str = Field(default="", alias="Album")
    duration: float = Field(default=0.0, alias="Duration")
    disc: int = Field(default=0, alias="Disc")
    number: int = Field(default=0, alias="Number")
    album_art: str | None = Field(default=None, alias="AlbumArt")


_catalog_adapter = TypeAdapter(list[TunezTrack])


def encode_message(name: str, message: TunezMessage) -> str:
    """Message name followed by its compact JSON payload."""
    return name + message.model_dump_json(by_alias=True)


def escape_message(message: str) -> str:
    """URI-escape a message for use as a query string."""
    return quote(message, safe=_URI_SAFE)


def message_url(base_address: str, name: str, message: TunezMessage) -> str:
    """Full GET url for a message against a server base address."""
    return f"{base_address}?{escape_message(encode_message(name, message))}"


@dataclass
class ServerDetails:
    """Where a Tunez server listens."""

    hostname: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.hostname}:{self.port}/"


class TunezServer:
    """Long-lived handle to one Tunez server."""

    CHUNK_SIZE = 64 * 1024

    def __init__(self, details: ServerDetails, transport: httpx.AsyncClient) -> None:
        """Initialize server handle.

        Args:
            details: Host and port of the server
            transport: Shared HTTP client
        """
        self.details = details
        self._transport = transport

    async def fetch_catalog(
        self,
        cache_path: Path,
        cancel_event: asyncio.Event | None = None,
    ) -> list[TunezTrack]:
        """Fetch the full catalog snapshot via the disk cache.

        Args:
            cache_path: File the snapshot is written to and parsed from
            cancel_event: Set it to abort the download between chunks

        Returns:
            All catalog entries

        Raises:
            ProviderOperationError: Server unreachable and no cache, or unparseable catalog
            SyncCancelled: cancel_event was set during the download
        """
        url = message_url(self.details.base_url, Messages.FETCH_CATALOG, FetchCatalogMessage())
        try:
            await self._download(url, cache_path, cancel_event)
        except httpx.HTTPError as e:
            if not cache_path.exists():
                raise ProviderOperationError(
                    f"Catalog fetch from {self.details.hostname}:{self.details.port} failed: {e}",
                    service=ServiceType.TUNEZ,
                    original_error=e,
                ) from e
            logger.warning(
                "Tunez server %s unreachable (%s), using cached catalog %s",
                self.details.hostname,
                e,
                cache_path,
            )

        return await asyncio.to_thread(self._read_catalog, cache_path)

    async def _download(
        self,
        url: str,
        cache_path: Path,
        cancel_event: asyncio.Event | None,
    ) -> None:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        partial = cache_path.with_name(cache_path.name + ".part")
        try:
            async with self._transport.stream("GET", url) as response:
                response.raise_for_status()
                handle = await asyncio.to_thread(partial.open, "wb")
                try:
                    async for chunk in response.aiter_bytes(self.CHUNK_SIZE):
                        if cancel_event is not None and cancel_event.is_set():
                            raise SyncCancelled("Catalog download cancelled")
                        await asyncio.to_thread(handle.write, chunk)
                finally:
                    handle.close()
            # Atomic swap - a half-written snapshot never replaces a good one
            await asyncio.to_thread(partial.replace, cache_path)
        finally:
            with contextlib.suppress(FileNotFoundError):
                partial.unlink()

    def _read_catalog(self, cache_path: Path) -> list[TunezTrack]:
        try:
            raw = json.loads(cache_path.read_bytes())
            if isinstance(raw, dict):
                raw = raw.get("Tracks", [])
            return _catalog_adapter.validate_python(raw)
        except (OSError, ValueError, ValidationError) as e:
            raise ProviderOperationError(
                f"Unreadable Tunez catalog at {cache_path}: {e}",
                service=ServiceType.TUNEZ,
                original_error=e,
            ) from e
