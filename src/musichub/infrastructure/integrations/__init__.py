"""External service integrations (HTTP pool, Tunez wire client)."""

from musichub.infrastructure.integrations.http_pool import HttpClientPool
from musichub.infrastructure.integrations.tunez_server import (
    Messages,
    ServerDetails,
    TunezServer,
    TunezTrack,
    encode_message,
    message_url,
)

__all__ = [
    "HttpClientPool",
    "Messages",
    "ServerDetails",
    "TunezServer",
    "TunezTrack",
    "encode_message",
    "message_url",
]
