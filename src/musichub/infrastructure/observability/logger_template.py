"""Shared logger helpers.

USAGE:
    from musichub.infrastructure.observability.logger_template import log_operation

    async with log_operation(logger, "provider_sync", provider_id="3"):
        await self._sync()
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any


# Yo, this context manager logs start/end with automatic duration tracking. On exception it
# logs {operation}.failed with exc_info and RE-RAISES - the caller still decides what a failure
# means. The **context args become extra fields in every line.
@asynccontextmanager
async def log_operation(
    logger: logging.Logger,
    operation: str,
    **context: Any,
) -> AsyncGenerator[None, None]:
    """Log operation start/end with automatic timing.

    Logs:
    - {operation}.started with context fields
    - {operation}.completed with context + duration_ms
    - {operation}.failed with context + duration_ms + error details

    Args:
        logger: Module logger
        operation: Operation name (e.g., "provider_sync")
        **context: Additional fields (e.g., provider_id="3")
    """
    start = time.monotonic()
    logger.info(f"{operation}.started", extra=context)

    try:
        yield
    except Exception as e:
        duration_ms = int((time.monotonic() - start) * 1000)
        logger.error(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": duration_ms,
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        f"{operation}.completed",
        extra={**context, "duration_ms": duration_ms},
    )
