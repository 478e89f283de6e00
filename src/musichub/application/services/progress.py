"""Scoped progress indicator."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from musichub.domain.ports import IUserNotifier


@contextmanager
def progress_scope(notifier: IUserNotifier, title: str) -> Iterator[Any]:
    """Show a progress indicator for the duration of the block.

    The indicator is hidden on every exit path, including cancellation.
    """
    handle = notifier.show_progress(title)
    try:
        yield handle
    finally:
        notifier.hide_progress(handle)
