"""
Database utilities: storage error translation and request deadlines.
"""

import asyncio
import contextlib
import logging
from typing import Awaitable, Optional, TypeVar

from django.conf import settings
from django.db import DatabaseError

from core.domain.exceptions import DeadlineExceededError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextlib.contextmanager
def storage_errors(operation: str):
    """
    Translate driver errors into StorageError.

    The original exception is logged, never exposed to callers.
    """
    try:
        yield
    except DatabaseError as e:
        logger.error("Storage failure during %s: %s", operation, e, exc_info=True)
        raise StorageError(f"Storage failure during {operation}") from e


async def run_with_deadline(awaitable: Awaitable[T], timeout: Optional[float] = None) -> T:
    """
    Await an operation under the caller's deadline.

    On expiry the operation's task is cancelled and DeadlineExceededError
    is raised. Database statements are bounded separately by the
    connection's statement_timeout.

    Args:
        awaitable: Operation to run
        timeout: Seconds to allow (defaults to REQUEST_DEADLINE_SECONDS)

    Returns:
        The operation's result
    """
    if timeout is None:
        timeout = getattr(settings, "REQUEST_DEADLINE_SECONDS", None)
    if not timeout:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning("Operation cancelled after %.1fs deadline", timeout)
        raise DeadlineExceededError() from e

