"""Timeout wrapper shared by the collaborator adapters.

The Twilio and Google SDKs block, so their calls run in a worker thread
with a hard deadline. Nothing in this service waits on a third party
for longer than the configured collaborator timeout.
"""

import asyncio
import logging
from typing import Any, Callable, TypeVar

from src.errors import CollaboratorError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    collaborator: str,
    **kwargs: Any,
) -> T:
    """Run a blocking SDK call off the event loop with a deadline.

    Raises:
        CollaboratorError: If the call does not finish within ``timeout``.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **kwargs), timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.error("%s call timed out after %.1fs", collaborator, timeout)
        raise CollaboratorError(
            f"{collaborator} did not respond within {timeout:g}s", collaborator
        ) from None
