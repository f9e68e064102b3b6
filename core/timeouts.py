"""Timeout wrapper for calls to external capabilities"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from core.errors import StepTimeoutError

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], capability: str, timeout: Optional[float]) -> T:
    """
    Await with a timeout, raising StepTimeoutError when it expires.

    A timeout of None waits indefinitely.
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        raise StepTimeoutError(capability, timeout)
