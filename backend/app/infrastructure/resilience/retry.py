"""Retry helpers with exponential backoff."""
from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, Tuple, Type


async def async_retry(
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    retries: int = 3,
    backoff: float = 0.5,
    jitter: float = 0.1,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    retry_if: Callable[[BaseException], bool] | None = None,
    on_retry: Callable[[int, BaseException], None] | None = None,
    **kwargs: Any,
) -> Any:
    delay = backoff
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except exceptions as exc:
            if retry_if is not None and not retry_if(exc):
                raise
            attempt += 1
            if attempt > retries:
                raise
            if on_retry is not None:
                on_retry(attempt, exc)
            await asyncio.sleep(delay + random.random() * jitter)
            delay *= 2
