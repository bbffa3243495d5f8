"""Resilience utilities (retry with backoff)."""

from .retry import async_retry

__all__ = [
    "async_retry",
]
