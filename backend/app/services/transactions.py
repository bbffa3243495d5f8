"""Single-transaction execution for compound store writes."""
from __future__ import annotations

from typing import Awaitable, Callable, Optional, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.infrastructure.resilience import async_retry
from app.shared_kernel.exceptions import ConcurrencyError

T = TypeVar("T")

logger = structlog.get_logger(__name__)

TRANSIENT_ERRORS = (OperationalError, IntegrityError)

# Unique constraints two concurrent board writers can race on. SQLite reports
# the table columns instead of the constraint name.
CONTENTION_MARKERS = (
    "uq_project_boards_default",
    "uq_project_boards_sorting",
    "UNIQUE constraint failed: project_boards.",
)


def is_contention(exc: BaseException) -> bool:
    """True for store errors a fresh attempt can succeed after."""
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, IntegrityError):
        message = str(exc.orig)
        return any(marker in message for marker in CONTENTION_MARKERS)
    return False


async def run_in_transaction(
    db: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    *,
    name: str = "transaction",
    retries: Optional[int] = None,
) -> T:
    """
    Run ``operation`` and commit it as one unit.

    Any failure, cancellation included, rolls the session back before the
    exception propagates. Store contention is retried with a fresh attempt
    (the operation re-reads everything it needs) and surfaces as
    ConcurrencyError once the retries are exhausted. Other integrity errors
    propagate unchanged after a single attempt.
    """

    async def attempt() -> T:
        try:
            result = await operation()
            await db.commit()
            return result
        except BaseException:
            await db.rollback()
            raise

    def log_retry(attempt_number: int, exc: BaseException) -> None:
        logger.warning(
            "store_transaction_retry",
            transaction=name,
            attempt=attempt_number,
            error=type(exc).__name__,
        )

    if retries is None:
        retries = settings.STORE_RETRY_ATTEMPTS

    try:
        return await async_retry(
            attempt,
            retries=retries,
            backoff=settings.STORE_RETRY_BACKOFF,
            jitter=0.0,
            exceptions=TRANSIENT_ERRORS,
            retry_if=is_contention,
            on_retry=log_retry,
        )
    except TRANSIENT_ERRORS as exc:
        if not is_contention(exc):
            raise
        logger.warning("store_transaction_conflict", transaction=name, error=str(exc.orig))
        raise ConcurrencyError(
            f"Concurrent modification while running {name}",
            details={"transaction": name},
        ) from exc
