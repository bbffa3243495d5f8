"""Caller identity resolution from API tokens"""
import hashlib
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.user import User, UserType
from app.shared_kernel.value_objects import Caller

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_token(token: str) -> str:
    """Return the digest stored for an API token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def get_caller_for_token(db: AsyncSession, token: str) -> Optional[Caller]:
    """Look up the individual account owning ``token``."""
    result = await db.execute(
        select(User).where(User.token_hash == hash_token(token))
    )
    user = result.scalar_one_or_none()
    if user is None or user.type != UserType.INDIVIDUAL:
        return None
    return Caller(user_id=user.id, name=user.name, is_admin=user.is_admin)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[Caller]:
    """
    Resolve the request's caller.

    Returns None for a missing or unknown token; the access guard turns
    that into an Unauthorized error for every operation.
    """
    if credentials is None or not credentials.credentials:
        return None
    caller = await get_caller_for_token(db, credentials.credentials)
    if caller is None:
        logger.info("Rejected unknown API token")
    return caller
