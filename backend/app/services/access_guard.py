"""Access guard: caller permissions over owner contexts"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.repository import Collaborator, Repository
from app.models.user import OrgMembership, User
from app.shared_kernel.exceptions import ForbiddenError, UnauthorizedError
from app.shared_kernel.value_objects import AccessLevel, Caller, OwnerRef, OwnerType


class AccessGuard:
    """Decide read/write/admin permission of a caller on an owner context.

    Only reads the store; safe to share between concurrent requests as long
    as each one brings its own session.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authorize(
        self,
        caller: Optional[Caller],
        owner: OwnerRef,
        required: AccessLevel,
    ) -> AccessLevel:
        """
        Ensure the caller holds at least ``required`` on ``owner``.

        Returns:
            The caller's effective access level

        Raises:
            UnauthorizedError: If there is no valid caller
            ForbiddenError: If the effective level is below ``required``
        """
        if caller is None:
            raise UnauthorizedError("Authentication required")

        effective = await self.effective_level(caller, owner)
        if effective < required:
            raise ForbiddenError(
                f"{required.name.lower()} access to {owner} required",
                details={
                    "owner": str(owner),
                    "required": required.name.lower(),
                    "effective": effective.name.lower(),
                },
            )
        return effective

    async def effective_level(self, caller: Caller, owner: OwnerRef) -> AccessLevel:
        if caller.is_admin:
            return AccessLevel.ADMIN

        if owner.kind == OwnerType.INDIVIDUAL:
            if caller.user_id == owner.id:
                return AccessLevel.ADMIN
            return await self._public_level(owner.id)

        if owner.kind == OwnerType.ORGANIZATION:
            membership = await self._membership_level(owner.id, caller.user_id)
            if membership is not None:
                return membership
            return await self._public_level(owner.id)

        if owner.kind == OwnerType.REPOSITORY:
            return await self._repository_level(caller, owner)

        raise ValueError(f"Unsupported owner kind: {owner.kind}")

    async def _repository_level(self, caller: Caller, owner: OwnerRef) -> AccessLevel:
        if caller.user_id == owner.repo_owner_id:
            return AccessLevel.ADMIN

        levels = []
        membership = await self._membership_level(owner.repo_owner_id, caller.user_id)
        if membership is not None:
            levels.append(membership)

        result = await self.db.execute(
            select(Collaborator.access_level).where(
                Collaborator.repo_id == owner.id,
                Collaborator.user_id == caller.user_id,
            )
        )
        collaborator = result.scalar_one_or_none()
        if collaborator is not None:
            levels.append(collaborator)

        if levels:
            return max(levels)

        repo = await self.db.get(Repository, owner.id)
        if repo is None or repo.is_private or repo.owner.is_private:
            return AccessLevel.NONE
        return AccessLevel.READ

    async def _membership_level(self, org_id: Optional[int], user_id: int) -> Optional[AccessLevel]:
        if org_id is None:
            return None
        result = await self.db.execute(
            select(OrgMembership.access_level).where(
                OrgMembership.org_id == org_id,
                OrgMembership.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def _public_level(self, user_id: int) -> AccessLevel:
        owner = await self.db.get(User, user_id)
        if owner is None or owner.is_private:
            return AccessLevel.NONE
        return AccessLevel.READ
