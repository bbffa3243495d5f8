"""Owner resolver: scope tokens to owner contexts"""
from __future__ import annotations

from typing import Tuple, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.project import Project
from app.models.repository import Repository
from app.models.user import User, UserType
from app.shared_kernel.exceptions import EntityNotFoundError, InvalidScopeError
from app.shared_kernel.value_objects import OwnerRef, OwnerType

ScopeIdentifier = Union[str, Tuple[str, str]]


def parse_repository_identifier(identifier: ScopeIdentifier) -> Tuple[str, str]:
    """Split ``"owner/repo"`` or an ``(owner, repo)`` pair into its two names."""
    if isinstance(identifier, str):
        parts = identifier.split("/")
    elif isinstance(identifier, (tuple, list)):
        parts = list(identifier)
    else:
        parts = []

    if len(parts) != 2 or not all(isinstance(part, str) and part.strip() for part in parts):
        raise InvalidScopeError(
            "Repository scope must be an owner name and a repository name",
            details={"field": "identifier", "value": repr(identifier)},
        )
    owner_name, repo_name = (part.strip() for part in parts)
    return owner_name, repo_name


class OwnerResolver:
    """Resolve scope tokens (user name, org name, repo coordinates) to owners"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, scope_kind: OwnerType, identifier: ScopeIdentifier) -> OwnerRef:
        """
        Resolve a scope to an owner context.

        Args:
            scope_kind: Kind of owner the scope addresses
            identifier: Name, or owner/repository pair for repositories

        Returns:
            Resolved owner reference

        Raises:
            InvalidScopeError: If the scope kind or identifier is malformed
            EntityNotFoundError: If the named owner does not exist
        """
        try:
            kind = OwnerType(scope_kind)
        except ValueError:
            raise InvalidScopeError(
                f"Unknown scope kind: {scope_kind}",
                details={"field": "scope_kind", "value": str(scope_kind)},
            ) from None

        if kind == OwnerType.REPOSITORY:
            owner_name, repo_name = parse_repository_identifier(identifier)
            repo = await self._get_repository(owner_name, repo_name)
            return self._repository_ref(repo)

        if not isinstance(identifier, str) or not identifier.strip():
            raise InvalidScopeError(
                "Owner scope must be a name",
                details={"field": "identifier", "value": repr(identifier)},
            )
        expected_type = (
            UserType.ORGANIZATION if kind == OwnerType.ORGANIZATION else UserType.INDIVIDUAL
        )
        user = await self._get_user_by_name(identifier.strip())
        if user is None or user.type != expected_type:
            raise EntityNotFoundError(
                f"{kind.value.capitalize()} '{identifier}' not found",
                details={"field": "identifier", "kind": kind.value, "name": identifier},
            )
        return OwnerRef(kind=kind, id=user.id, name=user.name)

    async def resolve_project_owner(self, project: Project) -> OwnerRef:
        """Rebuild the owner context a stored project belongs to."""
        if project.owner_type == OwnerType.REPOSITORY:
            repo = await self.db.get(Repository, project.repo_id)
            if repo is None:
                raise EntityNotFoundError(
                    "Repository owning the project not found",
                    details={"project_id": project.id, "repo_id": project.repo_id},
                )
            return self._repository_ref(repo)
        if project.owner_type in (OwnerType.INDIVIDUAL, OwnerType.ORGANIZATION):
            user = await self.db.get(User, project.owner_id)
            if user is None:
                raise EntityNotFoundError(
                    "Owner of the project not found",
                    details={"project_id": project.id, "owner_id": project.owner_id},
                )
            return OwnerRef(kind=project.owner_type, id=user.id, name=user.name)
        raise ValueError(f"Unsupported owner type: {project.owner_type}")

    async def _get_user_by_name(self, name: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.name) == name.lower())
        )
        return result.scalar_one_or_none()

    async def _get_repository(self, owner_name: str, repo_name: str) -> Repository:
        owner = await self._get_user_by_name(owner_name)
        repo = None
        if owner is not None:
            result = await self.db.execute(
                select(Repository).where(
                    Repository.owner_id == owner.id,
                    func.lower(Repository.name) == repo_name.lower(),
                )
            )
            repo = result.scalar_one_or_none()
        if repo is None:
            raise EntityNotFoundError(
                f"Repository '{owner_name}/{repo_name}' not found",
                details={"field": "identifier", "kind": OwnerType.REPOSITORY.value,
                         "name": f"{owner_name}/{repo_name}"},
            )
        return repo

    @staticmethod
    def _repository_ref(repo: Repository) -> OwnerRef:
        return OwnerRef(
            kind=OwnerType.REPOSITORY,
            id=repo.id,
            name=repo.full_name,
            repo_owner_id=repo.owner_id,
        )
