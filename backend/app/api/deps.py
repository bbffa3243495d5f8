"""Shared FastAPI dependencies for the v1 routes"""
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_caller
from app.db.session import get_db
from app.infrastructure.di import get_configured_container
from app.models.project import Project
from app.services.access_guard import AccessGuard
from app.services.board_service import BoardService
from app.services.hooks import BoardDetachHook
from app.services.owner_resolver import OwnerResolver
from app.services.project_service import ProjectService
from app.shared_kernel.exceptions import UnauthorizedError
from app.shared_kernel.value_objects import AccessLevel, Caller


def get_detach_hook() -> BoardDetachHook:
    return get_configured_container().resolve(BoardDetachHook)


async def get_authenticated_caller(
    caller: Optional[Caller] = Depends(get_current_caller),
) -> Caller:
    """Reject the request before any lookup when there is no valid caller."""
    if caller is None:
        raise UnauthorizedError("Authentication required")
    return caller


def get_owner_resolver(db: AsyncSession = Depends(get_db)) -> OwnerResolver:
    return OwnerResolver(db)


def get_access_guard(db: AsyncSession = Depends(get_db)) -> AccessGuard:
    return AccessGuard(db)


def get_board_service(
    db: AsyncSession = Depends(get_db),
    detach_hook: BoardDetachHook = Depends(get_detach_hook),
) -> BoardService:
    return BoardService(db, detach_hook)


def get_project_service(
    db: AsyncSession = Depends(get_db),
    board_service: BoardService = Depends(get_board_service),
    detach_hook: BoardDetachHook = Depends(get_detach_hook),
) -> ProjectService:
    return ProjectService(db, board_service=board_service, detach_hook=detach_hook)


async def authorize_project(
    project_id: int,
    required: AccessLevel,
    caller: Caller,
    projects: ProjectService,
    resolver: OwnerResolver,
    guard: AccessGuard,
) -> Project:
    """Load a project and check the caller's level on its owner."""
    project = await projects.get(project_id)
    owner = await resolver.resolve_project_owner(project)
    await guard.authorize(caller, owner, required)
    return project
