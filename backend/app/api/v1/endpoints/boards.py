"""Project boards endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import (
    authorize_project,
    get_access_guard,
    get_authenticated_caller,
    get_board_service,
    get_owner_resolver,
    get_project_service,
)
from app.schemas.board import BoardCreate, BoardOrder, BoardResponse, BoardUpdate
from app.services.access_guard import AccessGuard
from app.services.board_service import BoardService
from app.services.owner_resolver import OwnerResolver
from app.services.project_service import ProjectService
from app.shared_kernel.value_objects import AccessLevel, Caller

router = APIRouter()


@router.get("/projects/{project_id}/boards", response_model=List[BoardResponse])
async def list_boards(
    project_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """List the boards of a project in display order"""
    await authorize_project(project_id, AccessLevel.READ, caller, projects, resolver, guard)
    return await boards.list(project_id)


@router.post(
    "/projects/{project_id}/boards",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_board(
    project_id: int,
    payload: BoardCreate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Add a board at the end of a project"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    return await boards.create(
        project_id,
        title=payload.title,
        color=payload.color,
        is_default=payload.is_default,
        creator_id=caller.user_id,
    )


@router.put("/projects/{project_id}/boards/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_boards(
    project_id: int,
    payload: BoardOrder,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Rewrite the order of all boards of a project"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    await boards.reorder(project_id, payload.board_ids)
    return None


@router.get("/projects/{project_id}/boards/{board_id}", response_model=BoardResponse)
async def get_board(
    project_id: int,
    board_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Get a board of a project"""
    await authorize_project(project_id, AccessLevel.READ, caller, projects, resolver, guard)
    return await boards.get(project_id, board_id)


@router.patch("/projects/{project_id}/boards/{board_id}", response_model=BoardResponse)
async def update_board(
    project_id: int,
    board_id: int,
    payload: BoardUpdate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Update title, color, position or default flag of a board"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    return await boards.update(project_id, board_id, payload)


@router.post("/projects/{project_id}/boards/{board_id}/default", response_model=BoardResponse)
async def set_default_board(
    project_id: int,
    board_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Make a board the default of its project"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    return await boards.set_default(project_id, board_id)


@router.delete("/projects/{project_id}/boards/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    project_id: int,
    board_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
    boards: BoardService = Depends(get_board_service),
):
    """Delete a board; the next board by position becomes default if needed"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    await boards.delete(project_id, board_id)
    return None
