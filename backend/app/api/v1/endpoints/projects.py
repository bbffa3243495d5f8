"""Projects endpoints"""
import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    authorize_project,
    get_access_guard,
    get_authenticated_caller,
    get_owner_resolver,
    get_project_service,
)
from app.core.config import settings
from app.models.project import Project
from app.schemas.project import (
    ProjectCreate,
    ProjectList,
    ProjectResponse,
    ProjectSort,
    ProjectState,
    ProjectUpdate,
)
from app.services.access_guard import AccessGuard
from app.services.owner_resolver import OwnerResolver
from app.services.project_service import ProjectService
from app.shared_kernel.value_objects import AccessLevel, Caller, OwnerRef, OwnerType

router = APIRouter()
logger = logging.getLogger(__name__)


class ListParams:
    """Query parameters shared by the scoped listing routes"""

    def __init__(
        self,
        state: ProjectState = Query(ProjectState.OPEN),
        sort: ProjectSort = Query(ProjectSort.NEWEST),
        page: int = Query(1, ge=1),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    ):
        self.state = state
        self.sort = sort
        self.skip = (page - 1) * limit
        self.limit = limit


async def _list_projects(
    owner: OwnerRef,
    params: ListParams,
    caller: Caller,
    guard: AccessGuard,
    projects: ProjectService,
) -> ProjectList:
    await guard.authorize(caller, owner, AccessLevel.READ)
    listing = projects.list(
        owner,
        state=params.state,
        sort=params.sort,
        skip=params.skip,
        limit=params.limit,
    )
    items = await listing.all()
    total = await listing.count()
    return ProjectList(
        projects=[ProjectResponse.model_validate(project) for project in items],
        total=total,
    )


async def _create_project(
    owner: OwnerRef,
    payload: ProjectCreate,
    caller: Caller,
    guard: AccessGuard,
    projects: ProjectService,
) -> Project:
    await guard.authorize(caller, owner, AccessLevel.WRITE)
    project = await projects.create(
        owner,
        title=payload.title,
        description=payload.description,
        board_type=payload.board_type,
        custom_boards=payload.custom_boards,
        creator_id=caller.user_id,
    )
    logger.info(f"Project {project.id} created in {owner} by {caller.name}")
    return project


@router.get("/users/{username}/projects", response_model=ProjectList)
async def list_user_projects(
    username: str,
    params: ListParams = Depends(),
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """List the projects of an individual user"""
    owner = await resolver.resolve(OwnerType.INDIVIDUAL, username)
    return await _list_projects(owner, params, caller, guard, projects)


@router.post(
    "/users/{username}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user_project(
    username: str,
    payload: ProjectCreate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Create a project owned by an individual user"""
    owner = await resolver.resolve(OwnerType.INDIVIDUAL, username)
    return await _create_project(owner, payload, caller, guard, projects)


@router.get("/orgs/{org}/projects", response_model=ProjectList)
async def list_org_projects(
    org: str,
    params: ListParams = Depends(),
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """List the projects of an organization"""
    owner = await resolver.resolve(OwnerType.ORGANIZATION, org)
    return await _list_projects(owner, params, caller, guard, projects)


@router.post(
    "/orgs/{org}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_org_project(
    org: str,
    payload: ProjectCreate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Create a project owned by an organization"""
    owner = await resolver.resolve(OwnerType.ORGANIZATION, org)
    return await _create_project(owner, payload, caller, guard, projects)


@router.get("/repos/{owner_name}/{repo}/projects", response_model=ProjectList)
async def list_repo_projects(
    owner_name: str,
    repo: str,
    params: ListParams = Depends(),
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """List the projects of a repository"""
    owner = await resolver.resolve(OwnerType.REPOSITORY, (owner_name, repo))
    return await _list_projects(owner, params, caller, guard, projects)


@router.post(
    "/repos/{owner_name}/{repo}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_repo_project(
    owner_name: str,
    repo: str,
    payload: ProjectCreate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Create a project owned by a repository"""
    owner = await resolver.resolve(OwnerType.REPOSITORY, (owner_name, repo))
    return await _create_project(owner, payload, caller, guard, projects)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Get a project by ID"""
    return await authorize_project(project_id, AccessLevel.READ, caller, projects, resolver, guard)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    payload: ProjectUpdate,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Update title, description or open/closed status of a project"""
    await authorize_project(project_id, AccessLevel.WRITE, caller, projects, resolver, guard)
    return await projects.update(project_id, payload)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    guard: AccessGuard = Depends(get_access_guard),
    projects: ProjectService = Depends(get_project_service),
):
    """Delete a project and all of its boards. Requires admin access on the owner."""
    await authorize_project(project_id, AccessLevel.ADMIN, caller, projects, resolver, guard)
    await projects.delete(project_id)
    logger.info(f"Project {project_id} deleted by {caller.name}")
    return None
