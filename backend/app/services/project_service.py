"""Project service"""
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

import structlog
from sqlalchemy import Select, and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.board import ProjectBoard
from app.models.project import BoardType, Project
from app.models.user import utc_now
from app.schemas.project import ProjectSort, ProjectState, ProjectUpdate
from app.services.board_service import BoardService, clean_title
from app.services.hooks import BoardDetachHook, NullBoardDetachHook
from app.services.transactions import run_in_transaction
from app.shared_kernel.exceptions import EntityNotFoundError, ValidationError
from app.shared_kernel.value_objects import OwnerRef, OwnerType

logger = structlog.get_logger(__name__)

BOARD_TEMPLATES: Dict[BoardType, Tuple[str, ...]] = {
    BoardType.NONE: (),
    BoardType.BASIC_KANBAN: ("To Do", "In Progress", "Done"),
    BoardType.BUG_TRIAGE: ("Needs Triage", "High Priority", "Low Priority", "Closed"),
}

SORT_ORDERS = {
    ProjectSort.NEWEST: (Project.created_at.desc(), Project.id.desc()),
    ProjectSort.OLDEST: (Project.created_at.asc(), Project.id.asc()),
    ProjectSort.RECENT_UPDATE: (Project.updated_at.desc(), Project.id.desc()),
    ProjectSort.LEAST_UPDATE: (Project.updated_at.asc(), Project.id.asc()),
    ProjectSort.ALPHABETICAL: (func.lower(Project.title).asc(), Project.id.asc()),
}


def owner_clause(owner: OwnerRef):
    """SQL criterion selecting the projects of an owner context."""
    if owner.kind == OwnerType.REPOSITORY:
        return and_(Project.owner_type == OwnerType.REPOSITORY, Project.repo_id == owner.id)
    if owner.kind in (OwnerType.INDIVIDUAL, OwnerType.ORGANIZATION):
        return and_(Project.owner_type == owner.kind, Project.owner_id == owner.id)
    raise ValueError(f"Unsupported owner kind: {owner.kind}")


class ProjectListing:
    """
    Lazy listing of an owner's projects.

    Nothing is queried until the listing is consumed, and every iteration
    runs the query again, so the same listing can be walked several times.
    """

    def __init__(self, db: AsyncSession, statement: Select, count_statement: Select):
        self.db = db
        self._statement = statement
        self._count_statement = count_statement

    def __aiter__(self) -> AsyncIterator[Project]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Project]:
        result = await self.db.execute(self._statement)
        for project in result.scalars():
            yield project

    async def all(self) -> List[Project]:
        return [project async for project in self]

    async def count(self) -> int:
        """Total matching projects, ignoring paging."""
        result = await self.db.execute(self._count_statement)
        return result.scalar() or 0


class ProjectService:
    """Service for project operations"""

    def __init__(
        self,
        db: AsyncSession,
        board_service: Optional[BoardService] = None,
        detach_hook: Optional[BoardDetachHook] = None,
    ):
        self.db = db
        self.detach_hook = detach_hook or NullBoardDetachHook()
        self.boards = board_service or BoardService(db, self.detach_hook)

    async def get(self, project_id: int) -> Project:
        """
        Get project by ID.

        Raises:
            EntityNotFoundError: If the project does not exist
        """
        project = await self.db.get(Project, project_id)
        if project is None:
            raise EntityNotFoundError("Project not found", details={"project_id": project_id})
        return project

    def list(
        self,
        owner: OwnerRef,
        state: ProjectState = ProjectState.OPEN,
        sort: ProjectSort = ProjectSort.NEWEST,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> ProjectListing:
        """
        List the projects of an owner.

        Args:
            owner: Owner context
            state: Open, closed or all projects
            sort: Ordering, newest first by default
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Listing to iterate, or to collect with ``all()``
        """
        criteria = [owner_clause(owner)]
        if state == ProjectState.OPEN:
            criteria.append(Project.is_closed.is_(False))
        elif state == ProjectState.CLOSED:
            criteria.append(Project.is_closed.is_(True))

        statement = (
            select(Project)
            .where(*criteria)
            .order_by(*SORT_ORDERS[ProjectSort(sort)])
            .offset(skip)
        )
        if limit is not None:
            statement = statement.limit(limit)
        count_statement = select(func.count(Project.id)).where(*criteria)
        return ProjectListing(self.db, statement, count_statement)

    async def create(
        self,
        owner: OwnerRef,
        title: str,
        description: str = "",
        board_type: BoardType = BoardType.NONE,
        custom_boards: Optional[Sequence[str]] = None,
        creator_id: Optional[int] = None,
    ) -> Project:
        """
        Create a project and the boards of its layout.

        The project and its template boards are committed together; the
        first template board is the default.

        Raises:
            ValidationError: If the title is empty or the layout is invalid
        """
        title = clean_title(title)
        board_type = BoardType(board_type)
        board_titles = self._layout_boards(board_type, custom_boards)

        async def operation() -> Project:
            project = Project(
                title=title,
                description=description or "",
                board_type=board_type,
                owner_type=owner.kind,
                creator_id=creator_id,
                **self._owner_columns(owner),
            )
            self.db.add(project)
            await self.db.flush()

            for board_title in board_titles:
                await self.boards.add_board(project, board_title, creator_id=creator_id)
            return project

        project = await run_in_transaction(self.db, operation, name="create_project")
        logger.info(
            "project_created",
            project_id=project.id,
            owner=str(owner),
            board_type=board_type.value,
            boards=len(board_titles),
        )
        return project

    async def update(self, project_id: int, patch: ProjectUpdate) -> Project:
        """
        Update project title, description or open/closed status.

        Raises:
            EntityNotFoundError: If the project does not exist
            ValidationError: If the title would be empty
        """
        changes = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if value is not None
        }

        async def operation() -> Project:
            project = await self.get(project_id)
            if "title" in changes:
                project.title = clean_title(changes["title"])
            if "description" in changes:
                project.description = changes["description"]
            if "is_closed" in changes and changes["is_closed"] != project.is_closed:
                project.is_closed = changes["is_closed"]
                project.closed_at = utc_now() if project.is_closed else None
            await self.db.flush()
            return project

        project = await run_in_transaction(self.db, operation, name="update_project")
        logger.info("project_updated", project_id=project_id, fields=sorted(changes))
        return project

    async def delete(self, project_id: int) -> None:
        """
        Delete a project together with all its boards.

        Raises:
            EntityNotFoundError: If the project does not exist
        """

        async def operation() -> List[int]:
            result = await self.db.execute(
                select(Project).where(Project.id == project_id).with_for_update()
            )
            project = result.scalar_one_or_none()
            if project is None:
                raise EntityNotFoundError("Project not found", details={"project_id": project_id})

            board_result = await self.db.execute(
                select(ProjectBoard.id).where(ProjectBoard.project_id == project_id)
            )
            board_ids = list(board_result.scalars().all())

            await self.detach_hook.boards_detached(self.db, project_id, board_ids)
            await self.db.execute(delete(ProjectBoard).where(ProjectBoard.project_id == project_id))
            await self.db.delete(project)
            await self.db.flush()
            return board_ids

        board_ids = await run_in_transaction(self.db, operation, name="delete_project")
        logger.info("project_deleted", project_id=project_id, boards_deleted=len(board_ids))

    @staticmethod
    def _layout_boards(board_type: BoardType, custom_boards: Optional[Sequence[str]]) -> List[str]:
        if board_type == BoardType.CUSTOM:
            if not custom_boards:
                raise ValidationError(
                    "A custom layout needs at least one board",
                    details={"field": "custom_boards"},
                )
            return [clean_title(title, field="custom_boards") for title in custom_boards]
        if custom_boards:
            raise ValidationError(
                "Board titles can only be given with a custom layout",
                details={"field": "custom_boards", "board_type": board_type.value},
            )
        return list(BOARD_TEMPLATES[board_type])

    @staticmethod
    def _owner_columns(owner: OwnerRef) -> Dict[str, Optional[int]]:
        if owner.kind == OwnerType.REPOSITORY:
            return {"owner_id": None, "repo_id": owner.id}
        if owner.kind in (OwnerType.INDIVIDUAL, OwnerType.ORGANIZATION):
            return {"owner_id": owner.id, "repo_id": None}
        raise ValueError(f"Unsupported owner kind: {owner.kind}")
