"""Project board service"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.board import ProjectBoard
from app.models.project import Project
from app.models.user import utc_now
from app.schemas.board import BoardUpdate
from app.services.hooks import BoardDetachHook, NullBoardDetachHook
from app.services.transactions import run_in_transaction
from app.shared_kernel.exceptions import EntityNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def clean_title(title: Optional[str], field: str = "title") -> str:
    """Trim a title, rejecting empty ones."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title must not be empty", details={"field": field})
    return cleaned


class BoardService:
    """Service for project board operations.

    Every compound write runs in one transaction that first locks the
    owning project row, so concurrent writers on the same project are
    serialized and readers never see zero or two default boards.
    """

    def __init__(self, db: AsyncSession, detach_hook: Optional[BoardDetachHook] = None):
        self.db = db
        self.detach_hook = detach_hook or NullBoardDetachHook()

    async def get(self, project_id: int, board_id: int) -> ProjectBoard:
        """
        Get a board of a project.

        Raises:
            EntityNotFoundError: If the board does not exist in this project
        """
        result = await self.db.execute(
            select(ProjectBoard).where(
                ProjectBoard.id == board_id,
                ProjectBoard.project_id == project_id,
            )
        )
        board = result.scalar_one_or_none()
        if board is None:
            raise EntityNotFoundError(
                "Board not found",
                details={"project_id": project_id, "board_id": board_id},
            )
        return board

    async def list(self, project_id: int) -> List[ProjectBoard]:
        """List the boards of a project in display order."""
        await self._get_project(project_id)
        return await self._ordered_boards(project_id)

    async def get_default(self, project_id: int) -> Optional[ProjectBoard]:
        """Return the default board, or None when the project has no boards."""
        await self._get_project(project_id)
        result = await self.db.execute(
            select(ProjectBoard).where(
                ProjectBoard.project_id == project_id,
                ProjectBoard.is_default.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        project_id: int,
        title: str,
        color: str = "",
        is_default: bool = False,
        creator_id: Optional[int] = None,
    ) -> ProjectBoard:
        """
        Create a board at the end of the project.

        The first board of a project is always the default. Requesting
        ``is_default`` on a later board moves the flag to it.
        """

        async def operation() -> ProjectBoard:
            project = await self._lock_project(project_id)
            return await self.add_board(project, title, color, is_default, creator_id)

        board = await run_in_transaction(self.db, operation, name="create_board")
        logger.info(
            "board_created",
            project_id=project_id,
            board_id=board.id,
            sorting=board.sorting,
            is_default=board.is_default,
        )
        return board

    async def add_board(
        self,
        project: Project,
        title: str,
        color: str = "",
        is_default: bool = False,
        creator_id: Optional[int] = None,
    ) -> ProjectBoard:
        """Insert a board inside the caller's transaction, without committing."""
        title = clean_title(title)

        stats = await self.db.execute(
            select(func.max(ProjectBoard.sorting), func.count(ProjectBoard.id)).where(
                ProjectBoard.project_id == project.id
            )
        )
        max_sorting, count = stats.one()

        if count == 0:
            is_default = True
        elif is_default:
            await self._clear_default(project.id)

        board = ProjectBoard(
            project_id=project.id,
            title=title,
            color=color or "",
            sorting=0 if max_sorting is None else max_sorting + 1,
            is_default=is_default,
            creator_id=creator_id,
        )
        self.db.add(board)
        await self.db.flush()
        return board

    async def update(self, project_id: int, board_id: int, patch: BoardUpdate) -> ProjectBoard:
        """
        Apply a partial update to a board.

        Raises:
            EntityNotFoundError: If the board does not exist in this project
            ValidationError: If the title would be empty, the position is
                negative, or the patch clears the flag of the default board
        """
        changes = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if value is not None
        }

        async def operation() -> ProjectBoard:
            await self._lock_project(project_id)
            board = await self.get(project_id, board_id)

            if "title" in changes:
                board.title = clean_title(changes["title"])
            if "color" in changes:
                board.color = changes["color"]
            if "sorting" in changes:
                await self._move(board, changes["sorting"])
            if "is_default" in changes:
                if changes["is_default"]:
                    await self._make_default(board)
                elif board.is_default:
                    raise ValidationError(
                        "The default board cannot be unset; make another board the default instead",
                        details={"field": "is_default", "board_id": board.id},
                    )

            await self.db.flush()
            return board

        board = await run_in_transaction(self.db, operation, name="update_board")
        logger.info("board_updated", project_id=project_id, board_id=board_id, fields=sorted(changes))
        return board

    async def set_default(self, project_id: int, board_id: int) -> ProjectBoard:
        """Make a board the default of its project."""

        async def operation() -> ProjectBoard:
            await self._lock_project(project_id)
            board = await self.get(project_id, board_id)
            await self._make_default(board)
            await self.db.flush()
            return board

        board = await run_in_transaction(self.db, operation, name="set_default_board")
        logger.info("default_board_set", project_id=project_id, board_id=board_id)
        return board

    async def delete(self, project_id: int, board_id: int) -> None:
        """
        Delete a board.

        When the default board is deleted, the remaining board with the
        smallest position becomes the default.
        """

        async def operation() -> Optional[ProjectBoard]:
            await self._lock_project(project_id)
            board = await self.get(project_id, board_id)
            was_default = board.is_default

            await self.detach_hook.boards_detached(self.db, project_id, [board.id])
            await self.db.delete(board)
            await self.db.flush()

            if was_default:
                return await self._promote_default(project_id)
            return None

        promoted = await run_in_transaction(self.db, operation, name="delete_board")
        logger.info("board_deleted", project_id=project_id, board_id=board_id)
        if promoted is not None:
            logger.info("default_board_promoted", project_id=project_id, board_id=promoted.id)

    async def reorder(self, project_id: int, ordered_board_ids: Sequence[int]) -> List[ProjectBoard]:
        """
        Rewrite board positions to follow ``ordered_board_ids``.

        Raises:
            ValidationError: If the ids are not exactly the project's boards
        """
        requested = list(ordered_board_ids)

        async def operation() -> List[ProjectBoard]:
            await self._lock_project(project_id)
            boards = await self._ordered_boards(project_id)
            current = {board.id for board in boards}

            seen = set()
            repeated = set()
            for board_id in requested:
                if board_id in seen:
                    repeated.add(board_id)
                seen.add(board_id)
            duplicates = sorted(repeated)
            missing = sorted(current - seen)
            unexpected = sorted(seen - current)
            if duplicates or missing or unexpected:
                raise ValidationError(
                    "Board order must list every board of the project exactly once",
                    details={
                        "field": "board_ids",
                        "missing": missing,
                        "unexpected": unexpected,
                        "duplicates": duplicates,
                    },
                )

            by_id = {board.id: board for board in boards}
            await self._write_positions(
                [(by_id[board_id], position) for position, board_id in enumerate(requested)]
            )
            return [by_id[board_id] for board_id in requested]

        boards = await run_in_transaction(self.db, operation, name="reorder_boards")
        logger.info("boards_reordered", project_id=project_id, board_ids=requested)
        return boards

    async def _get_project(self, project_id: int) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None:
            raise EntityNotFoundError("Project not found", details={"project_id": project_id})
        return project

    async def _lock_project(self, project_id: int) -> Project:
        result = await self.db.execute(
            select(Project).where(Project.id == project_id).with_for_update()
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise EntityNotFoundError("Project not found", details={"project_id": project_id})
        return project

    async def _ordered_boards(self, project_id: int) -> List[ProjectBoard]:
        result = await self.db.execute(
            select(ProjectBoard)
            .where(ProjectBoard.project_id == project_id)
            .order_by(ProjectBoard.sorting.asc(), ProjectBoard.id.asc())
        )
        return list(result.scalars().all())

    async def _clear_default(self, project_id: int, keep_board_id: Optional[int] = None) -> None:
        stmt = update(ProjectBoard).where(
            ProjectBoard.project_id == project_id,
            ProjectBoard.is_default.is_(True),
        )
        if keep_board_id is not None:
            stmt = stmt.where(ProjectBoard.id != keep_board_id)
        await self.db.execute(stmt.values(is_default=False, updated_at=utc_now()))

    async def _make_default(self, board: ProjectBoard) -> None:
        if board.is_default:
            return
        # Clear before set: the partial unique index allows one default per project
        await self._clear_default(board.project_id, keep_board_id=board.id)
        board.is_default = True

    async def _promote_default(self, project_id: int) -> Optional[ProjectBoard]:
        result = await self.db.execute(
            select(ProjectBoard)
            .where(ProjectBoard.project_id == project_id)
            .order_by(ProjectBoard.sorting.asc(), ProjectBoard.id.asc())
            .limit(1)
        )
        board = result.scalar_one_or_none()
        if board is not None:
            board.is_default = True
            await self.db.flush()
        return board

    async def _move(self, board: ProjectBoard, position: int) -> None:
        if position < 0:
            raise ValidationError(
                "Board position must not be negative",
                details={"field": "sorting", "value": position},
            )
        if position == board.sorting:
            return

        siblings = [
            sibling for sibling in await self._ordered_boards(board.project_id)
            if sibling.id != board.id
        ]
        moves = [(board, position)]

        # Bump only the run of boards colliding with the new position
        expected = position
        for sibling in siblings:
            if sibling.sorting < expected:
                continue
            if sibling.sorting > expected:
                break
            moves.append((sibling, expected + 1))
            expected += 1

        await self._write_positions(moves)

    async def _write_positions(self, moves: List[Tuple[ProjectBoard, int]]) -> None:
        changed = [(board, position) for board, position in moves if board.sorting != position]
        if not changed:
            return
        # Park moved boards on negative keys first; (project_id, sorting) is
        # unique and each UPDATE is checked on its own
        for board, position in changed:
            board.sorting = -(position + 1)
        await self.db.flush()
        for board, position in changed:
            board.sorting = position
        await self.db.flush()
