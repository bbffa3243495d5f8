"""Hooks invoked by the stores for collaborators living outside this service."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession


class BoardDetachHook(ABC):
    """
    Called inside a deletion transaction, before the boards are removed.

    Implementations detach whatever references the boards (issue cards,
    automation rules) using the same session so their writes commit or roll
    back with the deletion.
    """

    @abstractmethod
    async def boards_detached(
        self,
        db: AsyncSession,
        project_id: int,
        board_ids: Sequence[int],
    ) -> None:
        raise NotImplementedError


class NullBoardDetachHook(BoardDetachHook):
    async def boards_detached(
        self,
        db: AsyncSession,
        project_id: int,
        board_ids: Sequence[int],
    ) -> None:
        return None
