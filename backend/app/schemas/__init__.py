"""Pydantic schemas for request/response validation"""
from app.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectList,
    ProjectState,
    ProjectSort,
)
from app.schemas.board import (
    BoardCreate,
    BoardUpdate,
    BoardOrder,
    BoardResponse,
)

__all__ = [
    # Project
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectList",
    "ProjectState",
    "ProjectSort",
    # Board
    "BoardCreate",
    "BoardUpdate",
    "BoardOrder",
    "BoardResponse",
]
