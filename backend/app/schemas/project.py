"""Schemas for projects"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.project import BoardType
from app.shared_kernel.value_objects import OwnerType


class ProjectState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class ProjectSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RECENT_UPDATE = "recent_update"
    LEAST_UPDATE = "least_update"
    ALPHABETICAL = "alphabetical"


class ProjectCreate(BaseModel):
    """Request to create a project in an owner scope."""
    title: str = Field(..., max_length=255)
    description: str = ""
    board_type: BoardType = BoardType.NONE
    custom_boards: Optional[List[str]] = Field(
        default=None,
        description="Board titles, required when board_type is custom",
    )


class ProjectUpdate(BaseModel):
    """Partial project update. Unset fields are left untouched."""
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    is_closed: Optional[bool] = None


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: str
    board_type: BoardType
    is_closed: bool
    owner_type: OwnerType
    owner_id: Optional[int] = None
    repo_id: Optional[int] = None
    creator_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectList(BaseModel):
    projects: List[ProjectResponse]
    total: int
