"""Schemas for project boards"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BoardCreate(BaseModel):
    """Request to add a board to a project."""
    title: str = Field(..., max_length=255)
    color: str = Field(default="", max_length=32)
    is_default: bool = False


class BoardUpdate(BaseModel):
    """Partial board update. Unset fields are left untouched."""
    title: Optional[str] = Field(default=None, max_length=255)
    color: Optional[str] = Field(default=None, max_length=32)
    sorting: Optional[int] = None
    is_default: Optional[bool] = None


class BoardOrder(BaseModel):
    """Full ordering of a project's boards, first to last."""
    board_ids: List[int]


class BoardResponse(BaseModel):
    id: int
    project_id: int
    title: str
    color: str
    sorting: int
    is_default: bool
    creator_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
