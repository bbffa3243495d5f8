"""Project model"""
from __future__ import annotations

from datetime import datetime
import enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.user import utc_now
from app.shared_kernel.value_objects import OwnerType


class BoardType(str, enum.Enum):
    """Board layout a project is created with"""
    NONE = "none"
    BASIC_KANBAN = "basic_kanban"
    BUG_TRIAGE = "bug_triage"
    CUSTOM = "custom"


class Project(Base):
    """Project model"""
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "(owner_type = 'REPOSITORY' AND repo_id IS NOT NULL AND owner_id IS NULL)"
            " OR (owner_type IN ('INDIVIDUAL', 'ORGANIZATION')"
            " AND owner_id IS NOT NULL AND repo_id IS NULL)",
            name="ck_project_single_owner",
        ),
        Index("ix_projects_owner", "owner_type", "owner_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    board_type: Mapped[BoardType] = mapped_column(
        Enum(BoardType),
        default=BoardType.NONE,
        nullable=False,
    )
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Owner, immutable after creation
    owner_type: Mapped[OwnerType] = mapped_column(Enum(OwnerType), nullable=False)
    owner_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    repo_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("repositories.id"),
        index=True,
        nullable=True,
    )
    creator_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Project {self.title}>"
