"""Repository model"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.user import utc_now
from app.shared_kernel.value_objects import AccessLevel

if TYPE_CHECKING:
    from app.models.user import User


class Repository(Base):
    """Repository model, owned by an individual or an organization"""
    __tablename__ = "repositories"
    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_repository_owner_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    owner: Mapped["User"] = relationship("User", back_populates="repositories", lazy="joined")

    @property
    def full_name(self) -> str:
        return f"{self.owner.name}/{self.name}"

    def __repr__(self):
        return f"<Repository {self.name}>"


class Collaborator(Base):
    """Explicit access grant of a user on a repository"""
    __tablename__ = "repo_collaborators"
    __table_args__ = (UniqueConstraint("repo_id", "user_id", name="uq_repo_collaborator"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    repo_id: Mapped[int] = mapped_column(Integer, ForeignKey("repositories.id"), index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    access_level: Mapped[AccessLevel] = mapped_column(
        Enum(AccessLevel),
        default=AccessLevel.WRITE,
        nullable=False,
    )
