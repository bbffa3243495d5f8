"""User and organization models"""
from __future__ import annotations

from datetime import datetime
import enum
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.shared_kernel.value_objects import AccessLevel

if TYPE_CHECKING:
    from app.models.repository import Repository


def utc_now():
    """Return current UTC time - compatible with SQLAlchemy default"""
    # Return timezone-naive UTC datetime for PostgreSQL TIMESTAMP WITHOUT TIME ZONE
    return datetime.utcnow()


class UserType(str, enum.Enum):
    """Account type enumeration"""
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"


class User(Base):
    """User model. Organizations are users of type ORGANIZATION."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    type: Mapped[UserType] = mapped_column(
        Enum(UserType),
        default=UserType.INDIVIDUAL,
        nullable=False,
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # sha256 hex digest of the caller's API token
    token_hash: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    # Relationships
    repositories: Mapped[list["Repository"]] = relationship(
        "Repository",
        back_populates="owner",
    )

    def __repr__(self):
        return f"<User {self.name}>"


class OrgMembership(Base):
    """Membership of a user in an organization with its access tier"""
    __tablename__ = "org_memberships"
    __table_args__ = (UniqueConstraint("org_id", "user_id", name="uq_org_membership"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    access_level: Mapped[AccessLevel] = mapped_column(
        Enum(AccessLevel),
        default=AccessLevel.READ,
        nullable=False,
    )

    def __repr__(self):
        return f"<OrgMembership org={self.org_id} user={self.user_id} {self.access_level.name}>"
