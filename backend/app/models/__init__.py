"""ORM models, imported here so every table is registered on Base.metadata."""

from .user import User, UserType, OrgMembership
from .repository import Repository, Collaborator
from .project import Project, BoardType
from .board import ProjectBoard

__all__ = [
    "User",
    "UserType",
    "OrgMembership",
    "Repository",
    "Collaborator",
    "Project",
    "BoardType",
    "ProjectBoard",
]
