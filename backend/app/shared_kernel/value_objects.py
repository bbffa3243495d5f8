"""Shared kernel value objects."""
from dataclasses import dataclass
import enum
from typing import Optional


class OwnerType(str, enum.Enum):
    """Owner context of a project. Also the scope kind used to address it."""
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"
    REPOSITORY = "repository"


class AccessLevel(enum.IntEnum):
    NONE = 0
    READ = 1
    WRITE = 2
    ADMIN = 3


@dataclass(frozen=True)
class OwnerRef:
    """Resolved owner context.

    ``kind`` is the variant tag. ``id`` is a user id for individual and
    organization owners and a repository id for repository owners, in which
    case ``repo_owner_id`` holds the id of the user or organization owning
    the repository.
    """

    kind: OwnerType
    id: int
    name: str
    repo_owner_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.name}"


@dataclass(frozen=True)
class Caller:
    """Authenticated identity performing a request."""

    user_id: int
    name: str
    is_admin: bool = False
