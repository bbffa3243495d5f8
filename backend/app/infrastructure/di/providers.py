"""Service registration for the DI container."""
from __future__ import annotations

from app.infrastructure.di.container import Container
from app.infrastructure.di.scopes import Scope
from app.services.hooks import BoardDetachHook, NullBoardDetachHook


def configure_container(container: Container) -> None:
    """Configure application dependencies."""

    # External collaborators invoked inside store transactions
    container.register(BoardDetachHook, lambda c: NullBoardDetachHook(), Scope.SINGLETON)


def get_configured_container() -> Container:
    """Return a configured container instance."""
    container = Container.get_instance()
    if not container.is_registered(BoardDetachHook):
        configure_container(container)
    return container
