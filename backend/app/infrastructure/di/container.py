"""Simple dependency injection container."""
from __future__ import annotations

from typing import TypeVar, Type, Dict, Callable, Any, Optional
import threading
from contextlib import contextmanager

from .scopes import Scope

T = TypeVar("T")


class Registration:
    def __init__(self, factory: Callable[["Container"], Any], scope: Scope) -> None:
        self.factory = factory
        self.scope = scope


class Container:
    _instance: Optional["Container"] = None
    _lock = threading.RLock()

    def __init__(self) -> None:
        self._registrations: Dict[Type, Registration] = {}
        self._singletons: Dict[Type, Any] = {}

    @classmethod
    def get_instance(cls) -> "Container":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (tests only)."""
        cls._instance = None

    def register(
        self,
        interface: Type[T],
        factory: Callable[["Container"], T],
        scope: Scope = Scope.SINGLETON,
    ) -> None:
        self._registrations[interface] = Registration(factory, scope)
        self._singletons.pop(interface, None)

    def resolve(self, interface: Type[T]) -> T:
        if interface not in self._registrations:
            raise KeyError(f"No registration found for {interface.__name__}")

        registration = self._registrations[interface]

        if registration.scope == Scope.SINGLETON:
            if interface not in self._singletons:
                with self._lock:
                    if interface not in self._singletons:
                        self._singletons[interface] = registration.factory(self)
            return self._singletons[interface]

        return registration.factory(self)

    @contextmanager
    def override(self, interface: Type[T], instance: T):
        """Temporarily resolve ``interface`` to ``instance``."""
        previous_registration = self._registrations.get(interface)
        previous_singleton = self._singletons.pop(interface, None)
        self._registrations[interface] = Registration(lambda c: instance, Scope.TRANSIENT)
        try:
            yield instance
        finally:
            if previous_registration is None:
                self._registrations.pop(interface, None)
            else:
                self._registrations[interface] = previous_registration
            if previous_singleton is not None:
                self._singletons[interface] = previous_singleton

    def is_registered(self, interface: Type) -> bool:
        return interface in self._registrations
