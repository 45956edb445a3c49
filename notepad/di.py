"""
Dependency Injection Container for the notepad

This module provides a simple dependency injection container that owns the
long-lived objects of a running notepad: settings, the storage backend, the
note repository and the interaction controller.

The repository is built once per container and shared by reference, so the
terminal loop and the HTTP API never reach for module-level state.
"""

from typing import Dict, Any, Callable, Optional, Type, TypeVar

T = TypeVar('T')

class DIContainer:
    """
    A simple dependency injection container that manages application dependencies.

    This container allows registering and retrieving dependencies, making it easier
    to replace implementations for testing and improving modularity.
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[..., Any]] = {}

    def register(self, name: str, instance: Any) -> None:
        """
        Register an instance with the container.

        Args:
            name: The name to register the instance under
            instance: The instance to register
        """
        self._services[name] = instance

    def register_factory(self, name: str, factory: Callable[..., Any]) -> None:
        """
        Register a factory function that creates an instance when needed.

        Args:
            name: The name to register the factory under
            factory: A callable that receives the container and returns an instance
        """
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        """
        Get an instance from the container.

        Args:
            name: The name of the instance to retrieve

        Returns:
            The registered instance or a new instance created by the factory

        Raises:
            KeyError: If the name is not registered
        """
        if name in self._services:
            return self._services[name]

        if name in self._factories:
            instance = self._factories[name](self)
            self._services[name] = instance
            return instance

        raise KeyError(f"No service or factory registered for '{name}'")

    def get_or_default(self, name: str, default: Any = None) -> Any:
        """
        Get an instance from the container or return a default value if not found.
        """
        try:
            return self.get(name)
        except KeyError:
            return default

    def get_typed(self, name: str, cls: Type[T]) -> T:
        """
        Get an instance from the container with type checking.

        Raises:
            KeyError: If the name is not registered
            TypeError: If the instance is not of the expected type
        """
        instance = self.get(name)
        if not isinstance(instance, cls):
            raise TypeError(f"Service '{name}' is not of type {cls.__name__}")
        return instance


def _build_clipboard(c: DIContainer):
    from notepad.clipboard import MemoryClipboard, SystemClipboard
    kind = c.get("settings").get("clipboard", "system")
    return MemoryClipboard() if kind == "memory" else SystemClipboard()


def _build_controller(c: DIContainer):
    from notepad.controller import InteractionController
    settings = c.get("settings")
    return InteractionController(
        repository=c.get("repository"),
        clipboard=c.get("clipboard"),
        scheduler=c.get("scheduler"),
        feedback_window=settings.get("feedback_window_ms", 500) / 1000.0,
    )


def build_container(settings: Optional[Dict[str, Any]] = None) -> DIContainer:
    """
    Create a container wired with the notepad services.

    Args:
        settings: Effective settings; loaded from settings.json when omitted

    Returns:
        Container with factories for settings, storage, repository,
        scheduler, clipboard and controller
    """
    from notepad.config import get_storage, load_settings
    from notepad.repository import NoteRepository
    from notepad.transient import ThreadingScheduler

    container = DIContainer()
    if settings is not None:
        container.register("settings", settings)
    else:
        container.register_factory("settings", lambda c: load_settings())
    container.register_factory("storage", lambda c: get_storage(c.get("settings")))
    container.register_factory("repository", lambda c: NoteRepository(c.get("storage")))
    container.register_factory("scheduler", lambda c: ThreadingScheduler())
    container.register_factory("clipboard", _build_clipboard)
    container.register_factory("controller", _build_controller)
    return container
