"""Service registry for dependency injection."""

from collections.abc import Callable
from functools import lru_cache
from typing import Any, TypeVar, cast

T = TypeVar("T")
ServiceFactory = Callable[[], T]


class ServiceRegistry:
    """Registry for all shared services with support for singletons and factories.

    Services are keyed by type name, so a ``Protocol`` (``MailSender``) can be
    registered and resolved like a concrete class. The composition root fills
    the registry at startup; message handlers and FastAPI dependencies read it.
    """

    def __init__(self):
        """Initialize an empty service registry."""
        self._singletons: dict[str, Any] = {}
        self._factories: dict[str, ServiceFactory[Any]] = {}

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """Register a singleton instance by its type.

        Args:
            service_type: The type of the service to register
            instance: The singleton instance to register
        """
        name = service_type.__name__
        self._factories.pop(name, None)
        self._singletons[name] = instance

    def register_factory(self, service_type: type[T], factory: ServiceFactory[T]) -> None:
        """Register a factory function by its type.

        Args:
            service_type: The type of the service to register
            factory: The factory function that creates instances of the service
        """
        name = service_type.__name__
        self._singletons.pop(name, None)
        self._factories[name] = factory

    def has(self, service_type: type) -> bool:
        name = service_type.__name__
        return name in self._singletons or name in self._factories

    def get(self, service_type: type[T]) -> T:
        """Get a service instance by type.

        Args:
            service_type: The type of the service to retrieve

        Returns:
            An instance of the requested service

        Raises:
            KeyError: If the requested service is not registered
        """
        name = service_type.__name__

        if name in self._singletons:
            return cast(T, self._singletons[name])
        if name in self._factories:
            return cast(T, self._factories[name]())

        raise KeyError(f"Service {name} not registered")

    def clear(self) -> None:
        """Forget every registration (used on shutdown and between tests)."""
        self._singletons.clear()
        self._factories.clear()


@lru_cache
def get_service_registry() -> ServiceRegistry:
    """Get the process service registry instance.

    Returns:
        The global service registry instance
    """
    return ServiceRegistry()
