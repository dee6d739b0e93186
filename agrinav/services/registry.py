"""
Service registry for LLM backends.

Backends register themselves by name with ``@register_llm``; tiers ask the
registry for a fresh instance of the configured backend.
"""

import logging
from threading import Lock
from typing import Any, Callable, Generic, Type, TypeVar

from .protocols import LLMService

logger = logging.getLogger("agrinav.services.registry")

T = TypeVar("T", bound=LLMService)


class ServiceRegistry(Generic[T]):
    """
    Thread-safe registry of service implementations.

    Supports:
    - Registration of implementation classes
    - Registration of factory functions
    - Instantiation by name
    """

    def __init__(self, service_type: str):
        self._service_type = service_type
        self._implementations: dict[str, Type[T]] = {}
        self._factories: dict[str, Callable[..., T]] = {}
        self._lock = Lock()

    def register(self, name: str, implementation: Type[T]) -> None:
        """Register an implementation class by name."""
        with self._lock:
            self._implementations[name] = implementation
        logger.debug("Registered %s implementation: %s", self._service_type, name)

    def register_factory(self, name: str, factory: Callable[..., T]) -> None:
        """Register a factory function for creating instances."""
        with self._lock:
            self._factories[name] = factory
        logger.debug("Registered %s factory: %s", self._service_type, name)

    def list_available(self) -> list[str]:
        """Return names of all registered implementations."""
        return sorted(set(self._implementations.keys()) | set(self._factories.keys()))

    def is_registered(self, name: str) -> bool:
        return name in self._implementations or name in self._factories

    def create(self, name: str, **kwargs: Any) -> T:
        """
        Instantiate a registered implementation without loading it.

        Args:
            name: Name of the registered implementation
            **kwargs: Arguments passed to the constructor/factory

        Raises:
            ValueError: If the implementation name is not registered
        """
        with self._lock:
            factory = self._factories.get(name) or self._implementations.get(name)
        if factory is None:
            raise ValueError(
                f"Unknown {self._service_type}: '{name}'. Available: {self.list_available()}"
            )
        logger.info("Creating %s: %s", self._service_type, name)
        return factory(**kwargs)


# Global registry for LLM services
llm_registry: ServiceRegistry[LLMService] = ServiceRegistry("LLM")


def register_llm(name: str) -> Callable[[Type[LLMService]], Type[LLMService]]:
    """Decorator to register an LLM implementation."""
    def decorator(cls: Type[LLMService]) -> Type[LLMService]:
        llm_registry.register(name, cls)
        return cls
    return decorator
