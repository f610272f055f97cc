"""
Service Container for dependency injection.
Keeps one place where the web layer and the CLI resolve the dashboard
services, so tests can swap any of them for a stub.
"""
from typing import Dict, Any, Callable, TypeVar, Optional
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceNotFoundError(Exception):
    """Raised when a requested service is not registered."""
    pass


class ServiceCreationError(Exception):
    """Raised when a registered factory fails to build its service."""
    pass


class ServiceContainer:
    """
    Registry of named services.

    - singleton: built on first get(), then reused
    - factory: built on every get()
    - instance: registered ready-made
    """

    def __init__(self):
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singleton_factories: Dict[str, Callable[[], Any]] = {}
        self._instances: Dict[str, Any] = {}
        self._config: Dict[str, Any] = {}

    def set_config(self, config: Dict[str, Any]) -> None:
        self._config.update(config)

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def register_singleton(self, name: str, factory: Callable[[], T]) -> None:
        self._singleton_factories[name] = factory
        self._instances.pop(name, None)
        logger.debug(f"Registered singleton service: {name}")

    def register_factory(self, name: str, factory: Callable[[], T]) -> None:
        self._factories[name] = factory
        logger.debug(f"Registered factory service: {name}")

    def register_instance(self, name: str, instance: T) -> None:
        self._instances[name] = instance
        logger.debug(f"Registered service instance: {name}")

    def get(self, name: str) -> Any:
        """
        Resolve a service by name.

        Raises:
            ServiceNotFoundError: If nothing is registered under name
            ServiceCreationError: If the factory raised
        """
        if name in self._instances:
            return self._instances[name]

        if name in self._singleton_factories:
            instance = self._build(name, self._singleton_factories[name])
            self._instances[name] = instance
            return instance

        if name in self._factories:
            return self._build(name, self._factories[name])

        raise ServiceNotFoundError(f"Service '{name}' not found in container")

    def _build(self, name: str, factory: Callable[[], Any]) -> Any:
        try:
            logger.debug(f"Creating service: {name}")
            return factory()
        except Exception as e:
            logger.error(f"Failed to create service '{name}': {e}")
            raise ServiceCreationError(f"Failed to create service '{name}': {e}") from e

    def has_service(self, name: str) -> bool:
        return (name in self._instances or
                name in self._singleton_factories or
                name in self._factories)

    def clear_singletons(self) -> None:
        """Drop built singletons so the next get() rebuilds them."""
        for name in list(self._instances):
            if name in self._singleton_factories:
                del self._instances[name]
        logger.debug("Cleared singleton instances")

    def list_services(self) -> Dict[str, str]:
        services = {}
        for name in self._factories:
            services[name] = "factory"
        for name in self._singleton_factories:
            services[name] = "singleton_factory"
        for name in self._instances:
            if name not in self._singleton_factories:
                services[name] = "singleton_instance"
        return services


# Global container instance
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global service container instance."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    _container = None
