"""
Singleton registry for configuration instances.

This module provides the process-wide container that maps every configuration
type to its one live instance, and the context object that owns it together
with the one-shot discovery guard.
"""

import threading
from typing import Dict, Optional, Type, TypeVar, List, Iterator, Tuple

from simplejsonconfig.core.exceptions import AlreadyInitializedError, ConfigNotFoundError
from simplejsonconfig.logger import get_logger

T = TypeVar('T')

# Unbound so the host can configure logging after import
logger = get_logger()


class SingletonRegistry:
    """
    Mapping from configuration type to its live instance.

    Insertion is the only mutation. Entries are keyed by the exact runtime
    type of the instance; a second ``put`` for the same type replaces the
    first.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._singletons: Dict[type, object] = {}

    def put(self, config_type: Type[T], instance: T) -> None:
        """Store ``instance`` as the singleton for ``config_type``."""
        with self._lock:
            if config_type in self._singletons:
                logger.warning("Replacing registered configuration", component="SingletonRegistry",
                               config_class=config_type.__qualname__)
            self._singletons[config_type] = instance
            logger.debug("Configuration registered", component="SingletonRegistry",
                         config_class=config_type.__qualname__)

    def get(self, config_type: Type[T]) -> Optional[T]:
        """Return the singleton for ``config_type``, or None if there is none."""
        with self._lock:
            return self._singletons.get(config_type)

    def require(self, config_type: Type[T]) -> T:
        """
        Return the singleton for ``config_type``.

        Raises:
            ConfigNotFoundError: If the type was never registered
        """
        with self._lock:
            try:
                return self._singletons[config_type]
            except KeyError:
                raise ConfigNotFoundError(config_type) from None

    def types(self) -> List[type]:
        """List registered configuration types in insertion order."""
        with self._lock:
            return list(self._singletons.keys())

    def items(self) -> List[Tuple[type, object]]:
        with self._lock:
            return list(self._singletons.items())

    def __contains__(self, config_type: type) -> bool:
        with self._lock:
            return config_type in self._singletons

    def __len__(self) -> int:
        with self._lock:
            return len(self._singletons)

    def __iter__(self) -> Iterator[type]:
        return iter(self.types())


class ConfigContext:
    """
    Process-wide state shared by discovery, injection and lookups.

    The context is populated once by ``process_module`` and read-only after
    that. It lives as long as the hosting process; there is no teardown
    beyond dropping the reference.
    """

    def __init__(self, registry: Optional[SingletonRegistry] = None):
        self.registry = registry if registry is not None else SingletonRegistry()
        self._lock = threading.Lock()
        self._initialized_by: Optional[str] = None

    @property
    def initialized(self) -> bool:
        return self._initialized_by is not None

    @property
    def initialized_by(self) -> Optional[str]:
        """Name of the module whose discovery run claimed this context."""
        return self._initialized_by

    def mark_initialized(self, module_name: str) -> None:
        """
        Claim the context for a discovery run.

        Raises:
            AlreadyInitializedError: If a discovery run already claimed it
        """
        with self._lock:
            if self._initialized_by is not None:
                raise AlreadyInitializedError(module_name)
            self._initialized_by = module_name

    def get(self, config_type: Type[T]) -> Optional[T]:
        return self.registry.get(config_type)

    def resolve(self, config_type: Type[T]) -> T:
        """Return the registered instance of ``config_type`` or raise ConfigNotFoundError."""
        return self.registry.require(config_type)


_default_context = ConfigContext()
_default_lock = threading.Lock()


def get_default_context() -> ConfigContext:
    """Return the process default context."""
    with _default_lock:
        return _default_context


def set_default_context(context: ConfigContext) -> ConfigContext:
    """Replace the process default context and return the previous one."""
    global _default_context
    with _default_lock:
        previous = _default_context
        _default_context = context
        return previous
