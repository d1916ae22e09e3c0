"""
Core exceptions for simplejsonconfig.

Fatal errors (a second discovery run, a module without an install location)
escape ``process_module``. Per-configuration failures are reported, not raised.
"""

from .base import (
    SimpleJsonConfigError,
    ConfigurationError,
    StateError,
    NotFoundError,
    AlreadyInitializedError,
    MissingModuleRootError,
    ConfigNotBoundError,
    ConfigPersistenceError,
    ConfigDecodeError,
    ConfigNotFoundError,
    UnresolvedDependencyError
)

__all__ = [
    'SimpleJsonConfigError',
    'ConfigurationError',
    'StateError',
    'NotFoundError',
    'AlreadyInitializedError',
    'MissingModuleRootError',
    'ConfigNotBoundError',
    'ConfigPersistenceError',
    'ConfigDecodeError',
    'ConfigNotFoundError',
    'UnresolvedDependencyError'
]
