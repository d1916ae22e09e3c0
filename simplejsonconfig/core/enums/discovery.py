"""
Discovery-related enums for simplejsonconfig.
"""

from enum import Enum


class BindingState(Enum):
    """Lifecycle of a configuration instance while it is bound to its file."""
    UNBOUND = "unbound"
    FILE_MISSING = "file_missing"
    FILE_EXISTS = "file_exists"
    CREATED = "created"
    LOADED = "loaded"
    CORRUPT = "corrupt"
    FAILED = "failed"
    REGISTERED = "registered"


class SkipReason(Enum):
    """Why a configuration candidate was left out of the registry."""
    INVALID_SHAPE = "invalid_shape"
    NO_DEFAULT_CONSTRUCTOR = "no_default_constructor"
    IO_FAILURE = "io_failure"
    CORRUPT_FILE = "corrupt_file"


class InjectionOutcome(Enum):
    """Result of processing one autowired field."""
    INJECTED = "injected"
    UNRESOLVED = "unresolved"
    NOT_STATIC = "not_static"
    NOT_CONFIG_TYPE = "not_config_type"
