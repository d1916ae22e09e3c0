"""
Base exception classes for simplejsonconfig.
"""


class SimpleJsonConfigError(Exception):
    """Base exception for all simplejsonconfig errors."""
    pass


class ConfigurationError(SimpleJsonConfigError):
    """Raised when engine settings are invalid."""

    def __init__(self, config_key: str = None, config_value: str = None, reason: str = None):
        self.config_key = config_key
        self.config_value = config_value
        self.reason = reason
        message = "Configuration error"
        if config_key:
            message += f" for '{config_key}'"
        if config_value:
            message += f" with value '{config_value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StateError(SimpleJsonConfigError):
    """Base exception for operations attempted in the wrong lifecycle state."""

    def __init__(self, entity: str, current_state: str, operation: str = None):
        self.entity = entity
        self.current_state = current_state
        self.operation = operation

        message = f"{entity} is in state '{current_state}'"
        if operation:
            message += f" but operation '{operation}' is not allowed"
        super().__init__(message)


class NotFoundError(SimpleJsonConfigError):
    """Base exception for lookups that found nothing."""

    def __init__(self, entity_type: str, identifier: str = None):
        self.entity_type = entity_type
        self.identifier = identifier
        message = f"{entity_type} not found"
        if identifier:
            message += f" with identifier '{identifier}'"
        super().__init__(message)


class AlreadyInitializedError(StateError):
    """Raised when discovery is started a second time on the same context."""

    def __init__(self, module_name: str = None):
        self.module_name = module_name
        operation = "process_module"
        if module_name:
            operation += f"({module_name})"
        super().__init__("ConfigContext", "initialized", operation)


class MissingModuleRootError(SimpleJsonConfigError):
    """Raised when the host module cannot tell where it is installed."""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f"Cannot find module main directory for '{module_name}'")


class ConfigNotBoundError(StateError):
    """Raised when a configuration is reloaded or saved before it has a file."""

    def __init__(self, config_type: type):
        self.config_type = config_type
        super().__init__(config_type.__qualname__, "unbound", "file access")


class ConfigPersistenceError(SimpleJsonConfigError):
    """Raised when a configuration file cannot be read or written."""

    def __init__(self, path, reason: str = None):
        self.path = path
        self.reason = reason
        message = f"Cannot access configuration file '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigDecodeError(SimpleJsonConfigError):
    """Raised when a configuration file holds content that cannot be decoded."""

    def __init__(self, path, reason: str = None, field: str = None):
        self.path = path
        self.reason = reason
        self.field = field
        message = f"Config file '{path}' is corrupted"
        if field:
            message += f" (field '{field}')"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigNotFoundError(NotFoundError):
    """Raised when no singleton is registered for a configuration type."""

    def __init__(self, config_type: type):
        self.config_type = config_type
        super().__init__("Configuration", f"{config_type.__module__}.{config_type.__qualname__}")


class UnresolvedDependencyError(SimpleJsonConfigError):
    """Raised when a consumer asks for a configuration that was never registered."""

    def __init__(self, consumer: str, parameter: str, config_type: type):
        self.consumer = consumer
        self.parameter = parameter
        self.config_type = config_type
        super().__init__(
            f"Cannot provide '{parameter}' to {consumer}: "
            f"{config_type.__qualname__} is not registered"
        )
