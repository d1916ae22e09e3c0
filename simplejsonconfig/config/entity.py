"""
Base class for file-backed configuration objects.
"""

from pathlib import Path
from typing import Optional, Type, TypeVar

from simplejsonconfig.config.core.registry import ConfigContext, get_default_context
from simplejsonconfig.config.core.serializer import Serializer, get_serializer
from simplejsonconfig.core.exceptions import ConfigNotBoundError

C = TypeVar('C', bound='ConfigEntity')


class ConfigEntity:
    """
    A configuration object whose state round-trips to a single JSON file.

    Subclasses are discovered when they carry the ``@configuration`` marker and
    inherit from ConfigEntity directly. They must be constructible without
    arguments; the default-constructed state is what gets written when the
    file does not exist yet.

    Example
    -------
    >>> @configuration("server")
    ... @dataclass
    ... class ServerConfig(ConfigEntity):
    ...     host: str = "localhost"
    ...     port: int = 8080
    """

    _config_file: Optional[Path] = None
    _serializer: Optional[Serializer] = None

    @property
    def config_file(self) -> Optional[Path]:
        """Backing file, None until the instance is bound."""
        return self._config_file

    @property
    def is_bound(self) -> bool:
        return self._config_file is not None

    def bind(self, config_file: Path, serializer: Optional[Serializer] = None) -> None:
        """Attach the backing file and the serializer used for it."""
        self._config_file = Path(config_file)
        self._serializer = serializer

    def reload(self: C) -> C:
        """
        Re-read the backing file and replace field values in place.

        Returns
        ----------
        self

        Raises
        ----------
            ConfigNotBoundError : If the instance has no backing file.
            ConfigDecodeError : If the file content cannot be decoded.
            ConfigPersistenceError : If the file cannot be read.
        """
        if not self.is_bound:
            raise ConfigNotBoundError(type(self))
        self._get_serializer().load(self, self._config_file)
        return self

    def save(self: C) -> C:
        """
        Write the current state to the backing file.

        Raises
        ----------
            ConfigNotBoundError : If the instance has no backing file.
            ConfigPersistenceError : If the file cannot be written.
        """
        if not self.is_bound:
            raise ConfigNotBoundError(type(self))
        self._get_serializer().save(self, self._config_file)
        return self

    def _get_serializer(self) -> Serializer:
        return self._serializer if self._serializer is not None else get_serializer()

    @classmethod
    def get_instance(cls, config_type: Optional[Type[C]] = None,
                     context: Optional[ConfigContext] = None) -> Optional[C]:
        """
        Look up the registered singleton of a configuration type.

        ``ServerConfig.get_instance()`` and
        ``ConfigEntity.get_instance(ServerConfig)`` are equivalent.

        Returns None when the type is not registered (never discovered,
        skipped, or discovery has not run yet).
        """
        if config_type is None:
            config_type = cls
        context = context or get_default_context()
        return context.get(config_type)


def is_config_type(obj) -> bool:
    """True if ``obj`` is a class whose primary base is exactly ConfigEntity."""
    if not isinstance(obj, type) or obj is ConfigEntity:
        return False
    return bool(obj.__bases__) and obj.__bases__[0] is ConfigEntity
