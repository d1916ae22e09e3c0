"""
Metadata markers.

``@configuration(name)`` marks a class as a configuration candidate and
``autowired()`` marks a class attribute as wanting a configuration singleton.
Both register themselves in process-wide tables when the defining module is
imported; the metadata index reads those tables instead of scanning code.
"""

import threading
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ConfigurationMarker:
    """Payload of the ``@configuration`` marker."""
    name: str


@dataclass(frozen=True)
class FieldMarker:
    """A class attribute carrying the ``autowired()`` marker."""
    owner: type
    field_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.owner.__module__}.{self.owner.__qualname__}.{self.field_name}"


_lock = threading.Lock()
_marked_types: List[type] = []
_marked_fields: List[FieldMarker] = []


def configuration(name: Optional[str] = None):
    """
    Mark a class as a configuration entity.

    Parameters
    ----------
    name : `str`, optional
        Logical name the backing file is derived from. ``"server"`` and
        ``"server.json"`` both map to ``server.json``. Defaults to the class name.
    """
    if isinstance(name, type):
        raise TypeError("configuration() must be called: use @configuration() or @configuration('name')")

    def decorator(cls):
        if not isinstance(cls, type):
            raise TypeError(f"@configuration can only decorate classes, got {cls!r}")
        cls.__configuration__ = ConfigurationMarker(name or cls.__name__)
        with _lock:
            if cls not in _marked_types:
                _marked_types.append(cls)
        return cls

    return decorator


def get_marker(cls: type) -> Optional[ConfigurationMarker]:
    """Return the configuration marker of ``cls``, inherited ones included."""
    marker = getattr(cls, '__configuration__', None)
    return marker if isinstance(marker, ConfigurationMarker) else None


class AutowiredMarker:
    """
    Placeholder value of an autowired class attribute.

    Only attributes annotated ``ClassVar[SomeConfig]`` are injected; the
    placeholder stays in place otherwise.
    """

    def __init__(self):
        self.owner: Optional[type] = None
        self.field_name: Optional[str] = None

    def __set_name__(self, owner, name):
        self.owner = owner
        self.field_name = name
        with _lock:
            _marked_fields.append(FieldMarker(owner, name))

    def __repr__(self):
        if self.owner is None:
            return "autowired()"
        return f"autowired({self.owner.__qualname__}.{self.field_name})"


def autowired() -> AutowiredMarker:
    """Mark a class attribute as an injection target."""
    return AutowiredMarker()


def marked_types() -> List[type]:
    """All classes carrying ``@configuration``, in registration order."""
    with _lock:
        return list(_marked_types)


def marked_fields() -> List[FieldMarker]:
    """All ``autowired()`` attributes, in registration order."""
    with _lock:
        return list(_marked_fields)
