"""
Configuration serializers.

A serializer converts a configuration object to and from its file. Loading
mutates the object in place; saving writes its public state.
"""

import dataclasses
import json
import threading
import types
import typing
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, Union

from simplejsonconfig.core.exceptions import ConfigDecodeError, ConfigPersistenceError
from simplejsonconfig.logger import get_logger
from simplejsonconfig.settings import EngineSettings, get_settings


class Serializer(ABC):
    """
    Abstract base class for configuration serializers.

    Defines the interface the discovery engine and ConfigEntity rely on.
    """

    def __init__(self):
        self.logger = get_logger().bind(component=type(self).__name__)
        self._lock = threading.RLock()

    @abstractmethod
    def save(self, entity: Any, path: Path) -> None:
        """Write ``entity`` to ``path``. Raises ConfigPersistenceError."""
        pass

    @abstractmethod
    def load(self, entity: Any, path: Path) -> None:
        """Read ``path`` into ``entity`` in place. Raises ConfigDecodeError."""
        pass


class _CoercionError(Exception):
    pass


class JsonSerializer(Serializer):
    """
    JSON serializer driven by the type hints of the configuration class.

    Public instance attributes are written (dataclass fields when the class is
    a dataclass). On load, keys the class does not know are ignored and keys
    the file does not contain keep their current value.
    """

    def __init__(self, indent: int = 2, encoding: str = "utf-8"):
        super().__init__()
        self.indent = indent
        self.encoding = encoding

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None) -> "JsonSerializer":
        settings = settings or get_settings()
        return cls(indent=settings.indent, encoding=settings.encoding)

    def save(self, entity: Any, path: Path) -> None:
        path = Path(path)
        try:
            text = json.dumps(self.encode(entity), indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ConfigPersistenceError(path, f"cannot encode {type(entity).__qualname__}: {e}")

        with self._lock:
            try:
                path.write_text(text + "\n", encoding=self.encoding)
            except OSError as e:
                raise ConfigPersistenceError(path, e.strerror or str(e))
        self.logger.debug("Config saved", config_class=type(entity).__qualname__, path=str(path))

    def load(self, entity: Any, path: Path) -> None:
        path = Path(path)
        with self._lock:
            try:
                text = path.read_text(encoding=self.encoding)
            except UnicodeDecodeError as e:
                raise ConfigDecodeError(path, str(e))
            except OSError as e:
                raise ConfigPersistenceError(path, e.strerror or str(e))

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigDecodeError(path, f"{e.msg} at line {e.lineno} column {e.colno}")
        except RecursionError:
            raise ConfigDecodeError(path, "nesting too deep")

        if not isinstance(data, dict):
            raise ConfigDecodeError(path, f"expected a JSON object, got {type(data).__name__}")

        self.decode_into(entity, data, path)
        self.logger.debug("Config loaded", config_class=type(entity).__qualname__, path=str(path))

    def encode(self, entity: Any) -> Dict[str, Any]:
        """Convert the public state of ``entity`` to JSON-compatible values."""
        return {name: _to_primitive(getattr(entity, name)) for name in _field_names(entity)}

    def decode_into(self, entity: Any, data: Dict[str, Any], path: Union[str, Path] = "<memory>") -> None:
        """
        Assign the values of ``data`` to ``entity``.

        All values are converted first; nothing is assigned if any of them fails.
        ``null`` is accepted for any field, except that a ``bool``, ``int`` or
        ``float`` field keeps its current value.
        """
        hints = _type_hints(type(entity))
        known = set(_field_names(entity))
        values = {}
        for key, raw in data.items():
            if key not in known:
                continue
            hint = hints.get(key, Any)
            if raw is None and _is_primitive(hint):
                continue
            try:
                values[key] = _coerce(raw, hint)
            except _CoercionError as e:
                raise ConfigDecodeError(path, str(e), field=key)
            except (TypeError, ValueError) as e:
                # Raised by nested constructors and hashing of set items
                raise ConfigDecodeError(path, f"{type(e).__name__}: {e}", field=key)
            except RecursionError:
                raise ConfigDecodeError(path, "nesting too deep", field=key)

        for key, value in values.items():
            setattr(entity, key, value)


_serializer_lock = threading.Lock()
_default_serializer: Optional[Serializer] = None


def get_serializer() -> Serializer:
    """Return the process default serializer."""
    global _default_serializer
    with _serializer_lock:
        if _default_serializer is None:
            _default_serializer = JsonSerializer.from_settings()
        return _default_serializer


def set_serializer(serializer: Serializer) -> Optional[Serializer]:
    """Replace the process default serializer and return the previous one."""
    global _default_serializer
    with _serializer_lock:
        previous = _default_serializer
        _default_serializer = serializer
        return previous


def _field_names(entity: Any) -> list:
    if dataclasses.is_dataclass(entity):
        return [f.name for f in dataclasses.fields(entity) if not f.name.startswith('_')]

    names = [name for name in vars(entity) if not name.startswith('_')]
    for name, hint in _type_hints(type(entity)).items():
        if name.startswith('_') or name in names or not hasattr(entity, name):
            continue
        if typing.get_origin(hint) is typing.ClassVar:
            continue
        names.append(name)
    return names


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to raw values
        return {}


def _to_primitive(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_primitive(getattr(value, f.name))
                for f in dataclasses.fields(value) if not f.name.startswith('_')}
    if isinstance(value, Enum):
        return _to_primitive(value.value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(_to_primitive(k)): _to_primitive(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        try:
            items = sorted(value)
        except TypeError:
            items = sorted(value, key=repr)
        return [_to_primitive(v) for v in items]
    if isinstance(value, (list, tuple)):
        return [_to_primitive(v) for v in value]
    return value


def _coerce(value: Any, hint: Any) -> Any:
    if hint is Any or hint is None:
        return value

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is Union or origin is types.UnionType:
        if value is None and type(None) in args:
            return None
        errors = []
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _coerce(value, arg)
            except _CoercionError as e:
                errors.append(str(e))
        raise _CoercionError("; ".join(errors) or f"cannot convert {value!r}")

    if origin in (list, set, frozenset, tuple):
        if not isinstance(value, list):
            raise _CoercionError(f"expected a list, got {type(value).__name__}")
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(_coerce(v, args[0]) for v in value)
            if args:
                if len(args) != len(value):
                    raise _CoercionError(f"expected {len(args)} items, got {len(value)}")
                return tuple(_coerce(v, a) for v, a in zip(value, args))
            return tuple(value)
        item_hint = args[0] if args else Any
        items = [_coerce(v, item_hint) for v in value]
        try:
            return origin(items)
        except TypeError as e:
            raise _CoercionError(f"invalid {origin.__name__} item: {e}")

    if origin is dict:
        if not isinstance(value, dict):
            raise _CoercionError(f"expected an object, got {type(value).__name__}")
        key_hint, value_hint = args if args else (Any, Any)
        return {_coerce_key(k, key_hint): _coerce(v, value_hint) for k, v in value.items()}

    if origin is not None:
        # Literal, Annotated and other special forms are taken as-is
        return value

    if value is None:
        return None

    if not isinstance(hint, type):
        return value

    if dataclasses.is_dataclass(hint):
        if not isinstance(value, dict):
            raise _CoercionError(f"expected an object for {hint.__name__}, got {type(value).__name__}")
        nested_hints = _type_hints(hint)
        kwargs = {}
        for f in dataclasses.fields(hint):
            if f.name not in value or not f.init:
                continue
            field_hint = nested_hints.get(f.name, Any)
            if value[f.name] is None and _is_primitive(field_hint):
                continue
            kwargs[f.name] = _coerce(value[f.name], field_hint)
        try:
            return hint(**kwargs)
        except (TypeError, ValueError) as e:
            raise _CoercionError(f"cannot build {hint.__name__}: {e}")

    if issubclass(hint, Enum):
        try:
            return hint(value)
        except ValueError:
            raise _CoercionError(f"{value!r} is not a valid {hint.__name__}")

    if hint is bool:
        if not isinstance(value, bool):
            raise _CoercionError(f"expected a boolean, got {type(value).__name__}")
        return value

    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _CoercionError(f"expected an integer, got {type(value).__name__}")
        return value

    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _CoercionError(f"expected a number, got {type(value).__name__}")
        return float(value)

    if hint is str:
        if not isinstance(value, str):
            raise _CoercionError(f"expected a string, got {type(value).__name__}")
        return value

    if hint is Decimal:
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise _CoercionError(f"{value!r} is not a valid decimal")

    if issubclass(hint, Path):
        if not isinstance(value, str):
            raise _CoercionError(f"expected a path string, got {type(value).__name__}")
        return hint(value)

    if hint in (datetime, date):
        try:
            return hint.fromisoformat(value)
        except (TypeError, ValueError):
            raise _CoercionError(f"{value!r} is not a valid ISO {hint.__name__}")

    if hint in (list, dict, set, tuple):
        return _coerce(value, typing.List[Any] if hint is list else
                       typing.Dict[Any, Any] if hint is dict else
                       typing.Set[Any] if hint is set else typing.Tuple[Any, ...])

    return value


def _is_primitive(hint: Any) -> bool:
    return hint in (bool, int, float)


def _coerce_key(key: str, hint: Any) -> Any:
    if hint is int:
        try:
            return int(key)
        except ValueError:
            raise _CoercionError(f"{key!r} is not an integer key")
    return _coerce(key, hint)
