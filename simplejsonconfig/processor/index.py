"""
Metadata index scoped to one module namespace.
"""

import importlib
import pkgutil
from dataclasses import dataclass, field
from typing import List, Set

from simplejsonconfig.config.markers import FieldMarker, get_marker, marked_types, marked_fields
from simplejsonconfig.logger import get_logger


@dataclass(frozen=True)
class ConfigurationDescriptor:
    """A configuration candidate as seen by the discovery engine."""
    config_type: type
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.config_type.__module__}.{self.config_type.__qualname__}"


@dataclass
class MetadataIndex:
    """
    Configuration candidates and injection targets of one namespace.

    Candidates are every class carrying ``@configuration`` plus every subclass
    of such a class, ordered by qualified name. Subclasses inherit the marker
    but never pass the shape check, which is how a deep hierarchy gets
    reported instead of silently ignored.
    """
    namespace: str
    descriptors: List[ConfigurationDescriptor] = field(default_factory=list)
    targets: List[FieldMarker] = field(default_factory=list)
    import_errors: List[str] = field(default_factory=list)

    @classmethod
    def build(cls, namespace: str, import_submodules: bool = True) -> "MetadataIndex":
        index = cls(namespace)
        if import_submodules:
            index.import_errors = _import_namespace(namespace)

        candidates: List[type] = []
        seen: Set[type] = set()
        for marked in marked_types():
            for candidate in [marked, *_all_subclasses(marked)]:
                if candidate in seen or not _in_namespace(candidate.__module__, namespace):
                    continue
                seen.add(candidate)
                candidates.append(candidate)

        candidates.sort(key=lambda c: (c.__module__, c.__qualname__))
        for candidate in candidates:
            marker = get_marker(candidate)
            index.descriptors.append(ConfigurationDescriptor(candidate, marker.name))

        index.targets = [
            target for target in marked_fields()
            if _in_namespace(target.owner.__module__, namespace)
        ]
        return index


def _in_namespace(module_name: str, namespace: str) -> bool:
    return module_name == namespace or module_name.startswith(namespace + '.')


def _all_subclasses(cls: type) -> List[type]:
    result = []
    stack = list(cls.__subclasses__())
    while stack:
        sub = stack.pop()
        if sub in result:
            continue
        result.append(sub)
        stack.extend(sub.__subclasses__())
    return result


def _import_namespace(namespace: str) -> List[str]:
    """Import ``namespace`` and every module below it so their markers register."""
    logger = get_logger().bind(component="MetadataIndex", namespace=namespace)
    errors = []

    try:
        package = importlib.import_module(namespace)
    except ImportError as e:
        logger.warning("Namespace could not be imported", error=str(e))
        return [namespace]

    search_path = getattr(package, '__path__', None)
    if search_path is None:
        return errors

    def on_error(name):
        logger.error("Failed to import module", module=name)
        errors.append(name)

    for info in pkgutil.walk_packages(search_path, prefix=namespace + '.', onerror=on_error):
        try:
            importlib.import_module(info.name)
        except Exception as e:
            # A broken module only hides its own markers
            logger.exception("Failed to import module", module=info.name, error=str(e))
            errors.append(info.name)
    return errors
