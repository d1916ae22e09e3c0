"""
Host module handle.

The host application tells the discovery engine three things about the
extension module being bootstrapped: its name, the namespace its code lives
in, and where it is installed.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ModuleHandle(Protocol):
    """What the discovery engine needs from a host module."""
    name: str
    namespace: str
    source: Optional[Path]


@dataclass(frozen=True)
class PluginModule:
    """
    Plain ModuleHandle implementation.

    Parameters
    ----------
    name : `str`
        Stable module name; configuration files go to
        ``<source.parent>/<name>/configuration/``.
    namespace : `str`
        Dotted package the module's code lives in. Only markers defined in
        this package or below it are considered.
    source : `Path`, optional
        Installed location of the module. Discovery fails without it.
    """
    name: str
    namespace: str
    source: Optional[Path] = None

    @classmethod
    def from_instance(cls, plugin: object, name: Optional[str] = None) -> "PluginModule":
        """
        Describe the module that ``plugin`` belongs to.

        The namespace is the package of the plugin's class and the source is
        the directory of that package (or the file of a top-level module).
        """
        module_name = type(plugin).__module__
        module = sys.modules.get(module_name)
        namespace = (getattr(module, '__package__', None) or module_name) if module else module_name

        source = None
        package = sys.modules.get(namespace)
        module_file = getattr(package, '__file__', None) or getattr(module, '__file__', None)
        if module_file:
            path = Path(module_file).resolve()
            source = path.parent if path.name == '__init__.py' else path

        return cls(name=name or namespace.rpartition('.')[2], namespace=namespace, source=source)
