"""
Dependency injection of configuration singletons.

Two ways to receive a configuration:

- ``autowired()`` class attributes annotated ``ClassVar[SomeConfig]`` are
  assigned the registered singleton once discovery has bound every
  configuration (InjectionPass);
- ``provide(factory)`` calls a factory with every parameter annotated with a
  configuration type resolved from the context.
"""

import inspect
import types
import typing
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from simplejsonconfig.config.core.registry import ConfigContext, get_default_context
from simplejsonconfig.config.entity import is_config_type
from simplejsonconfig.config.markers import FieldMarker
from simplejsonconfig.core.enums import InjectionOutcome
from simplejsonconfig.core.exceptions import UnresolvedDependencyError
from simplejsonconfig.logger import get_logger
from simplejsonconfig.processor.report import InjectionRecord

R = TypeVar('R')


class InjectionPass:
    """Assigns registered singletons to autowired class attributes."""

    def __init__(self, context: ConfigContext):
        self.context = context
        self.logger = get_logger().bind(component="InjectionPass")

    def run(self, targets: List[FieldMarker]) -> List[InjectionRecord]:
        return [self.inject(target) for target in targets]

    def inject(self, target: FieldMarker) -> InjectionRecord:
        owner, name = target.owner, target.field_name
        is_static, field_type = _declared_type(owner, name)

        if not is_static:
            self.logger.debug("Autowired attribute is not a ClassVar, ignored", field=target.qualified_name)
            return InjectionRecord(owner, name, InjectionOutcome.NOT_STATIC, field_type,
                                   "annotate the attribute as ClassVar[...] to receive a configuration")

        if not is_config_type(field_type):
            self.logger.debug("Autowired attribute is not a configuration type, ignored",
                              field=target.qualified_name, declared_type=repr(field_type))
            return InjectionRecord(owner, name, InjectionOutcome.NOT_CONFIG_TYPE, None,
                                   f"declared type {field_type!r} does not extend ConfigEntity directly")

        instance = self.context.get(field_type)
        if instance is None:
            self.logger.warning("Autowired configuration is not registered",
                                field=target.qualified_name, config_class=field_type.__qualname__)
            return InjectionRecord(owner, name, InjectionOutcome.UNRESOLVED, field_type,
                                   f"{field_type.__qualname__} was not registered")

        setattr(owner, name, instance)
        self.logger.debug("Configuration injected", field=target.qualified_name,
                          config_class=field_type.__qualname__)
        return InjectionRecord(owner, name, InjectionOutcome.INJECTED, field_type)


def provide(factory: Callable[..., R], context: Optional[ConfigContext] = None, **overrides: Any) -> R:
    """
    Call ``factory`` with its configuration dependencies.

    Every parameter annotated with a configuration type is filled from the
    context unless given in ``overrides``. A parameter with a default is left
    to its default when the configuration is not registered.

    Raises:
        UnresolvedDependencyError: If a required configuration is not registered
    """
    context = context or get_default_context()
    kwargs: Dict[str, Any] = {}
    for name, config_type, has_default in _config_parameters(factory):
        if name in overrides:
            continue
        instance = context.get(config_type)
        if instance is None:
            if has_default:
                continue
            raise UnresolvedDependencyError(getattr(factory, '__qualname__', repr(factory)), name, config_type)
        kwargs[name] = instance
    kwargs.update(overrides)
    return factory(**kwargs)


def _config_parameters(factory: Callable) -> List[Tuple[str, type, bool]]:
    target = factory.__init__ if isinstance(factory, type) else factory
    signature = inspect.signature(factory)
    try:
        hints = typing.get_type_hints(target)
    except (NameError, TypeError):
        hints = {}

    params = []
    for name, param in signature.parameters.items():
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.VAR_POSITIONAL,
                          inspect.Parameter.VAR_KEYWORD):
            continue
        hint = _unwrap_optional(hints.get(name))
        if is_config_type(hint):
            params.append((name, hint, param.default is not inspect.Parameter.empty))
    return params


def _declared_type(owner: type, name: str) -> Tuple[bool, Any]:
    """Return (is_static, field type) of ``owner.name`` from its annotation."""
    try:
        hints = typing.get_type_hints(owner)
    except (NameError, TypeError):
        hints = {}
    hint = hints.get(name)
    if hint is None:
        return True, None

    if typing.get_origin(hint) is typing.ClassVar:
        args = typing.get_args(hint)
        return True, _unwrap_optional(args[0]) if args else None
    return False, _unwrap_optional(hint)


def _unwrap_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint
