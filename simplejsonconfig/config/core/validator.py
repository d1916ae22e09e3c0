"""
Candidate validation.

A class carrying ``@configuration`` is only instantiated when it passes every
validator: it must inherit from ConfigEntity directly and be constructible
without arguments.
"""

import inspect
from abc import ABC, abstractmethod
from typing import List, Optional

from simplejsonconfig.config.entity import ConfigEntity, is_config_type
from simplejsonconfig.core.enums import SkipReason
from simplejsonconfig.logger import get_logger


class ValidationError(Exception):
    """A reason a candidate class cannot become a configuration entity."""

    def __init__(self, message: str, reason: SkipReason, config_type: Optional[type] = None):
        self.message = message
        self.reason = reason
        self.config_type = config_type
        super().__init__(message)


class ValidationResult:
    """Result of candidate validation."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[ValidationError]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: ValidationError):
        """Add a validation error."""
        self.errors.append(error)
        self.is_valid = False

    def extend(self, other: "ValidationResult"):
        for error in other.errors:
            self.add_error(error)

    @property
    def reason(self) -> Optional[SkipReason]:
        """Reason of the first error, None when valid."""
        return self.errors[0].reason if self.errors else None

    @property
    def message(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None

    def __bool__(self):
        return self.is_valid


class ConfigValidator(ABC):
    """Abstract base class for candidate validators."""

    def __init__(self):
        self.logger = get_logger().bind(component=type(self).__name__)

    @abstractmethod
    def validate(self, config_type: type) -> ValidationResult:
        """Validate a candidate class."""
        pass


class ShapeValidator(ConfigValidator):
    """The candidate's primary base must be exactly ConfigEntity."""

    def validate(self, config_type: type) -> ValidationResult:
        result = ValidationResult()
        if not is_config_type(config_type):
            parent = config_type.__bases__[0] if isinstance(config_type, type) and config_type.__bases__ else None
            parent_name = parent.__qualname__ if parent is not None else "nothing"
            result.add_error(ValidationError(
                f"{config_type.__qualname__} extends {parent_name}, "
                f"expected {ConfigEntity.__module__}.{ConfigEntity.__qualname__}",
                SkipReason.INVALID_SHAPE, config_type
            ))
        return result


class ConstructorValidator(ConfigValidator):
    """The candidate must be callable with no arguments."""

    def validate(self, config_type: type) -> ValidationResult:
        result = ValidationResult()

        if inspect.isabstract(config_type):
            result.add_error(ValidationError(
                f"{config_type.__qualname__} is abstract",
                SkipReason.NO_DEFAULT_CONSTRUCTOR, config_type
            ))
            return result

        try:
            signature = inspect.signature(config_type)
        except (TypeError, ValueError):
            # No introspectable signature; instantiation decides
            return result

        try:
            signature.bind()
        except TypeError:
            required = [
                name for name, param in signature.parameters.items()
                if param.default is inspect.Parameter.empty
                and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
            ]
            result.add_error(ValidationError(
                f"{config_type.__qualname__}: Cannot find default constructor "
                f"(required parameters: {', '.join(required)})",
                SkipReason.NO_DEFAULT_CONSTRUCTOR, config_type
            ))
        return result


class CandidateValidator(ConfigValidator):
    """Runs validators in order and stops at the first failure."""

    def __init__(self, validators: Optional[List[ConfigValidator]] = None):
        super().__init__()
        self.validators = validators if validators is not None else [ShapeValidator(), ConstructorValidator()]

    def validate(self, config_type: type) -> ValidationResult:
        for validator in self.validators:
            result = validator.validate(config_type)
            if not result:
                return result
        return ValidationResult()
