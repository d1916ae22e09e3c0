"""
Configuration entities, markers and their supporting infrastructure.
"""

from .core import (
    SingletonRegistry, ConfigContext, get_default_context, set_default_context,
    Serializer, JsonSerializer, get_serializer, set_serializer
)
from .entity import ConfigEntity, is_config_type
from .markers import (
    configuration, autowired, ConfigurationMarker, AutowiredMarker, FieldMarker,
    get_marker, marked_types, marked_fields
)
from .core.validator import (
    ConfigValidator, ShapeValidator, ConstructorValidator, CandidateValidator,
    ValidationError, ValidationResult
)

__all__ = [
    # Entities
    'ConfigEntity',
    'is_config_type',

    # Markers
    'configuration',
    'autowired',
    'ConfigurationMarker',
    'AutowiredMarker',
    'FieldMarker',
    'get_marker',
    'marked_types',
    'marked_fields',

    # Core infrastructure
    'SingletonRegistry',
    'ConfigContext',
    'get_default_context',
    'set_default_context',
    'Serializer',
    'JsonSerializer',
    'get_serializer',
    'set_serializer',

    # Validation
    'ConfigValidator',
    'ShapeValidator',
    'ConstructorValidator',
    'CandidateValidator',
    'ValidationError',
    'ValidationResult'
]
