"""
Core configuration components.

This module provides the building blocks the discovery engine works with:
- SingletonRegistry / ConfigContext: process-wide singleton storage
- Serializer / JsonSerializer: file persistence of configuration objects
- ConfigValidator: checks applied to configuration candidates
"""

from .registry import SingletonRegistry, ConfigContext, get_default_context, set_default_context
from .serializer import Serializer, JsonSerializer, get_serializer, set_serializer

__all__ = [
    # Registry
    'SingletonRegistry',
    'ConfigContext',
    'get_default_context',
    'set_default_context',

    # Serializers
    'Serializer',
    'JsonSerializer',
    'get_serializer',
    'set_serializer',
]
