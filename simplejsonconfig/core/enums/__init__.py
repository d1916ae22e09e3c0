"""
Core enums for simplejsonconfig.
"""

from .discovery import (
    BindingState,
    SkipReason,
    InjectionOutcome
)

__all__ = [
    'BindingState',
    'SkipReason',
    'InjectionOutcome'
]
