"""
Discovery pipeline: metadata index, binding, registration and injection.
"""

from .module import ModuleHandle, PluginModule
from .index import MetadataIndex, ConfigurationDescriptor
from .report import DiscoveryReport, SkipRecord, InjectionRecord
from .injection import InjectionPass, provide
from .engine import DiscoveryEngine, process_module

__all__ = [
    'ModuleHandle',
    'PluginModule',
    'MetadataIndex',
    'ConfigurationDescriptor',
    'DiscoveryReport',
    'SkipRecord',
    'InjectionRecord',
    'InjectionPass',
    'provide',
    'DiscoveryEngine',
    'process_module'
]
