"""
simplejsonconfig - file-backed configuration singletons for extension modules.

Mark configuration classes with ``@configuration``, mark consumers with
``autowired()``, and call ``process_module`` once when the module starts::

    @configuration("server")
    @dataclass
    class ServerConfig(ConfigEntity):
        host: str = "localhost"
        port: int = 8080

    class Api:
        config: ClassVar[ServerConfig] = autowired()

    report = process_module(PluginModule.from_instance(plugin))

Logging goes through structlog and is left unconfigured by the package. A host
that does not configure structlog itself calls ``init_logger(get_settings())``
once at startup; only then do ``EngineSettings.log_level`` and
``EngineSettings.json_logs`` take effect. ``setup_logging`` does nothing when
structlog is already configured.
"""

from simplejsonconfig.config import (
    ConfigEntity, configuration, autowired, is_config_type,
    SingletonRegistry, ConfigContext, get_default_context, set_default_context,
    Serializer, JsonSerializer, get_serializer, set_serializer
)
from simplejsonconfig.core import (
    SimpleJsonConfigError, AlreadyInitializedError, MissingModuleRootError,
    ConfigDecodeError, ConfigPersistenceError, ConfigNotFoundError, ConfigNotBoundError,
    UnresolvedDependencyError, SkipReason, InjectionOutcome, BindingState
)
from simplejsonconfig.logger import setup_logging, get_logger, init_logger
from simplejsonconfig.processor import (
    ModuleHandle, PluginModule, DiscoveryReport, SkipRecord, InjectionRecord,
    DiscoveryEngine, process_module, provide
)
from simplejsonconfig.settings import EngineSettings, get_settings, set_settings

__version__ = '0.1.0'

logger = get_logger()

__all__ = [
    'ConfigEntity',
    'configuration',
    'autowired',
    'is_config_type',
    'SingletonRegistry',
    'ConfigContext',
    'get_default_context',
    'set_default_context',
    'Serializer',
    'JsonSerializer',
    'get_serializer',
    'set_serializer',
    'SimpleJsonConfigError',
    'AlreadyInitializedError',
    'MissingModuleRootError',
    'ConfigDecodeError',
    'ConfigPersistenceError',
    'ConfigNotFoundError',
    'ConfigNotBoundError',
    'UnresolvedDependencyError',
    'SkipReason',
    'InjectionOutcome',
    'BindingState',
    'setup_logging',
    'get_logger',
    'init_logger',
    'ModuleHandle',
    'PluginModule',
    'DiscoveryReport',
    'SkipRecord',
    'InjectionRecord',
    'DiscoveryEngine',
    'process_module',
    'provide',
    'EngineSettings',
    'get_settings',
    'set_settings'
]
