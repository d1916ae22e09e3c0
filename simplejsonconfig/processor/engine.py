"""
Discovery engine.

Bootstraps the configuration of one extension module:

1. index the ``@configuration`` classes and ``autowired()`` attributes of the
   module's namespace;
2. validate, instantiate and bind every candidate to its JSON file, creating
   the file from defaults when missing and loading it otherwise, then register
   the instance;
3. inject the registered singletons into autowired attributes.

Per-candidate failures are logged and reported; only a second run on the
same context and a module without an install location are fatal.
"""

from pathlib import Path
from typing import Optional

from simplejsonconfig.config.core.registry import ConfigContext, get_default_context
from simplejsonconfig.config.core.serializer import Serializer, JsonSerializer
from simplejsonconfig.config.core.validator import CandidateValidator
from simplejsonconfig.config.entity import ConfigEntity
from simplejsonconfig.core.enums import BindingState, SkipReason
from simplejsonconfig.core.exceptions import (
    ConfigDecodeError, ConfigPersistenceError, MissingModuleRootError
)
from simplejsonconfig.logger import get_logger
from simplejsonconfig.processor.index import ConfigurationDescriptor, MetadataIndex
from simplejsonconfig.processor.injection import InjectionPass
from simplejsonconfig.processor.module import ModuleHandle
from simplejsonconfig.processor.report import DiscoveryReport, SkipRecord
from simplejsonconfig.settings import EngineSettings, get_settings


class DiscoveryEngine:
    """
    Runs discovery, binding and injection for one module.

    Parameters
    ----------
    module : `ModuleHandle`
        The host module being bootstrapped.
    context : `ConfigContext`, optional
        Context receiving the singletons. Defaults to the process context.
    serializer : `Serializer`, optional
        Persistence used for binding. Defaults to a JsonSerializer built from
        ``settings``.
    settings : `EngineSettings`, optional
        Defaults to the process settings.
    """

    def __init__(self, module: ModuleHandle, context: Optional[ConfigContext] = None,
                 serializer: Optional[Serializer] = None, settings: Optional[EngineSettings] = None):
        self.module = module
        self.context = context or get_default_context()
        self.settings = (settings or get_settings()).validate()
        self.serializer = serializer or JsonSerializer.from_settings(self.settings)
        self.validator = CandidateValidator()
        self.logger = get_logger().bind(component="DiscoveryEngine", module=module.name)
        self._config_dir: Optional[Path] = None

    def run(self) -> DiscoveryReport:
        """
        Execute the whole pipeline.

        Raises
        ----------
            AlreadyInitializedError : If the context already went through discovery.
            MissingModuleRootError : If the module has no install location.
        """
        self.context.mark_initialized(self.module.name)
        report = DiscoveryReport(self.module.name)

        index = MetadataIndex.build(self.module.namespace, self.settings.import_submodules)
        report.import_errors.extend(index.import_errors)
        self.logger.info("Discovery started", namespace=self.module.namespace,
                         candidates=len(index.descriptors), targets=len(index.targets))

        for descriptor in index.descriptors:
            self.process_configuration(descriptor, report)

        # Injection only starts once every candidate is bound or skipped
        report.injections.extend(InjectionPass(self.context).run(index.targets))

        self.logger.info("Discovery finished", registered=len(report.registered),
                         skipped=len(report.skipped), injected=len(report.injected),
                         unresolved=len(report.unresolved))
        return report

    def process_configuration(self, descriptor: ConfigurationDescriptor, report: DiscoveryReport) -> None:
        config_type = descriptor.config_type
        log = self.logger.bind(config_class=config_type.__qualname__, config_name=descriptor.name)

        validation = self.validator.validate(config_type)
        if not validation:
            if validation.reason is SkipReason.INVALID_SHAPE:
                log.warning(f"Configuration {descriptor.name} could not be loaded. "
                            f"Class marked with @configuration does not extend "
                            f"{ConfigEntity.__module__}.{ConfigEntity.__qualname__}",
                            detail=validation.message)
            else:
                log.warning(validation.message)
            report.skipped.append(SkipRecord(config_type, descriptor.name, validation.reason, validation.message))
            return

        try:
            config = config_type()
        except Exception as e:
            detail = f"{config_type.__qualname__}: Cannot find default constructor ({type(e).__name__}: {e})"
            log.warning(detail)
            report.skipped.append(SkipRecord(config_type, descriptor.name, SkipReason.NO_DEFAULT_CONSTRUCTOR, detail))
            return

        config_file = self.config_dir() / self.file_name(descriptor.name)
        state = self.bind(config, config_file, report, descriptor.name)
        if state is BindingState.REGISTERED:
            report.registered.append(config_type)

    def file_name(self, name: str) -> str:
        """``name`` with the configuration extension appended unless already present."""
        extension = self.settings.extension
        return name if name.endswith(extension) else name + extension

    def config_dir(self) -> Path:
        """
        Directory holding this module's configuration files.

        Raises
        ----------
            MissingModuleRootError : If the module has no install location.
        """
        if self._config_dir is None:
            source = self.module.source
            if source is None:
                self.logger.critical("Cannot find module main directory")
                raise MissingModuleRootError(self.module.name)
            self._config_dir = Path(source).parent / self.module.name / self.settings.directory_name
        return self._config_dir

    def bind(self, config: ConfigEntity, config_file: Path, report: DiscoveryReport,
             name: Optional[str] = None) -> BindingState:
        """
        Bind ``config`` to ``config_file`` and register it on success.

        Returns the final binding state: REGISTERED, FAILED or CORRUPT.
        """
        config_type = type(config)
        name = name or config_type.__name__
        log = self.logger.bind(config_class=config_type.__qualname__, path=str(config_file))
        config.bind(config_file, self.serializer)

        if not config_file.exists():
            log.debug("Binding", state=BindingState.FILE_MISSING.value)
            try:
                config_file.parent.mkdir(parents=True, exist_ok=True)
                config_file.touch()
                config.save()
            except (OSError, ConfigPersistenceError) as e:
                log.exception("Config file could not be created")
                report.skipped.append(SkipRecord(config_type, name, SkipReason.IO_FAILURE, str(e), config_file))
                return BindingState.FAILED
            state = BindingState.CREATED
        else:
            log.debug("Binding", state=BindingState.FILE_EXISTS.value)
            try:
                config.reload()
            except ConfigDecodeError as e:
                log.warning(f"{config_type.__module__}.{config_type.__qualname__}: Config file is corrupted",
                            error=e.reason)
                report.skipped.append(SkipRecord(config_type, name, SkipReason.CORRUPT_FILE, str(e), config_file))
                return BindingState.CORRUPT
            except ConfigPersistenceError as e:
                log.exception("Config file could not be read")
                report.skipped.append(SkipRecord(config_type, name, SkipReason.IO_FAILURE, str(e), config_file))
                return BindingState.FAILED
            state = BindingState.LOADED

        self.context.registry.put(config_type, config)
        log.info("Configuration registered", previous_state=state.value)
        return BindingState.REGISTERED


def process_module(module: ModuleHandle, context: Optional[ConfigContext] = None,
                   serializer: Optional[Serializer] = None,
                   settings: Optional[EngineSettings] = None) -> DiscoveryReport:
    """
    Discover, bind and inject the configurations of ``module``.

    Parameters
    ----------
    module : `ModuleHandle`
        Host module, e.g. ``PluginModule.from_instance(plugin)``.
    context : `ConfigContext`, optional
        Defaults to the process context. A context accepts one run only.

    Returns
    ----------
    DiscoveryReport : `DiscoveryReport`
        Registered types, skipped candidates with their reason, and the
        outcome of every autowired attribute.

    Raises
    ----------
        AlreadyInitializedError : If ``context`` already went through discovery.
        MissingModuleRootError : If the module has no install location.
    """
    return DiscoveryEngine(module, context, serializer, settings).run()
