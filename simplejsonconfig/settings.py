"""
Engine settings.

Controls how configuration files are named, written and logged. Every value
has a default, can be overridden from environment variables, or read from a
YAML file.

Environment Variables:
----------------------
SIMPLEJSONCONFIG_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
SIMPLEJSONCONFIG_JSON_LOGS: Render logs as JSON ("1", "true", "yes"). Default: false
SIMPLEJSONCONFIG_INDENT: Indentation of written JSON files. Default: 2
"""

import os
import threading
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from simplejsonconfig.core.exceptions import ConfigurationError

ENV_PREFIX = "SIMPLEJSONCONFIG_"
VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


@dataclass
class EngineSettings:
    """Settings used by the discovery engine and the JSON serializer."""
    extension: str = ".json"
    directory_name: str = "configuration"
    encoding: str = "utf-8"
    indent: int = 2
    import_submodules: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    def validate(self) -> "EngineSettings":
        """
        Check the settings for values the engine cannot work with.

        Returns
        ----------
        EngineSettings : `EngineSettings`
            The same instance, for chaining.

        Raises
        ----------
            ConfigurationError : If a value is out of range.
        """
        if not self.extension.startswith('.') or len(self.extension) < 2:
            raise ConfigurationError('extension', self.extension, "must start with '.'")
        if not self.directory_name or os.sep in self.directory_name:
            raise ConfigurationError('directory_name', self.directory_name, "must be a single path component")
        if self.indent < 0:
            raise ConfigurationError('indent', str(self.indent), "must not be negative")
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError('log_level', self.log_level, f"must be one of {sorted(VALID_LOG_LEVELS)}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        """Build settings from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(', '.join(sorted(unknown)), reason="unknown setting")
        return cls(**data).validate()

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from ``SIMPLEJSONCONFIG_*`` environment variables."""
        settings = cls()
        settings.log_level = os.getenv(f'{ENV_PREFIX}LOG_LEVEL', settings.log_level).upper()
        json_logs = os.getenv(f'{ENV_PREFIX}JSON_LOGS')
        if json_logs is not None:
            settings.json_logs = json_logs.strip().lower() in ('1', 'true', 'yes', 'on')
        indent = os.getenv(f'{ENV_PREFIX}INDENT')
        if indent is not None:
            try:
                settings.indent = int(indent)
            except ValueError:
                raise ConfigurationError(f'{ENV_PREFIX}INDENT', indent, "must be an integer")
        return settings.validate()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "EngineSettings":
        """
        Load settings from a YAML file.

        An empty file yields the defaults.
        """
        path = Path(path)
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(str(path), reason=str(e))

        if not isinstance(data, dict):
            raise ConfigurationError(str(path), reason="settings file must contain a mapping")
        return cls.from_dict(data)


_settings_lock = threading.Lock()
_default_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Return the process default settings, read from the environment on first use."""
    global _default_settings
    with _settings_lock:
        if _default_settings is None:
            _default_settings = EngineSettings.from_env()
        return _default_settings


def set_settings(settings: EngineSettings) -> Optional[EngineSettings]:
    """Replace the process default settings and return the previous ones."""
    global _default_settings
    settings.validate()
    with _settings_lock:
        previous = _default_settings
        _default_settings = settings
        return previous
