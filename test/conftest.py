"""
Shared pytest configuration and fixtures for the simplejsonconfig tests.
"""

import pytest

import sample_plugins.valid_plugin.services  # noqa: F401  registers markers
import sample_plugins.mixed_plugin.consumers  # noqa: F401
from simplejsonconfig import ConfigContext, EngineSettings, PluginModule, set_default_context
from simplejsonconfig.config import marked_fields


@pytest.fixture
def context():
    """A fresh context, so every discovery run starts from an empty registry."""
    return ConfigContext()


@pytest.fixture
def default_context(context):
    """Install ``context`` as the process default for the duration of a test."""
    previous = set_default_context(context)
    yield context
    set_default_context(previous)


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def plugin_root(tmp_path):
    """Directory standing in for the host's plugin folder."""
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture
def valid_module(plugin_root):
    return PluginModule("valid", "sample_plugins.valid_plugin", plugin_root / "valid_plugin")


@pytest.fixture
def mixed_module(plugin_root):
    return PluginModule("mixed", "sample_plugins.mixed_plugin", plugin_root / "mixed_plugin")


@pytest.fixture
def strict_module(plugin_root):
    return PluginModule("strict", "sample_plugins.strict_plugin", plugin_root / "strict_plugin")


@pytest.fixture
def valid_config_dir(plugin_root):
    return plugin_root / "valid" / "configuration"


@pytest.fixture
def mixed_config_dir(plugin_root):
    return plugin_root / "mixed" / "configuration"


@pytest.fixture
def strict_config_dir(plugin_root):
    return plugin_root / "strict" / "configuration"


@pytest.fixture(autouse=True)
def restore_autowired():
    """Injection writes class attributes; put the placeholders back after each test."""
    snapshot = [(m.owner, m.field_name, vars(m.owner)[m.field_name])
                for m in marked_fields() if m.field_name in vars(m.owner)]
    yield
    for owner, name, value in snapshot:
        setattr(owner, name, value)
