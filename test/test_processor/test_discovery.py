"""
End-to-end discovery runs against the sample plugin packages.
"""

import json

import pytest
from structlog.testing import capture_logs

from sample_plugins.broken_plugin.configs import SurvivorConfig
from sample_plugins.mixed_plugin.configs import (
    DeepConfig, ExplodingConfig, FragileConfig, GoodConfig, NeedsArgsConfig, OrphanConfig,
    SpecialGoodConfig
)
from sample_plugins.strict_plugin.configs import (
    NullableConfig, PayloadConfig, TagsConfig, WindowConfig, ZoneConfig
)
from sample_plugins.valid_plugin.configs import DatabaseConfig, Mode, ServerConfig
from simplejsonconfig import (
    AlreadyInitializedError, ConfigContext, ConfigPersistenceError, DiscoveryEngine,
    JsonSerializer, MissingModuleRootError, PluginModule, SkipReason, process_module
)

pytestmark = pytest.mark.integration


def public_state(obj):
    return {k: v for k, v in vars(obj).items() if not k.startswith('_')}


class FailingSerializer(JsonSerializer):
    """Refuses to write one configuration type."""

    def __init__(self, failing_type):
        super().__init__()
        self.failing_type = failing_type

    def save(self, entity, path):
        if type(entity) is self.failing_type:
            raise ConfigPersistenceError(path, "disk full")
        super().save(entity, path)


class TestFreshModule:

    def test_every_valid_configuration_is_registered(self, valid_module, context, valid_config_dir):
        report = process_module(valid_module, context)

        assert report.registered == [DatabaseConfig, ServerConfig]
        assert report.skipped == []
        for config_type in (ServerConfig, DatabaseConfig):
            instance = context.registry.get(config_type)
            assert isinstance(instance, config_type)
            assert instance.config_file.exists()
            assert instance.config_file.parent == valid_config_dir

    def test_missing_file_is_created_from_defaults(self, valid_module, context, valid_config_dir):
        process_module(valid_module, context)

        path = valid_config_dir / "server.json"
        assert path.is_file()

        decoded = ServerConfig()
        decoded.port = 1
        JsonSerializer().load(decoded, path)
        assert decoded == ServerConfig()

    def test_name_with_extension_is_used_verbatim(self, valid_module, context, valid_config_dir):
        process_module(valid_module, context)

        assert (valid_config_dir / "database.json").is_file()
        assert not (valid_config_dir / "database.json.json").exists()

        decoded = DatabaseConfig()
        decoded.pool_size = 0
        JsonSerializer().load(decoded, valid_config_dir / "database.json")
        assert public_state(decoded) == public_state(DatabaseConfig())

    def test_registry_is_keyed_by_exact_type(self, valid_module, context):
        process_module(valid_module, context)
        assert context.registry.types() == [DatabaseConfig, ServerConfig]

    def test_get_instance_after_discovery(self, valid_module, default_context):
        process_module(valid_module)

        instance = ServerConfig.get_instance()
        assert instance is default_context.registry.get(ServerConfig)

    def test_report_is_clean(self, valid_module, context):
        report = process_module(valid_module, context)
        assert report.module_name == "valid"
        assert not report.unresolved
        assert report.ok is True


class TestExistingFiles:

    def test_existing_file_is_loaded(self, valid_module, context, valid_config_dir):
        valid_config_dir.mkdir(parents=True)
        path = valid_config_dir / "server.json"
        path.write_text(json.dumps({'host': '0.0.0.0', 'port': 9090, 'mode': 'production'}))
        before = path.read_text()

        process_module(valid_module, context)

        server = context.registry.get(ServerConfig)
        assert server.host == '0.0.0.0'
        assert server.port == 9090
        assert server.mode is Mode.PRODUCTION
        assert server.timeout == 2.5
        assert path.read_text() == before

    def test_corrupted_file_is_skipped_and_left_untouched(self, mixed_module, context, mixed_config_dir):
        mixed_config_dir.mkdir(parents=True)
        path = mixed_config_dir / "fragile.json"
        path.write_bytes(b'{"threshold": ')

        report = process_module(mixed_module, context)

        assert context.registry.get(FragileConfig) is None
        assert path.read_bytes() == b'{"threshold": '
        record = report.skip_for(FragileConfig)
        assert record.reason is SkipReason.CORRUPT_FILE
        assert record.path == path
        assert context.registry.get(GoodConfig) is not None

    def test_corrupted_file_logs_a_warning(self, mixed_module, context, mixed_config_dir):
        mixed_config_dir.mkdir(parents=True)
        (mixed_config_dir / "fragile.json").write_text("corrupted")

        with capture_logs() as logs:
            process_module(mixed_module, context)

        warnings = [e for e in logs if e['log_level'] == 'warning' and 'corrupted' in e['event']]
        assert len(warnings) == 1
        assert 'FragileConfig' in warnings[0]['event']


class TestInvalidCandidates:

    @pytest.mark.parametrize("config_type", [DeepConfig, OrphanConfig, SpecialGoodConfig])
    def test_invalid_shape_is_skipped(self, mixed_module, context, config_type):
        report = process_module(mixed_module, context)

        assert report.skip_for(config_type).reason is SkipReason.INVALID_SHAPE
        assert config_type not in context.registry

    @pytest.mark.parametrize("config_type", [NeedsArgsConfig, ExplodingConfig])
    def test_missing_default_constructor_is_skipped(self, mixed_module, context, config_type):
        report = process_module(mixed_module, context)

        assert report.skip_for(config_type).reason is SkipReason.NO_DEFAULT_CONSTRUCTOR
        assert config_type not in context.registry

    def test_skipped_candidates_produce_no_file(self, mixed_module, context, mixed_config_dir):
        process_module(mixed_module, context)

        for name in ("deep.json", "orphan.json", "needs_args.json", "exploding.json"):
            assert not (mixed_config_dir / name).exists()

    def test_valid_siblings_are_unaffected(self, mixed_module, context, mixed_config_dir):
        report = process_module(mixed_module, context)

        assert report.registered == [FragileConfig, GoodConfig]
        assert (mixed_config_dir / "good.json").is_file()
        assert (mixed_config_dir / "fragile.json").is_file()
        assert report.ok is False

    def test_invalid_shape_warning_names_expected_parent(self, mixed_module, context):
        with capture_logs() as logs:
            process_module(mixed_module, context)

        messages = [e['event'] for e in logs if e['log_level'] == 'warning']
        assert any("Configuration deep could not be loaded" in m and "ConfigEntity" in m for m in messages)


class TestPersistenceFailures:

    def test_create_failure_skips_only_that_candidate(self, mixed_module, context):
        report = process_module(mixed_module, context, serializer=FailingSerializer(GoodConfig))

        assert report.skip_for(GoodConfig).reason is SkipReason.IO_FAILURE
        assert GoodConfig not in context.registry
        assert FragileConfig in context.registry

    def test_unwritable_root_skips_everything(self, plugin_root, context):
        (plugin_root / "valid").write_text("a file where a directory should be")
        module = PluginModule("valid", "sample_plugins.valid_plugin", plugin_root / "valid_plugin")

        report = process_module(module, context)

        assert len(report.registered) == 0
        assert {r.reason for r in report.skipped} == {SkipReason.IO_FAILURE}
        assert len(context.registry) == 0


class TestFatalErrors:

    def test_second_run_raises_and_keeps_registry(self, valid_module, context):
        process_module(valid_module, context)
        before = context.registry.items()

        with pytest.raises(AlreadyInitializedError):
            process_module(valid_module, context)

        assert context.registry.items() == before

    def test_second_run_of_another_module_raises(self, valid_module, mixed_module, context):
        process_module(valid_module, context)

        with pytest.raises(AlreadyInitializedError):
            process_module(mixed_module, context)
        assert GoodConfig not in context.registry

    def test_missing_module_root_is_fatal(self, context):
        module = PluginModule("valid", "sample_plugins.valid_plugin", source=None)

        with pytest.raises(MissingModuleRootError):
            process_module(module, context)
        assert len(context.registry) == 0

    def test_missing_module_root_without_candidates(self, context):
        module = PluginModule("empty", "sample_plugins.no_such_namespace", source=None)

        report = process_module(module, context)

        assert report.registered == []
        assert report.import_errors == ["sample_plugins.no_such_namespace"]


class TestEngineDetails:

    def test_file_name_normalization(self, valid_module, context, settings):
        engine = DiscoveryEngine(valid_module, context, settings=settings)

        assert engine.file_name("Foo") == "Foo.json"
        assert engine.file_name("Foo.json") == "Foo.json"

    def test_config_dir_layout(self, valid_module, context, plugin_root):
        engine = DiscoveryEngine(valid_module, context)
        assert engine.config_dir() == plugin_root / "valid" / "configuration"

    def test_custom_directory_name(self, valid_module, context, settings, plugin_root):
        settings.directory_name = "settings"
        process_module(valid_module, context, settings=settings)

        assert (plugin_root / "valid" / "settings" / "server.json").is_file()

    def test_broken_submodule_does_not_stop_discovery(self, plugin_root, context):
        module = PluginModule("broken", "sample_plugins.broken_plugin", plugin_root / "broken_plugin")

        report = process_module(module, context)

        assert report.import_errors == ["sample_plugins.broken_plugin.bad_module"]
        assert report.registered == [SurvivorConfig]


def registered_states(logs):
    return {e['config_class']: e['previous_state'] for e in logs if 'previous_state' in e}


class TestRestart:
    """A second process start reads back what the first one wrote."""

    @pytest.mark.parametrize("module_fixture, expected", [
        ("valid_module", [DatabaseConfig, ServerConfig]),
        ("mixed_module", [FragileConfig, GoodConfig]),
        ("strict_module", [NullableConfig, PayloadConfig, TagsConfig, WindowConfig, ZoneConfig]),
    ])
    def test_second_start_loads_every_created_file(self, request, module_fixture, expected):
        module = request.getfixturevalue(module_fixture)

        with capture_logs() as first_logs:
            first = process_module(module, ConfigContext())
        with capture_logs() as second_logs:
            second_context = ConfigContext()
            second = process_module(module, second_context)

        assert first.registered == expected
        assert second.registered == expected
        assert set(registered_states(first_logs).values()) == {"created"}
        assert registered_states(second_logs) == {t.__qualname__: "loaded" for t in expected}
        assert [r for r in second.skipped if r.reason is SkipReason.CORRUPT_FILE] == []
        for config_type in expected:
            assert config_type in second_context.registry

    def test_none_defaults_are_loaded_back(self, strict_module, strict_config_dir):
        process_module(strict_module, ConfigContext())
        assert json.loads((strict_config_dir / "nullable.json").read_text())['label'] is None

        context = ConfigContext()
        process_module(strict_module, context)

        assert context.registry.get(NullableConfig) == NullableConfig()


class TestCorruptValues:
    """Syntactically valid JSON whose values cannot be decoded."""

    @pytest.mark.parametrize("config_type, file_name, content", [
        (WindowConfig, "window.json", '{"window": {"low": 5, "high": 1}}'),
        (TagsConfig, "tags.json", '{"tags": [[1, 2]]}'),
        (PayloadConfig, "payload.json", '{"payload": ' + '[' * 100000 + ']' * 100000 + '}'),
    ])
    def test_bad_value_is_reported_as_corrupt(self, strict_module, context, strict_config_dir,
                                               config_type, file_name, content):
        strict_config_dir.mkdir(parents=True)
        path = strict_config_dir / file_name
        path.write_text(content)

        report = process_module(strict_module, context)

        record = report.skip_for(config_type)
        assert record.reason is SkipReason.CORRUPT_FILE
        assert record.path == path
        assert config_type not in context.registry
        assert path.read_text() == content
        assert ZoneConfig in context.registry
