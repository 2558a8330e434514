#!/usr/bin/env python3

"""
Configuration Loader Integration Tests

Loads JSON descriptions and Python providers and wires them into a live
registry.
"""

import pytest

from beanwire.config import ContainerConfig, EntryConfig, import_reference, load_config, load_config_file
from beanwire.errors import ConfigError, CycleError
from beanwire.lifecycle import LifecycleController
from beanwire.registry import EntrySpec

from tests.test_utils import BusinessService, Disposable, SomeCode, write_json


@pytest.mark.integration
class TestJsonConfig:

    def test_imports_come_first(self, fixtures_dir):
        config = load_config_file(fixtures_dir / "context.json").get_or_raise()

        assert config.entry_names == ["code", "primary", "secondary", "resource"]

    def test_wires_described_objects(self, fixtures_dir, controller):
        config = load_config(str(fixtures_dir / "context.json")).get_or_raise()
        registry = controller.start(config).get_or_raise()

        primary = registry.resolve("primary", BusinessService).get_or_raise()
        secondary = registry.resolve("secondary").get_or_raise()

        assert primary.label == "primary"
        assert isinstance(primary.code, SomeCode)
        assert primary.code is registry.resolve("code").get_value()
        assert primary.other is secondary
        assert primary.retries == 3
        assert primary.started

    def test_destroy_methods_run_on_close(self, fixtures_dir, controller):
        registry = controller.start(load_config_file(fixtures_dir / "context.json").get_value()).get_or_raise()
        primary = registry.resolve("primary").get_value()
        secondary = registry.resolve("secondary").get_value()
        resource = registry.resolve("resource", Disposable).get_value()

        assert controller.close_and_report() is True

        assert primary.stopped
        assert secondary.stopped
        assert resource.disposed == 1

    def test_cyclic_properties_fail_to_start(self, fixtures_dir, controller):
        config = load_config_file(fixtures_dir / "cycle.json").get_or_raise()

        error = controller.start(config).get_error()

        assert isinstance(error, CycleError)
        assert set(error.cycle) == {"a", "b"}

    def test_missing_file(self, tmp_path):
        error = load_config(str(tmp_path / "absent.json")).get_error()

        assert isinstance(error, ConfigError)
        assert "not found" in str(error)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")

        error = load_config_file(path).get_error()

        assert isinstance(error, ConfigError)
        assert "Cannot read" in str(error)

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")

        assert "top level" in str(load_config_file(path).get_error())

    def test_unknown_field_rejected(self, tmp_path):
        path = write_json(tmp_path / "extra.json", {
            "entries": [{"name": "x", "factory": "tests.test_utils:SomeCode", "scope": "prototype"}]
        })

        error = load_config_file(path).get_error()

        assert isinstance(error, ConfigError)
        assert "Invalid configuration" in str(error)

    def test_bad_factory_reference(self, tmp_path):
        path = write_json(tmp_path / "bad.json", {
            "entries": [{"name": "x", "factory": "no colon here"}]
        })

        assert "module.path:attribute" in str(load_config_file(path).get_error())

    def test_duplicate_names_across_imports(self, tmp_path):
        write_json(tmp_path / "base.json", {
            "entries": [{"name": "code", "factory": "tests.test_utils:SomeCode"}]
        })
        path = write_json(tmp_path / "main.json", {
            "imports": ["base.json"],
            "entries": [{"name": "code", "factory": "tests.test_utils:SomeCode"}]
        })

        error = load_config_file(path).get_error()

        assert isinstance(error, ConfigError)
        assert "duplicate entry names" in str(error)

    def test_import_cycle(self, tmp_path):
        write_json(tmp_path / "a.json", {"imports": ["b.json"]})
        write_json(tmp_path / "b.json", {"imports": ["a.json"]})

        error = load_config_file(tmp_path / "a.json").get_error()

        assert "import cycle: a.json -> b.json -> a.json" in str(error)

    def test_shared_import_merged_once(self, tmp_path, controller):
        """Test two files importing the same common file"""
        write_json(tmp_path / "common.json", {
            "entries": [{"name": "code", "factory": "tests.test_utils:SomeCode"}]
        })
        write_json(tmp_path / "b.json", {
            "imports": ["common.json"],
            "entries": [{"name": "b", "factory": "tests.test_utils:BusinessService", "depends_on": ["code"]}]
        })
        write_json(tmp_path / "c.json", {
            "imports": ["common.json"],
            "entries": [{"name": "c", "factory": "tests.test_utils:BusinessService", "depends_on": ["code"]}]
        })
        path = write_json(tmp_path / "top.json", {"imports": ["b.json", "c.json"]})

        config = load_config_file(path).get_or_raise()
        registry = controller.start(config).get_or_raise()

        assert config.entry_names == ["code", "b", "c"]
        assert registry.resolve("b").get_value().code is registry.resolve("c").get_value().code

    def test_missing_import(self, tmp_path):
        path = write_json(tmp_path / "main.json", {"imports": ["gone.json"]})

        assert "not found" in str(load_config_file(path).get_error())


@pytest.mark.integration
class TestProviders:

    def test_provider_returning_specs(self):
        specs = load_config("tests.test_utils:sample_specs").get_or_raise()

        assert [spec.name for spec in specs] == ["code", "service"]
        assert all(isinstance(spec, EntrySpec) for spec in specs)

    def test_provider_mapping(self):
        config = load_config("tests.test_utils:SAMPLE_MAPPING").get_or_raise()

        assert isinstance(config, ContainerConfig)
        assert config.entry_names == ["code"]

    def test_provider_wrong_type(self):
        error = load_config("tests.test_utils:SomeCode").get_error()

        assert isinstance(error, ConfigError)
        assert "expected ContainerConfig" in str(error)

    def test_provider_failure(self):
        error = load_config("tests.test_utils:exploding_factory").get_error()

        assert "factory exploded" in str(error)

    def test_unknown_module(self):
        error = load_config("tests.no_such_module:thing").get_error()

        assert isinstance(error, ConfigError)
        assert "Cannot import module" in str(error)

    def test_unknown_source(self):
        assert "not found" in str(load_config("neither a file nor a reference").get_error())

    def test_provided_specs_start(self, controller):
        specs = load_config("tests.test_utils:sample_specs").get_or_raise()

        registry = controller.start(specs).get_or_raise()

        assert registry.resolve("service", BusinessService).get_value().code is registry.resolve("code").get_value()


@pytest.mark.integration
class TestEntryConfig:

    def test_import_reference_nested_attribute(self):
        method = import_reference("tests.test_utils:BusinessService.some_method").get_or_raise()
        assert method is BusinessService.some_method

    def test_import_reference_missing_attribute(self):
        assert "has no attribute" in str(import_reference("tests.test_utils:Nope").get_error())

    def test_non_callable_factory(self):
        entry = EntryConfig(name="m", factory="tests.test_utils:SAMPLE_MAPPING")

        error = entry.to_spec().get_error()

        assert isinstance(error, ConfigError)
        assert "not callable" in str(error)

    def test_kwargs_bound_to_factory(self):
        spec = EntryConfig(
            name="svc",
            factory="tests.test_utils:BusinessService",
            kwargs={"label": "bound"}
        ).to_spec().get_or_raise()

        assert spec.factory().label == "bound"
