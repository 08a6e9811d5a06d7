"""Tests for the startup coordinator directives and their log output."""

import logging
import sys

import pytest

from config import StartupConfig
from policy import UNSET, DependencyUnresolved, RegistryFrozen
from resolution.errors import ConfigurationError, RequiredDependencyMissing
from resolution.models import ResolutionStatus
from startup import StartupCoordinator


@pytest.fixture
def coordinator_with(available):
    def build(*names, **kwargs):
        return StartupCoordinator(available(*names), **kwargs)
    return build


class TestDependency:
    def test_resolved_dependency_is_logged(self, coordinator_with, caplog):
        caplog.set_level(logging.INFO)
        coordinator = coordinator_with("foo")
        result = coordinator.dependency("foo")
        assert result.resolved
        assert coordinator.results == [result]
        assert "loading library 'foo' from /plugins/foo.py (raw-path)" in caplog.text

    def test_constraint_is_attached(self, coordinator_with):
        result = coordinator_with("foo").dependency("foo", ">= 1.0", "< 2")
        assert result.request.constraint.allows("1.5")
        assert not result.request.constraint.allows("2.0")

    def test_missing_required_dependency_raises(self, coordinator_with, caplog):
        caplog.set_level(logging.INFO)
        coordinator = coordinator_with()
        with pytest.raises(RequiredDependencyMissing) as exc_info:
            coordinator.dependency("bar")
        assert exc_info.value.result.status == ResolutionStatus.EXHAUSTED
        assert "Could not find 'bar' as either a library or package" in caplog.text
        assert "Please be sure that 'bar':" in caplog.text
        assert coordinator.failures == [exc_info.value.result]

    def test_keep_going_records_missing(self, coordinator_with):
        coordinator = coordinator_with("foo", strict=False)
        coordinator.dependency("bar")
        coordinator.dependency("foo")
        assert [r.request.name for r in coordinator.missing] == ["bar"]
        assert len(coordinator.results) == 2

    def test_optional_dependency_only_warns(self, coordinator_with, caplog):
        coordinator = coordinator_with()
        result = coordinator.dependency("hpricot", required=False)
        assert not result.resolved
        assert coordinator.warnings == ["Optional dependency 'hpricot' is unavailable (exhausted)"]
        assert coordinator.missing == []
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_empty_name_is_rejected(self, coordinator_with):
        with pytest.raises(ConfigurationError):
            coordinator_with().dependency("  ")

    def test_dependency_token_keeps_raw_token(self, coordinator_with):
        result = coordinator_with("rack").dependency_token("rack:>= 1.0")
        assert result.resolved
        assert result.request.name == "rack"
        assert result.request.source == "cli"
        assert result.request.raw_token == "rack:>= 1.0"
        assert result.request.constraint.allows("1.2")

    def test_dependencies_in_declaration_order(self, coordinator_with):
        coordinator = coordinator_with("a", "b", "c")
        results = coordinator.dependencies("a", {"b": "1.0"}, ["c"])
        assert [r.request.name for r in results] == ["a", "b", "c"]

    def test_hint_extends_remedies(self, coordinator_with, caplog):
        coordinator = coordinator_with(hint=lambda name: f"try pip install {name}")
        with pytest.raises(RequiredDependencyMissing):
            coordinator.dependency("bar")
        assert "try pip install bar" in caplog.text


class TestRequire:
    def test_require_raises_even_when_not_strict(self, coordinator_with):
        with pytest.raises(RequiredDependencyMissing):
            coordinator_with(strict=False).require("missing_lib")

    def test_rescue_require_logs_message(self, coordinator_with, caplog):
        coordinator = coordinator_with()
        result = coordinator.rescue_require("redcloth", "RedCloth is needed for textile")
        assert not result.resolved
        assert "RedCloth is needed for textile" in caplog.text

    def test_rescue_require_silent_without_message(self, coordinator_with, caplog):
        coordinator_with().rescue_require("redcloth")
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


class TestPolicyDirectives:
    def test_use_orm_missing_adapter_is_fatal(self, coordinator_with, caplog):
        coordinator = coordinator_with()
        with pytest.raises(DependencyUnresolved) as exc_info:
            coordinator.use_orm("datamapper")
        assert exc_info.value.fatal
        assert "The frameboot_datamapper package was not found" in caplog.text
        assert coordinator.registry.current("orm") is UNSET

    def test_use_orm_success(self, coordinator_with):
        coordinator = coordinator_with("frameboot_sequel")
        result = coordinator.use_orm("sequel")
        assert result.resolved
        assert coordinator.generator_scope()[0] == "sequel"

    def test_use_test_missing_adapter_warns(self, coordinator_with, caplog):
        coordinator = coordinator_with()
        assert coordinator.use_test("test_unit") is None
        assert coordinator.registry.current("test") == "rspec"
        assert len(coordinator.warnings) == 1
        assert "You may need to install it" in caplog.text

    def test_use_template_layers(self, coordinator_with):
        coordinator = coordinator_with("frameboot_haml")
        coordinator.use_template("haml")
        assert coordinator.generator_scope() == ["haml", "frameboot", "rspec"]

    def test_finish_freezes_registry(self, coordinator_with):
        coordinator = coordinator_with("frameboot_sequel")
        coordinator.finish()
        with pytest.raises(RegistryFrozen):
            coordinator.use_orm("sequel")


class TestFrameworkSettings:
    def test_no_framework_root_means_no_hint(self):
        coordinator = StartupCoordinator(framework_prefix="fbt_")
        assert coordinator.framework_predicate is None

    def test_framework_root_enables_prefix_hint(self, tmp_path):
        coordinator = StartupCoordinator(framework_root=str(tmp_path), framework_prefix="fbt_")
        assert coordinator.framework_predicate("fbt_core")
        assert not coordinator.framework_predicate("requests")

    def test_custom_plugin_namespace(self, available):
        coordinator = StartupCoordinator(available("myapp_sequel"), plugin_namespace="myapp_")
        assert coordinator.use_orm("sequel").request.name == "myapp_sequel"


class TestRunConfig:
    def test_directives_run_in_order_and_freeze(self, coordinator_with, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "path", list(sys.path))
        (tmp_path / "requirements.txt").write_text("reqlib>=1.0\n", encoding="utf-8")
        (tmp_path / "lib").mkdir()
        config = StartupConfig(
            load_path=["lib"],
            requirements_file="requirements.txt",
            dependencies=["foo", {"bar": ">= 1.0"}],
            optional=["nice_to_have"],
            orm="sequel",
            test="rspec",
            templates=["haml"],
            base_dir=str(tmp_path),
        )
        coordinator = coordinator_with(
            "reqlib", "foo", "bar", "frameboot_sequel", "frameboot_rspec", "frameboot_haml")
        coordinator.run_config(config)

        names = [r.request.name for r in coordinator.results]
        assert names == ["reqlib", "foo", "bar", "nice_to_have",
                         "frameboot_sequel", "frameboot_rspec", "frameboot_haml"]
        sources = {r.request.name: r.request.source for r in coordinator.results}
        assert sources["reqlib"] == "requirements"
        assert sources["foo"] == "config"
        assert sys.path[0] == str(tmp_path / "lib")
        assert coordinator.registry.frozen
        assert coordinator.generator_scope() == ["sequel", "haml", "frameboot", "rspec"]
        assert coordinator.warnings == ["Optional dependency 'nice_to_have' is unavailable (exhausted)"]

    def test_missing_required_stops_the_pass(self, coordinator_with):
        config = StartupConfig(dependencies=["missing", "foo"], orm="sequel")
        coordinator = coordinator_with("foo", "frameboot_sequel")
        with pytest.raises(RequiredDependencyMissing):
            coordinator.run_config(config)
        assert [r.request.name for r in coordinator.results] == ["missing"]
        assert not coordinator.registry.frozen
