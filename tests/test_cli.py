"""Tests for argument parsing, CLI overrides and the frameboot entry point."""

import json
import logging
import os

import pytest

import frameboot
from args import parse_args
from cli_config import apply_framework_overrides, merge_cli_directives
from config import StartupConfig
from constants import Constants, ExitCodes
from resolution.strategies import FrameworkLocalStrategy


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory; logging changes are undone."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")
    monkeypatch.delenv(Constants.ENV_FRAMEWORK_ROOT, raising=False)
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def scripted(monkeypatch, available):
    """Make build_coordinator use a resolver that only knows the given names."""
    def install(*names):
        coordinator_cls = frameboot.StartupCoordinator

        def build(args):
            return coordinator_cls(
                available(*names),
                hint=None,
                strict=not args.KEEP_GOING,
            )

        monkeypatch.setattr(frameboot, "build_coordinator", build)
    return install


def run_main(argv):
    with pytest.raises(SystemExit) as exc_info:
        frameboot.main(argv)
    return exc_info.value.code


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.DEPENDENCIES == []
        assert args.TEMPLATES == []
        assert args.LOG_LEVEL == "INFO"
        assert not args.KEEP_GOING
        assert args.OUTPUT_FORMAT is None

    def test_repeatable_flags(self):
        args = parse_args(["-d", "foo", "-d", "bar:>=1.0", "--template", "haml",
                           "--template", "erb", "--load-path", "lib"])
        assert args.DEPENDENCIES == ["foo", "bar:>=1.0"]
        assert args.TEMPLATES == ["haml", "erb"]
        assert args.LOAD_PATH == ["lib"]

    def test_format_is_case_insensitive(self):
        assert parse_args(["-f", "CSV"]).OUTPUT_FORMAT == "csv"

    def test_bad_format_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["-f", "xml"])


class TestOverrides:
    def test_cli_beats_env_beats_config(self, tmp_path, monkeypatch):
        config = StartupConfig(framework_root="cfg", base_dir=str(tmp_path))
        apply_framework_overrides(parse_args([]), config)
        assert Constants.FRAMEWORK_ROOT == str(tmp_path / "cfg")

        monkeypatch.setenv(Constants.ENV_FRAMEWORK_ROOT, str(tmp_path / "env"))
        apply_framework_overrides(parse_args([]), config)
        assert Constants.FRAMEWORK_ROOT == str(tmp_path / "env")

        apply_framework_overrides(parse_args(["--framework-root", str(tmp_path / "cli")]), config)
        assert Constants.FRAMEWORK_ROOT == str(tmp_path / "cli")

    def test_framework_directory_beside_config_is_default_root(self, tmp_path):
        config = StartupConfig(base_dir=str(tmp_path))
        apply_framework_overrides(parse_args([]), config)
        assert Constants.FRAMEWORK_ROOT is None

        (tmp_path / Constants.FRAMEWORK_DIRNAME).mkdir()
        apply_framework_overrides(parse_args([]), config)
        assert Constants.FRAMEWORK_ROOT == str(tmp_path / "framework")

    def test_prog_name(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["--help"])
        assert capsys.readouterr().out.startswith(f"usage: {Constants.FRAMEWORK_NAME}")

    def test_prefix_namespace_and_hints(self):
        config = StartupConfig(framework_prefix="cfgprefix", plugin_namespace="ns_", index_hints=True)
        apply_framework_overrides(parse_args(["--framework-prefix", "cliprefix"]), config)
        assert Constants.FRAMEWORK_PREFIX == "cliprefix"
        assert Constants.PLUGIN_NAMESPACE == "ns_"
        assert Constants.INDEX_HINTS_ENABLED is True

    def test_merge_cli_directives(self, tmp_path):
        config = StartupConfig(orm="datamapper", templates=["haml"])
        args = parse_args(["--orm", "sequel", "--template", "erb", "--load-path", "lib",
                           "-r", "requirements.txt"])
        merge_cli_directives(args, config)
        assert config.orm == "sequel"
        assert config.templates == ["haml", "erb"]
        assert config.load_path == [os.path.join(str(tmp_path), "lib")]
        assert config.requirements_file == os.path.join(str(tmp_path), "requirements.txt")

    def test_build_coordinator_uses_constants(self, tmp_path):
        Constants.FRAMEWORK_ROOT = str(tmp_path)
        Constants.FRAMEWORK_PREFIX = "fbt_"
        coordinator = frameboot.build_coordinator(parse_args(["--keep-going"]))
        assert coordinator.strict is False
        local = coordinator.resolver.strategies[0]
        assert isinstance(local, FrameworkLocalStrategy)
        assert local.root == str(tmp_path)
        assert coordinator.framework_predicate("fbt_x")


class TestMain:
    def test_success_with_config_and_json_export(self, tmp_path, scripted, capsys):
        scripted("foo", "frameboot_sequel")
        (tmp_path / "dependencies.yml").write_text("dependencies: [foo]\norm: sequel\n", encoding="utf-8")
        code = run_main(["-o", "out.json"])
        assert code == ExitCodes.SUCCESS.value
        out = capsys.readouterr().out
        assert "generator scope: sequel, frameboot, rspec" in out
        data = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
        assert [d["name"] for d in data["dependencies"]] == ["foo", "frameboot_sequel"]
        assert data["policy"]["orm"]["current"] == "sequel"

    def test_cli_dependency_tokens(self, scripted, tmp_path):
        scripted("foo")
        assert run_main(["-d", "foo:>=1.0", "-o", "out.json"]) == ExitCodes.SUCCESS.value
        data = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
        record = data["dependencies"][0]
        assert record["name"] == "foo"
        assert record["source"] == "cli"
        assert record["constraint"] == ">=1.0"

    def test_missing_required_dependency(self, scripted):
        scripted()
        assert run_main(["-d", "missing"]) == ExitCodes.DEPENDENCY_ERROR.value

    def test_keep_going_still_reports_missing(self, scripted, tmp_path):
        scripted("foo")
        code = run_main(["-d", "missing", "-d", "foo", "--keep-going", "-o", "out.csv"])
        assert code == ExitCodes.DEPENDENCY_ERROR.value
        rows = (tmp_path / "out.csv").read_text(encoding="utf-8").splitlines()
        assert len(rows) == 3

    def test_fatal_orm_choice(self, scripted):
        scripted()
        assert run_main(["--orm", "datamapper"]) == ExitCodes.DEPENDENCY_ERROR.value

    def test_invalid_policy_choice(self, scripted):
        scripted()
        assert run_main(["--orm", "hibernate"]) == ExitCodes.CONFIG_ERROR.value

    def test_soft_failure_with_error_on_warnings(self, scripted):
        scripted()
        assert run_main(["--test", "test_unit"]) == ExitCodes.SUCCESS.value
        assert run_main(["--test", "test_unit", "--error-on-warnings"]) == ExitCodes.EXIT_WARNINGS.value

    def test_invalid_config_file(self, tmp_path, scripted):
        scripted()
        (tmp_path / "bad.yml").write_text("orm: [not, a, string]\n", encoding="utf-8")
        assert run_main(["-c", "bad.yml"]) == ExitCodes.CONFIG_ERROR.value

    def test_missing_config_file(self, scripted):
        scripted()
        assert run_main(["-c", "absent.yml"]) == ExitCodes.FILE_ERROR.value

    def test_quiet_suppresses_summary(self, scripted, capsys):
        scripted("foo")
        assert run_main(["-d", "foo", "-q"]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out == ""
