"""Tests for stagepack.cli."""

from __future__ import annotations

import logging
from pathlib import Path

from click.testing import CliRunner

from stagepack.cli import main
from stagepack.package import PACKAGE_TARGETS


def _write_config(tmp_path: Path, extra: str = "") -> Path:
    f = tmp_path / "package.hcl"
    f.write_text(
        f"""
        package "cli" {{
            repo_root = "."
            configuration = "{{{{ configuration | default('Debug') }}}}"
            platform = "unix"
            operating_system = "Linux"
            architecture = "x64"
            skip_packaging = false
            version = {{
                major = 1
                minor = 0
                patch = 0
                commit_count = 3177
                release_suffix = "preview2"
            }}
            {extra}
        }}
    """
    )
    return f


class TestTargetsCommand:
    def test_lists_targets_in_order(self):
        result = CliRunner().invoke(main, ["targets"])
        assert result.exit_code == 0
        names = [line for line in result.output.splitlines() if line and not line.startswith(" ")]
        assert names == list(PACKAGE_TARGETS)
        assert "consumes: BuildVersion, Configuration" in result.output


class TestEnvCommand:
    def test_prints_table(self, tmp_path):
        config = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["env", str(config), "-D", "configuration=Release"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "RID=linux-x64" in lines
        assert "CONFIGURATION=Release" in lines
        assert "DOTNET_CLI_VERSION=1.0.0.003177" in lines

    def test_bad_define(self, tmp_path):
        config = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["env", str(config), "-D", "novalue"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_unknown_package(self, tmp_path):
        config = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["env", str(config), "--package", "nope"])
        assert result.exit_code == 1


class TestRunCommand:
    def test_dry_run_succeeds(self, tmp_path):
        config = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["run", str(config), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "artifacts").exists()

    def test_failure_exits_nonzero(self, tmp_path, fake_run):
        config = _write_config(tmp_path)
        result = CliRunner().invoke(main, ["run", str(config)])
        assert result.exit_code == 1
        assert fake_run.calls == []

    def test_failure_reported_once(self, tmp_path, fake_run, caplog):
        config = _write_config(tmp_path)
        with caplog.at_level(logging.DEBUG):
            result = CliRunner().invoke(main, ["run", str(config)])
        assert result.exit_code == 1
        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(errors) == 1
        assert errors[0].name == "stagepack.cli"
        assert "init-package" in errors[0].getMessage()

    def test_missing_config(self, tmp_path):
        result = CliRunner().invoke(main, ["run", str(tmp_path / "missing.hcl")])
        assert result.exit_code == 2
