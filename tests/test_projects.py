"""Tests for stagepack.projects."""

from __future__ import annotations

from pathlib import Path

import pytest

from stagepack import keys
from stagepack.archivers import TarGzArchiver, ZipArchiver
from stagepack.package import PACKAGE_TARGETS, PROJECTS_TO_PACK
from stagepack.permissions import NoopPermissionFixer, PosixPermissionFixer
from stagepack.platforms import HostPlatform
from stagepack.projects import SKIP_PACKAGING_ENV, PackageProject
from stagepack.results import Failure, Success
from stagepack.version import BuildVersion

VERSION = BuildVersion(major=2, minor=1, patch=0, commit_count=7)


def _project(tmp_path: Path, **kwargs) -> PackageProject:
    attrs = {
        "name": "cli",
        "repo_root": tmp_path,
        "version": VERSION,
        "operating_system": "Linux",
        "architecture": "x64",
        "platform": HostPlatform.UNIX,
    }
    attrs.update(kwargs)
    return PackageProject(**attrs)


class TestPackageProject:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv(SKIP_PACKAGING_ENV, raising=False)
        proj = _project(tmp_path)
        assert proj.description == ""
        assert proj.configuration == "Debug"
        assert proj.pack_projects == list(PROJECTS_TO_PACK)
        assert proj.skip_packaging is False
        assert proj.artifact_prefix == "dotnet"

    def test_runtime_identifier(self, tmp_path):
        assert _project(tmp_path).runtime_identifier == "linux-x64"
        assert _project(tmp_path, rid="ubuntu.14.04-x64").runtime_identifier == "ubuntu.14.04-x64"

    def test_dirs(self, tmp_path):
        dirs = _project(tmp_path).dirs
        assert dirs.output == tmp_path / "artifacts" / "linux-x64"
        assert dirs.stage2 == dirs.output / "stage2"
        assert dirs.stage2_symbols == dirs.output / "stage2symbols"
        assert dirs.intermediate == dirs.output / "obj"
        assert dirs.test_packages == dirs.output / "tests" / "packages"

    def test_output_root_override(self, tmp_path):
        dirs = _project(tmp_path, output_root=tmp_path / "out").dirs
        assert dirs.packages == tmp_path / "out" / "packages"

    def test_default_badge_template(self, tmp_path):
        assert _project(tmp_path).badge_template_path == tmp_path / "resources" / "images" / "version_badge.svg"

    def test_default_pack_tool(self, tmp_path):
        proj = _project(tmp_path)
        assert proj.pack_tool == [str(proj.dirs.stage2 / "dotnet"), "pack"]
        win = _project(tmp_path, platform=HostPlatform.WINDOWS)
        assert win.pack_tool[0].endswith("dotnet.exe")

    def test_platform_from_string(self, tmp_path):
        assert _project(tmp_path, platform="windows").platform is HostPlatform.WINDOWS

    def test_skip_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv(SKIP_PACKAGING_ENV, "true")
        assert _project(tmp_path).skip_packaging is True


class TestCreateContext:
    def test_unix_capabilities(self, tmp_path):
        ctx = _project(tmp_path).create_context()
        assert isinstance(ctx.get(keys.ARCHIVER), TarGzArchiver)
        assert isinstance(ctx.get(keys.PERMISSION_FIXER), PosixPermissionFixer)

    def test_windows_capabilities(self, tmp_path):
        ctx = _project(tmp_path, platform=HostPlatform.WINDOWS).create_context()
        assert isinstance(ctx.get(keys.ARCHIVER), ZipArchiver)
        assert isinstance(ctx.get(keys.PERMISSION_FIXER), NoopPermissionFixer)

    def test_target_is_project(self, tmp_path):
        proj = _project(tmp_path)
        ctx = proj.create_context(dry_run=True)
        assert ctx.target is proj
        assert ctx.dry_run is True


class TestBuild:
    def test_pipeline_order(self, tmp_path):
        pipeline = _project(tmp_path).pipeline()
        assert [t.name for t in pipeline] == list(PACKAGE_TARGETS)
        assert PACKAGE_TARGETS[1:] == (
            "init-package",
            "generate-version-badge",
            "generate-compressed-file",
            "generate-installer",
            "generate-packages",
            "test-installer",
        )

    def test_pipeline_order_is_consistent(self, tmp_path):
        proj = _project(tmp_path)
        proj.pipeline().check_order(proj.create_context().keys())

    def test_skip_packaging_runs_nothing(self, tmp_path, fake_run):
        proj = _project(tmp_path, skip_packaging=True)
        result = proj.build()
        assert result == Success("cli")
        assert not (tmp_path / "artifacts").exists()
        assert fake_run.calls == []

    def test_dry_run_runs_nothing(self, tmp_path, fake_run):
        result = _project(tmp_path, skip_packaging=False).build(dry_run=True)
        assert result
        assert not (tmp_path / "artifacts").exists()
        assert fake_run.calls == []

    def test_missing_stage_output_fails(self, tmp_path, fake_run):
        result = _project(tmp_path, skip_packaging=False).build()
        assert isinstance(result, Failure)
        assert result.target == "init-package"
        assert "stage2" in result.reason
        assert fake_run.calls == []

    def test_subclass_preserved_in_context(self, tmp_path):
        class CustomProject(PackageProject):
            channel: str = "preview"

        proj = CustomProject(name="c", repo_root=tmp_path, version=VERSION)
        ctx = proj.create_context()
        assert isinstance(ctx.target, CustomProject)
        assert ctx.target.channel == "preview"

    def test_version_required(self):
        with pytest.raises(ValueError):
            PackageProject(name="no-version")
