"""Packaging targets: layouts, version badge, archives and packages."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .projects import PackageProject

from . import fs, keys, tools
from .archivers import Archiver
from .context import BuildContext
from .errors import MissingInputError
from .permissions import PermissionFixer
from .targets import target
from .version import BuildVersion

logger = logging.getLogger(__name__)

VERSION_PLACEHOLDER = "ver_number"
TARGET_FRAMEWORK = "dnxcore50"

PROJECTS_TO_PACK: tuple[str, ...] = (
    # TODO: https://github.com/dotnet/cli/issues/3558
    # "dotnet-compile-fsc",
    "Microsoft.DotNet.Cli.Utils",
    "Microsoft.DotNet.Compiler.Common",
    "Microsoft.DotNet.Files",
    "Microsoft.DotNet.InternalAbstractions",
    "Microsoft.DotNet.ProjectModel",
    "Microsoft.DotNet.ProjectModel.Loader",
    "Microsoft.DotNet.ProjectModel.Workspaces",
    "Microsoft.Extensions.DependencyModel",
    "Microsoft.Extensions.Testing.Abstractions",
)

LAYOUT_KEYS = (
    keys.CLI_SDK_ROOT,
    keys.SHARED_HOST_ROOT,
    keys.HOST_FXR_ROOT,
    keys.SHARED_FRAMEWORK_ROOT,
    keys.COMBINED_HOST_ROOT,
    keys.COMBINED_ROOT,
)

ARCHIVE_KEYS = (
    keys.COMBINED_HOST_ARCHIVE,
    keys.COMBINED_ARCHIVE,
    keys.SDK_SYMBOLS_ARCHIVE,
)


def _project(ctx: BuildContext[PackageProject]) -> PackageProject:
    return ctx.target


@target(
    "prepare",
    produces=(
        keys.BUILD_VERSION,
        keys.CONFIGURATION,
        keys.VERSION_BADGE,
        keys.SDK_SYMBOLS_ROOT,
        *ARCHIVE_KEYS,
    ),
    consumes=(keys.ARCHIVER,),
)
def prepare(ctx: BuildContext[PackageProject]) -> None:
    """Record the version, configuration and output paths of this run."""
    project = _project(ctx)
    dirs = project.dirs
    version = project.version
    ext = ctx.get(keys.ARCHIVER, Archiver).extension
    stem = f"{project.runtime_identifier}.{version.nuget_version}"
    prefix = project.artifact_prefix

    ctx.set(keys.BUILD_VERSION, version)
    ctx.set(keys.CONFIGURATION, project.configuration)
    ctx.set(keys.VERSION_BADGE, dirs.output / "version_badge.svg")
    ctx.set(keys.SDK_SYMBOLS_ROOT, dirs.stage2_symbols / "sdk")
    ctx.set(keys.COMBINED_HOST_ARCHIVE, dirs.packages / f"{prefix}-dev-{stem}{ext}")
    ctx.set(keys.COMBINED_ARCHIVE, dirs.packages / f"{prefix}-framework-sdk-{stem}{ext}")
    ctx.set(keys.SDK_SYMBOLS_ARCHIVE, dirs.packages / f"{prefix}-dev-symbols-{stem}{ext}")


# -- Layouts --


def _copy_layout(
    ctx: BuildContext[PackageProject],
    key: str,
    source: Path,
    dest: Path,
    *,
    files_only: bool = False,
) -> Path:
    if not source.is_dir():
        raise MissingInputError(source, "source directory")
    fs.reset_directory(dest)
    if files_only:
        fs.copy_files(source, dest)
    else:
        fs.copy_tree(source, dest)
    ctx.get(keys.PERMISSION_FIXER, PermissionFixer).fix(dest)
    logger.info("Copied layout '%s' -> '%s'", source, dest)
    ctx.set(key, dest)
    return dest


def _compose_layout(ctx: BuildContext[PackageProject], key: str, dest: Path, *root_keys: str) -> Path:
    roots = [ctx.get(root_key, Path) for root_key in root_keys]
    fs.compose_layout(dest, roots)
    logger.info("Composed layout '%s' from %d root(s)", dest, len(roots))
    ctx.set(key, dest)
    return dest


@target("init-package", produces=LAYOUT_KEYS, consumes=(keys.PERMISSION_FIXER,))
def init_package(ctx: BuildContext[PackageProject]) -> None:
    """Copy the stage 2 output into fresh layout directories."""
    dirs = _project(ctx).dirs
    obj = dirs.intermediate

    _copy_layout(ctx, keys.CLI_SDK_ROOT, dirs.stage2 / "sdk", obj / "clisdk")
    _copy_layout(ctx, keys.SHARED_HOST_ROOT, dirs.stage2, obj / "sharedHost", files_only=True)
    _copy_layout(ctx, keys.HOST_FXR_ROOT, dirs.stage2 / "host", obj / "hostFxr")
    _copy_layout(ctx, keys.SHARED_FRAMEWORK_ROOT, dirs.stage2 / "shared", obj / "sharedFx")

    _compose_layout(
        ctx,
        keys.COMBINED_HOST_ROOT,
        obj / "combined-framework-sdk-host",
        keys.CLI_SDK_ROOT,
        keys.SHARED_FRAMEWORK_ROOT,
        keys.SHARED_HOST_ROOT,
        keys.HOST_FXR_ROOT,
    )
    _compose_layout(
        ctx,
        keys.COMBINED_ROOT,
        obj / "combined-framework-sdk",
        keys.CLI_SDK_ROOT,
        keys.SHARED_FRAMEWORK_ROOT,
    )

    dirs.packages.mkdir(parents=True, exist_ok=True)


# -- Version badge --


def render_badge(template: Path, output: Path, version: str) -> Path:
    """Write template to output with every placeholder replaced by version."""
    if not template.is_file():
        raise MissingInputError(template, "version badge template")
    content = template.read_bytes()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(content.replace(VERSION_PLACEHOLDER.encode(), version.encode()))
    return output


@target(
    "generate-version-badge",
    consumes=(keys.BUILD_VERSION, keys.VERSION_BADGE),
)
def generate_version_badge(ctx: BuildContext[PackageProject]) -> None:
    """Stamp the version into the badge SVG."""
    version = ctx.get(keys.BUILD_VERSION, BuildVersion)
    output = ctx.get(keys.VERSION_BADGE, Path)
    render_badge(_project(ctx).badge_template_path, output, version.nuget_version)
    logger.info("Wrote version badge '%s' (%s)", output, version.nuget_version)


# -- Compressed files --


@target(
    "generate-compressed-file",
    consumes=(
        keys.ARCHIVER,
        keys.COMBINED_HOST_ROOT,
        keys.COMBINED_ROOT,
        keys.SDK_SYMBOLS_ROOT,
        *ARCHIVE_KEYS,
    ),
)
def generate_compressed_file(ctx: BuildContext[PackageProject]) -> None:
    """Compress the combined layouts and symbols for this platform."""
    archiver = ctx.get(keys.ARCHIVER, Archiver)
    for source_key, artifact_key in archiver.artifacts:
        archiver.archive(ctx.get(source_key, Path), ctx.get(artifact_key, Path))


# -- Packages --


def common_env_vars(ctx: BuildContext[PackageProject]) -> dict[str, str]:
    """Environment shared with collaborator scripts and tools.

    Several values appear under two names; older scripts still read the
    legacy spelling.
    """
    project = _project(ctx)
    dirs = project.dirs
    version = ctx.get(keys.BUILD_VERSION, BuildVersion)
    configuration = ctx.get(keys.CONFIGURATION, str)
    return {
        "RID": project.runtime_identifier,
        "OSNAME": project.operating_system,
        "TFM": TARGET_FRAMEWORK,
        "REPOROOT": str(dirs.repo_root),
        "OutputDir": str(dirs.output),
        "Stage1Dir": str(dirs.stage1),
        "Stage1CompilationDir": str(dirs.stage1_compilation),
        "Stage2Dir": str(dirs.stage2),
        "STAGE2_DIR": str(dirs.stage2),
        "Stage2CompilationDir": str(dirs.stage2_compilation),
        "PackageDir": str(dirs.packages),
        "TestBinRoot": str(dirs.test_output),
        "TestPackageDir": str(dirs.test_packages),
        "MajorVersion": str(version.major),
        "MinorVersion": str(version.minor),
        "PatchVersion": str(version.patch),
        "CommitCountVersion": version.commit_count_string,
        "COMMIT_COUNT_VERSION": version.commit_count_string,
        "DOTNET_CLI_VERSION": version.simple_version,
        "DOTNET_MSI_VERSION": version.msi_version(),
        "VersionSuffix": version.version_suffix,
        "CONFIGURATION": configuration,
        "ARCHITECTURE": project.architecture,
    }


@target(
    "generate-packages",
    consumes=(keys.BUILD_VERSION, keys.CONFIGURATION),
)
def generate_packages(ctx: BuildContext[PackageProject]) -> None:
    """Pack each library project into the package directory."""
    project = _project(ctx)
    dirs = project.dirs
    version_suffix = ctx.get(keys.BUILD_VERSION, BuildVersion).commit_count_string
    configuration = ctx.get(keys.CONFIGURATION, str)
    env = common_env_vars(ctx)
    build_base_path = dirs.stage2_compilation / "forPackaging"

    dirs.packages.mkdir(parents=True, exist_ok=True)

    for name in project.pack_projects:
        project_file = dirs.repo_root / "src" / name / "project.json"
        logger.info("Packing '%s'", name)
        tools.run(
            *project.pack_tool,
            project_file,
            "--no-build",
            "--serviceable",
            "--build-base-path",
            build_base_path,
            "--output",
            dirs.packages,
            "--configuration",
            configuration,
            "--version-suffix",
            version_suffix,
            env=env,
            subject=name,
        )


# -- Installers --


def _run_collaborator(ctx: BuildContext[PackageProject], command: list[str], what: str) -> None:
    if not command:
        logger.info("No %s command configured; skipping", what)
        return
    collaborator = tools.Command(command, env=common_env_vars(ctx), cwd=_project(ctx).repo_root)
    collaborator.execute().ensure_successful(what)


@target("generate-installer", consumes=(keys.BUILD_VERSION, keys.CONFIGURATION))
def generate_installer(ctx: BuildContext[PackageProject]) -> None:
    """Hand off to the configured installer generator."""
    _run_collaborator(ctx, _project(ctx).generate_installer_command, "installer generation")


@target("test-installer", consumes=(keys.BUILD_VERSION, keys.CONFIGURATION))
def run_installer_tests(ctx: BuildContext[PackageProject]) -> None:
    """Hand off to the configured installer test."""
    _run_collaborator(ctx, _project(ctx).test_installer_command, "installer test")


PACKAGE_TARGETS: tuple[str, ...] = (
    "prepare",
    "init-package",
    "generate-version-badge",
    "generate-compressed-file",
    "generate-installer",
    "generate-packages",
    "test-installer",
)
