"""Package project model — the top-level build target."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from . import keys, platforms
from .archivers import select_archiver
from .context import BuildContext
from .dirs import BuildDirs
from .package import PACKAGE_TARGETS, PROJECTS_TO_PACK
from .permissions import select_permission_fixer
from .pipeline import Pipeline
from .platforms import HostPlatform
from .results import Success, TargetResult
from .version import BuildVersion

logger = logging.getLogger(__name__)

SKIP_PACKAGING_ENV = "DOTNET_BUILD_SKIP_PACKAGING"

_TRUTHY = {"1", "true", "yes", "on"}


def _skip_from_env() -> bool:
    return os.environ.get(SKIP_PACKAGING_ENV, "").strip().lower() in _TRUTHY


class PackageProject(BaseModel):
    """Settings for one packaging run; apps may subclass with extra fields."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    description: str = ""
    repo_root: Path = Field(default_factory=Path.cwd)
    output_root: Path | None = None
    configuration: str = "Debug"
    version: BuildVersion
    platform: HostPlatform = Field(default_factory=platforms.current_platform)
    operating_system: str = Field(default_factory=platforms.operating_system)
    architecture: str = Field(default_factory=platforms.architecture)
    rid: str | None = None
    artifact_prefix: str = "dotnet"
    pack_projects: list[str] = Field(default_factory=lambda: list(PROJECTS_TO_PACK))
    pack_command: list[str] | None = None
    badge_template: Path | None = None
    generate_installer_command: list[str] = Field(default_factory=list)
    test_installer_command: list[str] = Field(default_factory=list)
    skip_packaging: bool = Field(default_factory=_skip_from_env)

    @property
    def runtime_identifier(self) -> str:
        return self.rid or platforms.runtime_identifier(self.operating_system, self.architecture)

    @property
    def dirs(self) -> BuildDirs:
        return BuildDirs(
            repo_root=self.repo_root,
            rid=self.runtime_identifier,
            output_root=self.output_root,
        )

    @property
    def badge_template_path(self) -> Path:
        if self.badge_template is not None:
            return self.badge_template
        return self.repo_root / "resources" / "images" / "version_badge.svg"

    @property
    def pack_tool(self) -> list[str]:
        """Command prefix of the packaging tool; defaults to the stage 2 CLI."""
        if self.pack_command:
            return list(self.pack_command)
        exe = "dotnet.exe" if self.platform is HostPlatform.WINDOWS else "dotnet"
        return [str(self.dirs.stage2 / exe), "pack"]

    def pipeline(self) -> Pipeline:
        return Pipeline.from_names(self.name, PACKAGE_TARGETS)

    def create_context(self, **kwargs) -> BuildContext[PackageProject]:
        """Create the build context, selecting platform capabilities once."""
        ctx = BuildContext(target=self, **kwargs)
        ctx.set(keys.ARCHIVER, select_archiver(self.platform))
        ctx.set(keys.PERMISSION_FIXER, select_permission_fixer(self.platform))
        return ctx

    def build(self, **kwargs) -> TargetResult:
        """Run the packaging pipeline. kwargs are passed to BuildContext."""
        if self.skip_packaging:
            logger.info("Skipping packaging of '%s'", self.name)
            return Success(self.name)
        logger.info("Packaging '%s' (%s, %s)", self.name, self.version, self.runtime_identifier)
        ctx = self.create_context(**kwargs)
        return self.pipeline().run(ctx)
