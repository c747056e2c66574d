"""Well-known directories of a packaging run."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class BuildDirs(BaseModel):
    """Repository, stage output and package directories for one runtime."""

    model_config = {"frozen": True}

    repo_root: Path
    rid: str
    output_root: Path | None = None

    @property
    def output(self) -> Path:
        if self.output_root is not None:
            return self.output_root
        return self.repo_root / "artifacts" / self.rid

    @property
    def intermediate(self) -> Path:
        return self.output / "obj"

    @property
    def stage1(self) -> Path:
        return self.output / "stage1"

    @property
    def stage1_compilation(self) -> Path:
        return self.output / "stage1compilation"

    @property
    def stage2(self) -> Path:
        return self.output / "stage2"

    @property
    def stage2_compilation(self) -> Path:
        return self.output / "stage2compilation"

    @property
    def stage2_symbols(self) -> Path:
        return self.output / "stage2symbols"

    @property
    def packages(self) -> Path:
        return self.output / "packages"

    @property
    def test_output(self) -> Path:
        return self.output / "tests"

    @property
    def test_packages(self) -> Path:
        return self.test_output / "packages"
