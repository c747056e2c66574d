"""Build version descriptor."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BuildVersion(BaseModel):
    """Version of the product being packaged, computed once per run."""

    model_config = {"frozen": True}

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)
    commit_count: int = Field(ge=0)
    release_suffix: str = ""

    @property
    def commit_count_string(self) -> str:
        return f"{self.commit_count:06d}"

    @property
    def version_suffix(self) -> str:
        if not self.release_suffix:
            return self.commit_count_string
        return f"{self.release_suffix}-{self.commit_count_string}"

    @property
    def simple_version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.{self.commit_count_string}"

    @property
    def nuget_version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}-{self.version_suffix}"

    def msi_version(self) -> str:
        """Encode the version into the three-part MSI scheme.

        MSI versions are major.minor.build with 8, 8 and 16 bits. The 32 bits
        hold major, minor and patch in 6 bits each, then the commit count in
        the remaining 14 bits. Components wider than their field are masked.
        """
        number = (
            (self.major & 0x3F) << 26
            | (self.minor & 0x3F) << 20
            | (self.patch & 0x3F) << 14
            | (self.commit_count & 0x3FFF)
        )
        msi_major = (number >> 24) & 0xFF
        msi_minor = (number >> 16) & 0xFF
        msi_build = number & 0xFFFF
        return f"{msi_major}.{msi_minor}.{msi_build}"

    def __str__(self) -> str:
        return self.nuget_version
