"""Tagged outcomes of pipeline targets."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Success:
    """The target completed."""

    target: str

    @property
    def ok(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """The target failed; the pipeline stops here."""

    target: str
    reason: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False


type TargetResult = Success | Failure
