"""Pipeline model: an ordered chain of targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field

from .context import BuildContext
from .errors import TargetOrderError
from .results import Success, TargetResult
from .targets import Target, resolve_targets

logger = logging.getLogger(__name__)


class Pipeline(BaseModel):
    """A named, ordered collection of targets."""

    model_config = {"arbitrary_types_allowed": True}

    name: str
    targets: list[Target] = Field(default_factory=list)

    @classmethod
    def from_names(cls, name: str, names: Iterable[str]) -> Pipeline:
        return cls(name=name, targets=resolve_targets(names))

    def __iter__(self) -> Iterator[Target]:  # type: ignore[override]
        return iter(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def check_order(self, available: Iterable[str] = ()) -> None:
        """Verify each target only consumes keys that exist before it runs.

        Raises TargetOrderError naming the first target with unmet inputs.
        """
        produced = set(available)
        for tgt in self.targets:
            missing = tgt.consumes - produced
            if missing:
                raise TargetOrderError(
                    f"Target '{tgt.name}' consumes {sorted(missing)} before any target produces them"
                )
            produced |= tgt.produces

    def run(self, ctx: BuildContext) -> TargetResult:
        """Run every target in order, stopping at the first failure."""
        self.check_order(ctx.keys())
        logger.debug("Running pipeline '%s'", self.name)
        for tgt in self.targets:
            result = tgt(ctx)
            if not result:
                logger.debug("Pipeline '%s' stopped at target '%s'", self.name, tgt.name)
                return result
        return Success(self.name)
