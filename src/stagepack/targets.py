"""Target descriptors and target registration."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from .context import BuildContext
from .errors import PackagingError
from .results import Failure, Success, TargetResult

logger = logging.getLogger(__name__)

# -- Target Registry --

_target_registry: dict[str, Target] = {}


@dataclass(frozen=True)
class Target:
    """A named pipeline step with the context keys it reads and writes."""

    name: str
    action: Callable[[BuildContext[Any]], None]
    produces: frozenset[str] = field(default_factory=frozenset)
    consumes: frozenset[str] = field(default_factory=frozenset)

    @property
    def description(self) -> str:
        doc = (self.action.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""

    def __call__(self, ctx: BuildContext[Any]) -> TargetResult:
        if ctx.dry_run:
            logger.info("[DRY RUN] Would run target '%s'", self.name)
            return Success(self.name)
        logger.info("Running target '%s'", self.name)
        try:
            self.action(ctx)
        except (PackagingError, OSError) as exc:
            logger.debug("Target '%s' failed: %s", self.name, exc)
            return Failure(self.name, str(exc), exc)
        return Success(self.name)


def target(
    name: str,
    *,
    produces: Iterable[str] = (),
    consumes: Iterable[str] = (),
):
    """Register a function as a pipeline target."""

    def decorator(func: Callable[[BuildContext[Any]], None]) -> Target:
        tgt = Target(
            name=name,
            action=func,
            produces=frozenset(produces),
            consumes=frozenset(consumes),
        )
        _target_registry[name] = tgt
        return tgt

    return decorator


def resolve_targets(names: Iterable[str]) -> list[Target]:
    """Look up registered targets by name, preserving order."""
    targets: list[Target] = []
    for name in names:
        if name not in _target_registry:
            raise ValueError(f"Unknown target: '{name}'")
        logger.debug("Resolved target '%s'", name)
        targets.append(_target_registry[name])
    return targets
