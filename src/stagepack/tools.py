"""External process invocation."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def tool(self) -> str:
        return Path(self.args[0]).name if self.args else ""

    def ensure_successful(self, subject: str | None = None) -> CommandResult:
        """Raise ExternalToolError unless the process exited with status 0."""
        if self.returncode != 0:
            raise ExternalToolError(
                self.tool,
                self.returncode,
                self.stderr or self.stdout,
                subject=subject,
            )
        return self


@dataclass
class Command:
    """A process to spawn and wait on; no timeout is applied."""

    args: Sequence[str]
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Path | None = None

    def execute(self) -> CommandResult:
        args = [str(arg) for arg in self.args]
        env = {**os.environ, **self.env} if self.env else None
        logger.info("Executing %s", " ".join(args))
        try:
            proc = subprocess.run(
                args,
                capture_output=True,
                text=True,
                env=env,
                cwd=self.cwd,
                check=False,
            )
        except FileNotFoundError as exc:
            return CommandResult(args, 127, stderr=str(exc))
        if proc.stdout:
            logger.debug("%s stdout:\n%s", args[0], proc.stdout.rstrip())
        return CommandResult(args, proc.returncode, proc.stdout or "", proc.stderr or "")


def run(*args: str | Path, env: Mapping[str, str] | None = None, subject: str | None = None) -> CommandResult:
    """Run a command to completion and fail on a non-zero exit."""
    command = Command([str(arg) for arg in args], env=dict(env or {}))
    return command.execute().ensure_successful(subject)
