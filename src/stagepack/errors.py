"""Exception taxonomy for the packaging pipeline."""

from __future__ import annotations

from pathlib import Path


class PackagingError(Exception):
    """Base class for errors that fail a packaging target."""


class MissingKeyError(PackagingError, KeyError):
    """A build context key was read before any target wrote it."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Build context has no value for '{self.key}'"


class ContextTypeError(PackagingError, TypeError):
    """A build context value is not of the requested type."""

    def __init__(self, key: str, expected: type, actual: object) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Build context value '{key}' is {type(actual).__name__}, expected {expected.__name__}"
        )


class MissingInputError(PackagingError):
    """A required input file or directory does not exist."""

    def __init__(self, path: Path, what: str = "input") -> None:
        self.path = path
        super().__init__(f"Missing {what}: {path}")


class ExternalToolError(PackagingError):
    """An external process exited unsuccessfully."""

    def __init__(
        self,
        tool: str,
        returncode: int,
        output: str = "",
        *,
        subject: str | None = None,
    ) -> None:
        self.tool = tool
        self.returncode = returncode
        self.output = output
        self.subject = subject
        prefix = f"{subject}: " if subject else ""
        message = f"{prefix}'{tool}' exited with status {returncode}"
        if output.strip():
            message = f"{message}\n{output.strip()}"
        super().__init__(message)


class TargetOrderError(PackagingError, ValueError):
    """A target consumes a context key that no earlier target produces."""
