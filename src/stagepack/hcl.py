"""HCL loading engine — parse .hcl files into PackageProjects."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import hcl2
import jinja2

from .projects import PackageProject

logger = logging.getLogger(__name__)

_VAR_PATTERN = re.compile(r"\$\{(?:env\.(\w+)|(\w+))\}")

_BUILTIN_VARS: dict[str, Callable[[], str]] = {
    "CWD": os.getcwd,
}

# Path fields that are resolved against the directory of the HCL file.
_PATH_FIELDS = ("repo_root", "output_root", "badge_template")


def load(
    file: Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and parse a single HCL file, rendering Jinja2 templates with context."""
    text = file.read_text()
    ctx = context if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        template = env.from_string(text)
        text = template.render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{file}: {exc}") from exc
    return hcl2.loads(text)


def _expand_var(match: re.Match) -> str:
    """Expand a single ${...} variable reference."""
    env_name = match.group(1)
    builtin_name = match.group(2)
    if env_name is not None:
        if env_name not in os.environ:
            logger.warning("Environment variable '%s' is not set", env_name)
        return os.environ.get(env_name, "")
    if builtin_name is not None and builtin_name in _BUILTIN_VARS:
        return _BUILTIN_VARS[builtin_name]()
    logger.warning("Unknown variable '%s'", builtin_name)
    return match.group(0)


def _interpolate_value(value: Any) -> Any:
    """Expand ${env.VAR} and ${CWD} references, descending into lists and objects."""
    if isinstance(value, str) and "${" in value:
        return _VAR_PATTERN.sub(_expand_var, value)
    if isinstance(value, list):
        return [_interpolate_value(item) for item in value]
    if isinstance(value, dict):
        return {k: _interpolate_value(v) for k, v in value.items()}
    return value


def _build_project[P: PackageProject](
    name: str,
    data: dict[str, Any],
    base_dir: Path,
    *,
    project_type: type[P] = PackageProject,  # type: ignore[assignment]
) -> P:
    """Build a single project instance from a parsed package block."""
    logger.debug("Building package '%s' as %s", name, project_type.__name__)
    attrs = {k: _interpolate_value(v) for k, v in data.items()}
    for key in _PATH_FIELDS:
        if attrs.get(key):
            path = Path(attrs[key]).expanduser()
            attrs[key] = path if path.is_absolute() else base_dir / path
    return project_type(name=name, **attrs)


def load_projects[P: PackageProject](
    file: str | Path,
    *,
    project_type: type[P] = PackageProject,  # type: ignore[assignment]
    context: dict[str, Any] | None = None,
) -> dict[str, P]:
    """Load every package block of an HCL file, keyed by package name.

    Raises ValueError if a package name appears more than once.
    """
    path = Path(file)
    data = load(path, context=context)
    base_dir = path.resolve().parent

    projects: dict[str, P] = {}
    for block in data.get("package", []):
        for name, attrs in block.items():
            if name in projects:
                raise ValueError(f"Duplicate package: '{name}'")
            logger.debug("Found package '%s'", name)
            projects[name] = _build_project(name, attrs, base_dir, project_type=project_type)
    return projects


def load_project[P: PackageProject](
    file: str | Path,
    name: str | None = None,
    *,
    project_type: type[P] = PackageProject,  # type: ignore[assignment]
    context: dict[str, Any] | None = None,
) -> P:
    """Load one package by name; the name may be omitted when the file has only one."""
    projects = load_projects(file, project_type=project_type, context=context)
    if name is None:
        if len(projects) != 1:
            raise ValueError(f"{file}: expected exactly one package, found {len(projects)}")
        return next(iter(projects.values()))
    if name not in projects:
        raise ValueError(f"{file}: unknown package '{name}'")
    return projects[name]
