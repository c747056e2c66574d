"""Shared fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest


class FakeRun:
    """Stand-in for subprocess.run that records every invocation."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []
        self.fail_when: Callable[[list[str]], bool] = lambda args: False

    def __call__(self, args, **kwargs) -> subprocess.CompletedProcess:
        args = list(args)
        self.calls.append(args)
        self.envs.append(kwargs.get("env"))
        if self.fail_when(args):
            return subprocess.CompletedProcess(args, 1, stdout="", stderr=f"{args[0]} failed")
        if Path(args[0]).name == "tar" and args[1] == "-czf":
            Path(args[2]).write_bytes(b"\x1f\x8b fake tarball")
        return subprocess.CompletedProcess(args, 0, stdout="", stderr="")


@pytest.fixture
def fake_run(monkeypatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr("stagepack.tools.subprocess.run", fake)
    return fake
