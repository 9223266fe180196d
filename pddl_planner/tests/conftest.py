"""Shared test fixtures and utilities."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from pddl_planner.models import PlanCandidates, ResultSpec
from pddl_planner.planners.runner import run_planner
from pddl_planner.workspace import JobFiles


class ScriptPlanner:
    """Tool planner that runs a test script as ``<exe> <domain> <problem> <result>``."""

    def __init__(
        self,
        name: str,
        executable: str,
        *,
        result_spec: ResultSpec | None = None,
        byproducts: tuple[str, ...] = (),
    ) -> None:
        self.name = name
        self.executable = executable
        self.result_name = "plan"
        self.result_spec = result_spec or ResultSpec.fixed("plan")
        self.byproducts = byproducts

    def build_command(self, files: JobFiles) -> list[str]:
        return [self.executable, str(files.domain), str(files.problem), files.result.name]

    def plan(
        self,
        problem: str,
        actions: str,
        domain: str,
        timeout_s: float,
        *,
        workspace_root: Path | None = None,
    ) -> PlanCandidates:
        return run_planner(
            self, problem, actions, domain, timeout_s, workspace_root=workspace_root
        )


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Workspace root for tests (created on demand by the code under test)."""
    return tmp_path / "workspaces"


@pytest.fixture
def bin_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Directory prepended to PATH for fake planner executables."""
    directory = tmp_path / "bin"
    directory.mkdir()
    monkeypatch.setenv("PATH", f"{directory}{os.pathsep}{os.environ.get('PATH', '')}")
    return directory


@pytest.fixture
def make_tool(bin_dir: Path) -> Callable[[str, str], Path]:
    """Create an executable shell script on PATH.

    The script receives ``domain problem result`` as ``$1 $2 $3``.
    """

    def _make(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def script_planner() -> type[ScriptPlanner]:
    return ScriptPlanner


@pytest.fixture
def isolated_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, workspace_root: Path
) -> Path:
    """Point config and workspace lookups at the test's temp dir."""
    monkeypatch.setenv("PDDL_PLANNER_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.setenv("PDDL_PLANNER_WORKSPACE_ROOT", str(workspace_root))
    return workspace_root
