"""Tests for workspace module."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomli

from pddl_planner.errors import WorkspaceError
from pddl_planner.workspace import (
    MANIFEST_FILENAME,
    create_workspace,
    default_workspace_root,
    write_artifacts,
    write_manifest,
)


def test_create_workspace_names_directory_after_planner(workspace_root: Path) -> None:
    """Test the workspace is a new directory under the root."""
    workspace = create_workspace("LAMA", root=workspace_root)

    assert workspace.path.is_dir()
    assert workspace.path.parent == workspace_root
    assert workspace.path.name.endswith("_LAMA")
    assert workspace.planner == "LAMA"


def test_create_workspace_never_reuses_a_directory(workspace_root: Path) -> None:
    """Test back-to-back workspaces for one planner get distinct directories."""
    paths = {create_workspace("FD", root=workspace_root).path for _ in range(20)}

    assert len(paths) == 20
    assert all(path.is_dir() for path in paths)


def test_create_workspace_sanitizes_planner_name(workspace_root: Path) -> None:
    workspace = create_workspace("my planner/v2", root=workspace_root)

    assert workspace.path.parent == workspace_root
    assert workspace.path.name.endswith("_my-planner-v2")


def test_create_workspace_fails_when_root_is_a_file(tmp_path: Path) -> None:
    """Test WorkspaceError is raised when the directory cannot be created."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(WorkspaceError):
        create_workspace("LAMA", root=blocker)


def test_default_workspace_root_env_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("PDDL_PLANNER_WORKSPACE_ROOT", str(tmp_path / "ws"))

    assert default_workspace_root() == tmp_path / "ws"


def test_write_artifacts_writes_inputs_and_reserves_result(workspace_root: Path) -> None:
    """Test domain, problem and reserved result paths."""
    workspace = create_workspace("LAMA", root=workspace_root)

    files = write_artifacts(
        workspace,
        "(define (domain d))",
        "(define (problem p))",
        action_text="(:action a)",
        result_name="sas_plan",
    )

    assert files.domain.read_text(encoding="utf-8") == "(define (domain d))\n(:action a)\n"
    assert files.problem.read_text(encoding="utf-8") == "(define (problem p))\n"
    assert files.result == workspace.path / "sas_plan"
    assert not files.result.exists()


def test_write_artifacts_without_actions(workspace_root: Path) -> None:
    workspace = create_workspace("LAMA", root=workspace_root)

    files = write_artifacts(workspace, "(define (domain d))", "(define (problem p))")

    assert files.domain.read_text(encoding="utf-8") == "(define (domain d))\n"
    assert files.result.name == "plan"


def test_write_artifacts_fails_for_missing_workspace(workspace_root: Path) -> None:
    workspace = create_workspace("LAMA", root=workspace_root)
    workspace.path.rmdir()

    with pytest.raises(WorkspaceError):
        write_artifacts(workspace, "d", "p")


def test_write_manifest_skips_none_values(workspace_root: Path) -> None:
    workspace = create_workspace("LAMA", root=workspace_root)

    path = write_manifest(
        workspace,
        {"planner": "LAMA", "exit_code": None, "argv": ["lama-planner", workspace.path]},
    )

    assert path == workspace.path / MANIFEST_FILENAME
    with open(path, "rb") as f:
        payload = tomli.load(f)
    assert payload == {"planner": "LAMA", "argv": ["lama-planner", str(workspace.path)]}
