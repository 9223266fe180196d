"""Per-invocation workspaces for planner jobs.

Every planner job gets its own directory named from a timestamp and the
planner name. The domain and problem files are written there, the planner
writes its results there, and the directory is left in place afterwards so a
run can be inspected post-mortem.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import tomli_w

from pddl_planner.errors import WorkspaceError
from pddl_planner.log_format import format_log

logger = logging.getLogger(__name__)

DOMAIN_FILENAME = "domain.pddl"
PROBLEM_FILENAME = "problem.pddl"
LOG_FILENAME = "planner.log"
MANIFEST_FILENAME = "job.toml"
DEFAULT_RESULT_FILENAME = "plan"

# Upper bound on name collisions tried before giving up.
_MAX_NAME_ATTEMPTS = 1000

_UNSAFE_NAME_CHARS_RE = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True, slots=True)
class Workspace:
    path: Path
    planner: str

    def file(self, name: str) -> Path:
        return self.path / name


@dataclass(frozen=True, slots=True)
class JobFiles:
    domain: Path
    problem: Path
    result: Path


def default_workspace_root() -> Path:
    override = str(os.environ.get("PDDL_PLANNER_WORKSPACE_ROOT") or "").strip()
    if override:
        return Path(os.path.expanduser(override))
    return Path(tempfile.gettempdir()) / "pddl_planner"


def _workspace_basename(planner: str) -> str:
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    safe = _UNSAFE_NAME_CHARS_RE.sub("-", planner).strip("-") or "planner"
    return f"{stamp}_{safe}"


def create_workspace(planner: str, *, root: Path | str | None = None) -> Workspace:
    """Create a new, exclusively owned workspace directory.

    Args:
        planner: Planner identifier, used in the directory name.
        root: Parent directory (default: ``default_workspace_root()``).

    Returns:
        The created workspace.

    Raises:
        WorkspaceError: If the directory cannot be created.
    """
    root_path = Path(root) if root is not None else default_workspace_root()
    try:
        root_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WorkspaceError(f"Could not create workspace root {root_path}: {exc}") from exc

    base = _workspace_basename(planner)
    for attempt in range(_MAX_NAME_ATTEMPTS):
        name = base if attempt == 0 else f"{base}-{attempt}"
        path = root_path / name
        try:
            # exist_ok=False is what makes the directory exclusively ours.
            path.mkdir(exist_ok=False)
        except FileExistsError:
            continue
        except OSError as exc:
            raise WorkspaceError(f"Could not create workspace {path}: {exc}") from exc
        logger.debug(format_log("workspace", planner, "DEBUG", f"created {path}"))
        return Workspace(path=path, planner=planner)

    raise WorkspaceError(f"Could not allocate a unique workspace name under {root_path}")


def write_artifacts(
    workspace: Workspace,
    domain_text: str,
    problem_text: str,
    *,
    action_text: str = "",
    result_name: str = DEFAULT_RESULT_FILENAME,
) -> JobFiles:
    """Write the planner inputs into the workspace.

    The domain file is the domain description followed by the action
    descriptions, each newline-terminated. The result path is reserved but
    not created.

    Raises:
        WorkspaceError: If a file cannot be written.
    """
    files = JobFiles(
        domain=workspace.file(DOMAIN_FILENAME),
        problem=workspace.file(PROBLEM_FILENAME),
        result=workspace.file(result_name),
    )

    domain_parts = [f"{domain_text}\n"]
    if action_text:
        domain_parts.append(f"{action_text}\n")

    try:
        files.domain.write_text("".join(domain_parts), encoding="utf-8")
        files.problem.write_text(f"{problem_text}\n", encoding="utf-8")
    except OSError as exc:
        raise WorkspaceError(
            f"Could not write planner inputs to {workspace.path}: {exc}"
        ) from exc
    return files


def _strip_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _strip_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_strip_none(item) for item in value if item is not None]
    if isinstance(value, Path):
        return str(value)
    return value


def write_manifest(workspace: Workspace, payload: dict[str, Any]) -> Path | None:
    """Write ``job.toml`` describing the run. Best-effort."""
    path = workspace.file(MANIFEST_FILENAME)
    try:
        with open(path, "wb") as f:
            tomli_w.dump(_strip_none(payload), f)
    except (OSError, TypeError, ValueError) as exc:
        logger.warning(
            format_log("workspace", workspace.planner, "WARN", f"manifest not written: {exc}")
        )
        return None
    return path
