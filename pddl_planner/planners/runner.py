"""Shared execution path for external-tool planner plugins.

Every tool plugin runs the same steps:
1. Check the executable is on PATH (before any workspace is created)
2. Create a fresh workspace named after the planner
3. Write the domain and problem files
4. Run the tool as a timed job and harvest its plan candidates
"""

from __future__ import annotations

from pathlib import Path

from pddl_planner.job import ensure_executable, run_job
from pddl_planner.models import PlanCandidates
from pddl_planner.planners.models import ToolPlanner
from pddl_planner.workspace import create_workspace, write_artifacts


def run_planner(
    plugin: ToolPlanner,
    problem: str,
    actions: str,
    domain: str,
    timeout_s: float,
    *,
    workspace_root: Path | None = None,
) -> PlanCandidates:
    """Run a tool planner end to end.

    Args:
        plugin: The tool plugin providing command shape and result layout.
        problem: PDDL problem text.
        actions: PDDL action descriptions appended to the domain file.
        domain: PDDL domain text.
        timeout_s: Wall-clock budget for the tool.
        workspace_root: Parent of the job workspace (default: temp dir).

    Returns:
        Non-empty list of plan candidates.

    Raises:
        PlanningExecutionError: Any job-scoped failure (see ``run_job``).
    """
    ensure_executable(plugin.executable)

    workspace = create_workspace(plugin.name, root=workspace_root)
    files = write_artifacts(
        workspace,
        domain,
        problem,
        action_text=actions,
        result_name=plugin.result_name,
    )

    return run_job(
        plugin.build_command(files),
        workspace,
        plugin.result_spec,
        timeout_s,
        byproducts=plugin.byproducts,
        planner=plugin.name,
    )
