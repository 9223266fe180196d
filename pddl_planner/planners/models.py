from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pddl_planner.models import PlanCandidates, ResultSpec
from pddl_planner.workspace import JobFiles


@runtime_checkable
class PlannerPlugin(Protocol):
    """Folder-based planner plugin contract.

    ``name`` is the registry key and the label of every result the planner
    contributes. ``plan`` must be safe to call from several threads at once;
    each call gets its own workspace.
    """

    name: str
    executable: str

    def plan(
        self,
        problem: str,
        actions: str,
        domain: str,
        timeout_s: float,
        *,
        workspace_root: Path | None = None,
    ) -> PlanCandidates: ...


@runtime_checkable
class ToolPlanner(PlannerPlugin, Protocol):
    """A planner backed by one external executable.

    Tools differ only in their command shape, where they write results and
    which auxiliary files they leave behind.
    """

    result_name: str
    result_spec: ResultSpec
    byproducts: tuple[str, ...]

    def build_command(self, files: JobFiles) -> list[str]: ...
