from __future__ import annotations

from pathlib import Path

from pddl_planner.models import PlanCandidates, ResultSpec
from pddl_planner.planners.runner import run_planner
from pddl_planner.workspace import JobFiles


class ArvandHerdPlanner:
    name = "ARVANDHERD"
    executable = "arvand-herd-planner"
    result_name = "plan"
    result_spec = ResultSpec.fixed("plan")
    byproducts = ("output", "output.sas")

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


PLUGIN = ArvandHerdPlanner()
