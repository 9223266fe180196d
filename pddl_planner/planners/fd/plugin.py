from __future__ import annotations

from pathlib import Path

from pddl_planner.models import PlanCandidates, ResultSpec
from pddl_planner.planners.runner import run_planner
from pddl_planner.workspace import JobFiles


DEFAULT_ALIAS = "lama-first"


class FastDownwardPlanner:
    name = "FD"
    executable = "fast-downward"
    result_name = "sas_plan"
    # Anytime aliases number their plans: sas_plan.1, sas_plan.2, ...
    result_spec = ResultSpec.matching("sas_plan", "sas_plan.*")
    byproducts = ("output", "output.sas")

    def __init__(self, alias: str = DEFAULT_ALIAS) -> None:
        self.alias = str(alias or "").strip()

    def build_command(self, files: JobFiles) -> list[str]:
        argv = [self.executable]
        if self.alias:
            argv.extend(["--alias", self.alias])
        argv.extend(["--plan-file", files.result.name, str(files.domain), str(files.problem)])
        if not self.alias:
            argv.extend(["--search", "astar(lmcut())"])
        return argv

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


PLUGIN = FastDownwardPlanner()
