"""Plan generation with external PDDL planners.

Runs one or more external planning engines on a PDDL domain and problem and
normalizes their result files into a common plan shape. ``Planning`` is the
entry point; planner plugins live in ``pddl_planner.planners``.
"""

from pddl_planner.config import PlanningConfig, load_config
from pddl_planner.errors import (
    UNKNOWN_PLANNER_PREFIX,
    ExecutableNotFoundError,
    NoPlanProducedError,
    PlanningError,
    PlanningExecutionError,
    PlanningTimeoutError,
    PlanningValidationError,
    PlanParseError,
    UnknownPlannerError,
    WorkspaceError,
)
from pddl_planner.models import (
    Plan,
    PlanCandidates,
    PlanResult,
    PlanResultList,
    PlanStep,
    ResultSpec,
    parse_plan,
)
from pddl_planner.planning import Planning

__all__ = [
    "ExecutableNotFoundError",
    "NoPlanProducedError",
    "Plan",
    "PlanCandidates",
    "PlanParseError",
    "PlanResult",
    "PlanResultList",
    "PlanStep",
    "Planning",
    "PlanningConfig",
    "PlanningError",
    "PlanningExecutionError",
    "PlanningTimeoutError",
    "PlanningValidationError",
    "ResultSpec",
    "UNKNOWN_PLANNER_PREFIX",
    "UnknownPlannerError",
    "WorkspaceError",
    "load_config",
    "parse_plan",
]
