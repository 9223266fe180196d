"""
Error types for plan generation.

Validation errors abort a whole planning request before any planner runs.
Execution errors are scoped to a single planner job and are absorbed by the
orchestrator.
"""

from __future__ import annotations


UNKNOWN_PLANNER_PREFIX = "pddl_planner: unknown planner "


class PlanningError(RuntimeError):
    """Base class for all plan generation errors."""


class PlanningValidationError(PlanningError):
    """Request is invalid; nothing was run."""


class UnknownPlannerError(PlanningValidationError):
    """A requested planner name is not in the registry.

    The message always starts with ``UNKNOWN_PLANNER_PREFIX`` so callers that
    only see the text can still recognize the condition.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{UNKNOWN_PLANNER_PREFIX}'{name}' is not registered")


class PlanningExecutionError(PlanningError):
    """A single planner job failed."""


class ExecutableNotFoundError(PlanningExecutionError):
    def __init__(self, executable: str, reason: str | None = None) -> None:
        self.executable = executable
        self.reason = reason
        if reason:
            super().__init__(f"Could not run `{executable}`: {reason}")
        else:
            super().__init__(f"Could not find `{executable}` in PATH.")


class PlanningTimeoutError(PlanningExecutionError):
    def __init__(self, timeout_s: float, planner: str | None = None) -> None:
        self.timeout_s = timeout_s
        self.planner = planner
        who = f"planner {planner}" if planner else "planner job"
        super().__init__(f"{who} timed out after {timeout_s:g}s")


class NoPlanProducedError(PlanningExecutionError):
    """The job finished but no result file could be parsed into a plan."""


class WorkspaceError(PlanningExecutionError):
    """The job workspace could not be created or written."""


class PlanParseError(PlanningError):
    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
