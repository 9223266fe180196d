"""
Multi-planner orchestration.

Fans one planning request out to several registered planners, either one
after the other on the calling thread or concurrently with one worker thread
per planner, and aggregates the plans they produce. A planner that fails in
any way simply contributes no result; only request validation errors reach
the caller.
"""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from pddl_planner.config import PlanningConfig
from pddl_planner.errors import PlanningExecutionError, UnknownPlannerError
from pddl_planner.log_format import format_log
from pddl_planner.models import PlanResult, PlanResultList
from pddl_planner.planners.models import PlannerPlugin
from pddl_planner.planners.registry import build_registry, discover_planners

logger = logging.getLogger(__name__)


class Planning:
    """Registry of planners plus the domain descriptions to plan against.

    Lifecycle: construct, set one or more domain descriptions, then call
    ``plan`` any number of times. The registry is fixed at construction.
    """

    def __init__(
        self,
        planners: Iterable[PlannerPlugin] | None = None,
        *,
        config: PlanningConfig | None = None,
    ) -> None:
        self.config = config or PlanningConfig()
        registry = (
            discover_planners() if planners is None else build_registry(planners)
        )
        self._planners: Mapping[str, PlannerPlugin] = MappingProxyType(registry)
        self._domain_descriptions: dict[str, str] = {}
        self._action_descriptions: dict[str, str] = {}

    def set_domain_description(self, name: str, description: str) -> None:
        self._domain_descriptions[name] = description

    def set_action_description(self, name: str, description: str) -> None:
        self._action_descriptions[name] = description

    def domain_text(self) -> str:
        return "\n".join(self._domain_descriptions.values())

    def action_text(self) -> str:
        return "\n".join(self._action_descriptions.values())

    def get_planners(self) -> Mapping[str, PlannerPlugin]:
        return self._planners

    def get_available_planners(self) -> set[str]:
        """Registered planners whose executable can be found on PATH."""
        return {
            name
            for name, plugin in self._planners.items()
            if shutil.which(getattr(plugin, "executable", "") or name) is not None
        }

    def resolve(self, planner_names: Iterable[str]) -> list[tuple[str, PlannerPlugin]]:
        """Resolve every name up front, collapsing duplicates.

        Raises:
            UnknownPlannerError: For the first name not in the registry.
        """
        if isinstance(planner_names, str):
            planner_names = [planner_names]
        resolved: list[tuple[str, PlannerPlugin]] = []
        for name in sorted(set(planner_names)):
            plugin = self._planners.get(name)
            if plugin is None:
                raise UnknownPlannerError(name)
            resolved.append((name, plugin))
        return resolved

    def plan(
        self,
        problem: str,
        planner_names: Iterable[str],
        sequential: bool | None = None,
        timeout_s: float | None = None,
    ) -> PlanResultList:
        """Run the requested planners on ``problem``.

        Args:
            problem: PDDL problem text.
            planner_names: Planner names; duplicates are collapsed.
            sequential: Run on the calling thread one at a time (default: config).
            timeout_s: Per-planner wall-clock budget (default: config).

        Returns:
            One (planner, first candidate) result per planner that succeeded,
            in completion order (concurrent) or name order (sequential).

        Raises:
            UnknownPlannerError: If any name is unknown; nothing is run.
            ValueError: If ``timeout_s`` is not positive.
        """
        if sequential is None:
            sequential = self.config.sequential
        if timeout_s is None:
            timeout_s = self.config.timeout_s
        if timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {timeout_s!r}")

        jobs = self.resolve(planner_names)
        if not jobs:
            return []

        domain = self.domain_text()
        actions = self.action_text()
        if not domain.strip():
            logger.warning(format_log("planning", "none", "WARN", "no domain description set"))

        workspace_root = (
            Path(self.config.workspace_root) if self.config.workspace_root else None
        )

        def run_one(name: str, plugin: PlannerPlugin) -> PlanResult | None:
            return _run_planner(
                name, plugin, problem, actions, domain, timeout_s, workspace_root
            )

        results: PlanResultList = []
        if sequential:
            for name, plugin in jobs:
                result = run_one(name, plugin)
                if result is not None:
                    results.append(result)
            return results

        with ThreadPoolExecutor(
            max_workers=len(jobs), thread_name_prefix="planner"
        ) as executor:
            futures = [executor.submit(run_one, name, plugin) for name, plugin in jobs]
            # Only this thread touches ``results``.
            for future in as_completed(futures):
                result = future.result()
                if result is not None:
                    results.append(result)
        return results


def _run_planner(
    name: str,
    plugin: PlannerPlugin,
    problem: str,
    actions: str,
    domain: str,
    timeout_s: float,
    workspace_root: Path | None,
) -> PlanResult | None:
    try:
        candidates = plugin.plan(
            problem, actions, domain, timeout_s, workspace_root=workspace_root
        )
    except PlanningExecutionError as exc:
        logger.warning(format_log("planning", name, "WARN", f"no result: {exc}"))
        return None
    except Exception:
        logger.exception(format_log("planning", name, "ERROR", "planner crashed"))
        return None

    if not candidates:
        logger.warning(format_log("planning", name, "WARN", "no plan candidates returned"))
        return None

    logger.info(
        format_log("planning", name, "INFO", f"{len(candidates)} candidate(s), first has {len(candidates[0])} step(s)")
    )
    return PlanResult(planner=name, plan=candidates[0])
