from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Iterable

from pddl_planner.log_format import format_log
from pddl_planner.planners.models import PlannerPlugin


logger = logging.getLogger(__name__)


def _is_valid_name(name: str) -> bool:
    return bool(name.strip()) and name == name.strip()


def build_registry(plugins: Iterable[PlannerPlugin]) -> dict[str, PlannerPlugin]:
    """Key plugins by their declared name.

    Names are used exactly as declared (case-sensitive).

    Raises:
        ValueError: If a plugin has no name or two plugins share one.
    """
    registry: dict[str, PlannerPlugin] = {}
    for plugin in plugins:
        name = str(getattr(plugin, "name", "") or "")
        if not _is_valid_name(name):
            raise ValueError(f"planner plugin has invalid name: {name!r}")
        if name in registry:
            raise ValueError(f"duplicate planner plugin name: {name}")
        registry[name] = plugin
    return registry


def discover_planners() -> dict[str, PlannerPlugin]:
    """Import every ``planners/<folder>/plugin.py`` and collect its PLUGIN."""
    registry: dict[str, PlannerPlugin] = {}
    root = Path(__file__).resolve().parent
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            continue
        if entry.name.startswith("__") or entry.name == "tests":
            continue
        plugin_path = entry / "plugin.py"
        if not plugin_path.is_file():
            continue

        module_name = f"{__package__}.{entry.name}.plugin"
        try:
            module = importlib.import_module(module_name)
        except Exception as exc:
            logger.warning(
                format_log("registry", entry.name, "WARN", f"plugin import failed: {module_name} ({exc})")
            )
            continue

        plugin = getattr(module, "PLUGIN", None)
        if plugin is None or not isinstance(plugin, PlannerPlugin):
            logger.warning(
                format_log("registry", entry.name, "WARN", f"missing or invalid PLUGIN export: {module_name}")
            )
            continue

        name = str(getattr(plugin, "name", "") or "")
        if not _is_valid_name(name):
            logger.warning(
                format_log("registry", entry.name, "WARN", f"plugin has invalid name: {module_name}")
            )
            continue
        if name in registry:
            logger.warning(
                format_log("registry", entry.name, "WARN", f"duplicate plugin name {name!r} from {module_name}")
            )
            continue
        registry[name] = plugin
    return registry
