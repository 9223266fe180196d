"""Tests for planner plugin discovery and the built-in plugins."""

import importlib
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from pddl_planner.planners.fd.plugin import FastDownwardPlanner
from pddl_planner.planners.models import PlannerPlugin, ToolPlanner
from pddl_planner.planners.registry import build_registry, discover_planners
from pddl_planner.workspace import JobFiles

BUILTIN_NAMES = {"ARVANDHERD", "BFSF", "CEDALION", "FD", "LAMA", "RANDWARD", "UNIFORM"}


def _files(result: str = "plan") -> JobFiles:
    root = Path("/tmp/ws")
    return JobFiles(domain=root / "domain.pddl", problem=root / "problem.pddl", result=root / result)


def test_discover_finds_builtin_planners() -> None:
    """Test every plugin folder is discovered under its declared name."""
    registry = discover_planners()

    assert set(registry) == BUILTIN_NAMES
    for name, plugin in registry.items():
        assert plugin.name == name
        assert isinstance(plugin, PlannerPlugin)
        assert isinstance(plugin, ToolPlanner)


def test_discover_returns_fresh_mapping() -> None:
    first = discover_planners()
    first.pop("LAMA")

    assert "LAMA" in discover_planners()


def test_builtin_plugins_share_command_shape() -> None:
    """Test tools are invoked as <exe> <domain> <problem> <result>."""
    registry = discover_planners()

    for name in BUILTIN_NAMES - {"FD"}:
        plugin = registry[name]
        argv = plugin.build_command(_files(plugin.result_name))
        assert argv == [plugin.executable, "/tmp/ws/domain.pddl", "/tmp/ws/problem.pddl", "plan"]


def test_builtin_plugins_never_delete_their_results() -> None:
    registry = discover_planners()

    for plugin in registry.values():
        assert plugin.result_name not in plugin.byproducts
        assert "domain.pddl" not in plugin.byproducts
        assert "problem.pddl" not in plugin.byproducts


def test_fast_downward_alias() -> None:
    argv = FastDownwardPlanner().build_command(_files("sas_plan"))

    assert argv == [
        "fast-downward",
        "--alias",
        "lama-first",
        "--plan-file",
        "sas_plan",
        "/tmp/ws/domain.pddl",
        "/tmp/ws/problem.pddl",
    ]


def test_fast_downward_without_alias_uses_explicit_search() -> None:
    argv = FastDownwardPlanner(alias="").build_command(_files("sas_plan"))

    assert "--alias" not in argv
    assert argv[-2:] == ["--search", "astar(lmcut())"]


class _Named:
    executable = "true"

    def __init__(self, name: str) -> None:
        self.name = name

    def plan(self, problem, actions, domain, timeout_s, *, workspace_root=None):
        return []


def test_build_registry_keeps_case() -> None:
    registry = build_registry([_Named("Lama"), _Named("LAMA")])

    assert set(registry) == {"Lama", "LAMA"}


@pytest.mark.parametrize("names", [["A", "A"], [""], [" padded "]])
def test_build_registry_rejects_bad_names(names: list[str]) -> None:
    with pytest.raises(ValueError):
        build_registry([_Named(name) for name in names])


def test_discover_skips_padded_plugin_name() -> None:
    """Test discovery applies the same name rule as build_registry."""
    real_import = importlib.import_module

    def fake_import(name: str):
        if name.endswith(".lama.plugin"):
            return SimpleNamespace(PLUGIN=_Named(" LAMA "))
        return real_import(name)

    with patch("pddl_planner.planners.registry.importlib.import_module", side_effect=fake_import):
        registry = discover_planners()

    assert set(registry) == BUILTIN_NAMES - {"LAMA"}
    assert " LAMA " not in registry
