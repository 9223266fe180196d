import os
import tempfile

import tomli
import tomli_w

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from typing import Any


DEFAULT_TIMEOUT_S = 7.0
DEFAULT_PLANNER = "LAMA"


@dataclass(frozen=True)
class PlanningConfig:
    timeout_s: float = DEFAULT_TIMEOUT_S
    sequential: bool = False
    default_planners: tuple[str, ...] = field(default_factory=lambda: (DEFAULT_PLANNER,))
    # None means default_workspace_root() (temp dir or env override).
    workspace_root: str | None = None


def default_config_path() -> str:
    override = str(os.environ.get("PDDL_PLANNER_CONFIG") or "").strip()
    if override:
        return os.path.expanduser(override)
    return os.path.expanduser("~/.config/pddl-planner/config.toml")


def _coerce(payload: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(PlanningConfig)}
    values = {key: value for key, value in payload.items() if key in known}

    if "timeout_s" in values:
        timeout = values["timeout_s"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ValueError(f"timeout_s must be a number, got {timeout!r}")
        if timeout <= 0:
            raise ValueError(f"timeout_s must be positive, got {timeout!r}")
        values["timeout_s"] = float(timeout)

    if "sequential" in values and not isinstance(values["sequential"], bool):
        raise ValueError(f"sequential must be a boolean, got {values['sequential']!r}")

    if "default_planners" in values:
        planners = values["default_planners"]
        if isinstance(planners, str):
            planners = [planners]
        if not isinstance(planners, list) or not all(
            isinstance(name, str) and name.strip() for name in planners
        ):
            raise ValueError(f"default_planners must be a list of names, got {planners!r}")
        values["default_planners"] = tuple(name.strip() for name in planners)

    if "workspace_root" in values:
        root = str(values["workspace_root"] or "").strip()
        values["workspace_root"] = os.path.expanduser(root) if root else None

    return values


def load_config(path: str | None = None) -> PlanningConfig:
    """Load the planning config from TOML, falling back to defaults.

    Keys live at the top level or under a ``[planning]`` table. Unknown keys
    are ignored; a missing file yields the defaults.

    Raises:
        ValueError: If a known key has an invalid value.
    """
    path = path or default_config_path()
    if not os.path.exists(path):
        return PlanningConfig()
    with open(path, "rb") as f:
        payload = tomli.load(f)
    section = payload.get("planning")
    if isinstance(section, dict):
        payload = section
    return PlanningConfig(**_coerce(payload))


def save_config(path: str, config: PlanningConfig) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    payload = asdict(config)
    payload["default_planners"] = list(config.default_planners)
    if payload.get("workspace_root") is None:
        payload.pop("workspace_root", None)

    fd, tmp_path = tempfile.mkstemp(prefix="config-", suffix=".toml", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            tomli_w.dump({"planning": payload}, f)
        os.replace(tmp_path, path)
    finally:
        try:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
        except OSError:
            pass
