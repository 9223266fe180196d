"""Run one external planner as a timed subprocess job.

A job is bound to a workspace: the planner runs with the workspace as its
working directory, writes its result file(s) there, and the runner parses
those files into plan candidates once the process exits. A job that exceeds
its wall-clock budget is killed together with any children it spawned, and
whatever it left behind is not parsed.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from pydantic import ValidationError

from pddl_planner.errors import (
    ExecutableNotFoundError,
    NoPlanProducedError,
    PlanningTimeoutError,
    PlanParseError,
    WorkspaceError,
)
from pddl_planner.log_format import format_log
from pddl_planner.models import Plan, PlanCandidates, ResultSpec, parse_plan
from pddl_planner.workspace import (
    DOMAIN_FILENAME,
    LOG_FILENAME,
    MANIFEST_FILENAME,
    PROBLEM_FILENAME,
    Workspace,
    write_manifest,
)

logger = logging.getLogger(__name__)

# Files the runner itself owns; never treated as results or byproducts.
RESERVED_FILENAMES = frozenset(
    {DOMAIN_FILENAME, PROBLEM_FILENAME, LOG_FILENAME, MANIFEST_FILENAME}
)


def ensure_executable(executable: str) -> str:
    """Resolve an executable on PATH.

    Returns:
        The resolved path.

    Raises:
        ExecutableNotFoundError: If the executable cannot be found.
    """
    resolved = shutil.which(executable)
    if resolved is None:
        raise ExecutableNotFoundError(executable)
    return resolved


def _kill_process_tree(process: subprocess.Popen[bytes]) -> None:
    # Front-end scripts spawn the search as a child; kill the whole group.
    if os.name == "posix":
        try:
            os.killpg(process.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            return
        except OSError:
            pass
    try:
        process.kill()
    except ProcessLookupError:
        pass


def collect_result_files(
    directory: Path, spec: ResultSpec, *, exclude: Iterable[str] = ()
) -> list[Path]:
    """Return the result files present in ``directory``, sorted by name."""
    excluded = RESERVED_FILENAMES.union(exclude)

    if spec.filename is not None:
        path = directory / spec.filename
        return [path] if path.is_file() else []

    found: dict[str, Path] = {}
    for pattern in spec.patterns:
        for path in directory.glob(pattern):
            if path.name in excluded or not path.is_file():
                continue
            found[path.name] = path
    return [found[name] for name in sorted(found)]


def parse_result_files(paths: Sequence[Path], *, planner: str = "none") -> PlanCandidates:
    """Parse each result file independently, skipping the ones that fail."""
    candidates: PlanCandidates = []
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
            plan: Plan = parse_plan(text)
        except (OSError, PlanParseError, ValidationError) as exc:
            logger.warning(
                format_log("job", planner, "WARN", f"skipping result {path.name}: {exc}")
            )
            continue
        candidates.append(plan)
    return candidates


def cleanup_byproducts(
    directory: Path, names: Iterable[str], *, protected: Iterable[str] = ()
) -> list[str]:
    """Delete known byproduct files. Best-effort; returns the removed names."""
    keep = RESERVED_FILENAMES.union(protected)
    removed: list[str] = []
    for name in names:
        if not name or "/" in name or name in (".", ".."):
            logger.warning(format_log("job", "cleanup", "WARN", f"refusing to remove {name!r}"))
            continue
        if name in keep:
            continue
        path = directory / name
        if not path.exists() and not path.is_symlink():
            continue
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            logger.warning(format_log("job", "cleanup", "WARN", f"could not remove {path}: {exc}"))
            continue
        removed.append(name)
    return removed


def run_job(
    argv: Sequence[str],
    workspace: Workspace,
    result_spec: ResultSpec,
    timeout_s: float,
    *,
    byproducts: Sequence[str] = (),
    planner: str | None = None,
) -> PlanCandidates:
    """Run a planner command in ``workspace`` and harvest its plans.

    Args:
        argv: Command line; ``argv[0]`` is resolved on PATH.
        workspace: Workspace the process runs in and writes results to.
        result_spec: Which files in the workspace are results.
        timeout_s: Wall-clock budget for the process.
        byproducts: Auxiliary files removed after a successful parse.
        planner: Name used in logs and the manifest (default: workspace planner).

    Returns:
        Non-empty list of plan candidates.

    Raises:
        ExecutableNotFoundError: If the executable is not on PATH or cannot be run.
        PlanningTimeoutError: If the process outlives ``timeout_s``.
        NoPlanProducedError: If no result file parses into a plan.
        WorkspaceError: If the output log cannot be opened.
    """
    if not argv:
        raise ValueError("argv must not be empty")
    if timeout_s <= 0:
        raise ValueError(f"timeout_s must be positive, got {timeout_s!r}")

    name = planner or workspace.planner
    ensure_executable(argv[0])

    manifest: dict[str, object] = {
        "planner": name,
        "argv": [str(arg) for arg in argv],
        "timeout_s": float(timeout_s),
        "started_at": datetime.now().isoformat(timespec="seconds"),
    }

    def finish(status: str, **extra: object) -> None:
        manifest.update(status=status, elapsed_s=round(time.monotonic() - started, 3))
        manifest.update(extra)
        write_manifest(workspace, manifest)

    try:
        log_file = open(workspace.file(LOG_FILENAME), "wb")
    except OSError as exc:
        raise WorkspaceError(f"Could not open planner log in {workspace.path}: {exc}") from exc

    logger.info(format_log("job", name, "INFO", f"starting: {' '.join(manifest['argv'])}"))
    started = time.monotonic()

    with log_file:
        try:
            process = subprocess.Popen(
                list(argv),
                cwd=str(workspace.path),
                stdin=subprocess.DEVNULL,
                stdout=log_file,
                stderr=subprocess.STDOUT,
                start_new_session=os.name == "posix",
            )
        except FileNotFoundError as exc:
            raise ExecutableNotFoundError(str(argv[0])) from exc
        except OSError as exc:
            # Resolved on PATH but not runnable (permissions, exec format).
            raise ExecutableNotFoundError(str(argv[0]), exc.strerror or str(exc)) from exc

        try:
            exit_code = process.wait(timeout=timeout_s)
        except subprocess.TimeoutExpired:
            _kill_process_tree(process)
            process.wait()
            finish("timeout")
            logger.warning(
                format_log("job", name, "WARN", f"killed after {timeout_s:g}s timeout")
            )
            raise PlanningTimeoutError(timeout_s, name) from None
        except BaseException:
            _kill_process_tree(process)
            process.wait()
            raise

    if exit_code != 0:
        logger.warning(format_log("job", name, "WARN", f"exited with code {exit_code}"))

    exclude = set(byproducts)
    result_files = collect_result_files(workspace.path, result_spec, exclude=exclude)
    candidates = parse_result_files(result_files, planner=name)

    if not candidates:
        finish("no_plan", exit_code=exit_code, result_files=[p.name for p in result_files])
        raise NoPlanProducedError(
            f"planner {name} produced no parseable plan "
            f"(exit code {exit_code}, {len(result_files)} result file(s))"
        )

    protected = {p.name for p in result_files}
    if result_spec.filename is not None:
        protected.add(result_spec.filename)
    removed = cleanup_byproducts(workspace.path, byproducts, protected=protected)

    finish(
        "ok",
        exit_code=exit_code,
        result_files=[p.name for p in result_files],
        removed_byproducts=removed,
        candidates=len(candidates),
    )
    logger.info(
        format_log("job", name, "INFO", f"{len(candidates)} plan candidate(s) in {workspace.path}")
    )
    return candidates
