"""Pydantic models for plans produced by external planners.

A result file holds one ground action per line in parenthesized form, for
example ``(move b1 l1 l2)``. These models are the common shape every planner
adapter normalizes its output into, and ``parse_plan`` / ``Plan.to_text`` are
the two directions of that file format.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pddl_planner.errors import PlanParseError


# "0.002: (move a b) [1]" as written by temporal planners.
_TIMESTAMP_RE = re.compile(r"^\d+(?:\.\d+)?\s*:\s*")
_DURATION_RE = re.compile(r"\s*\[\s*\d+(?:\.\d+)?\s*\]$")
_BAD_TOKEN_CHARS = set("();")


class PlanStep(BaseModel):
    """One ground action of a plan.

    Attributes:
        operator: Action label (non-empty).
        arguments: Ground argument tokens in call order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    operator: str = Field(min_length=1)
    arguments: tuple[str, ...] = ()

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, v: str) -> str:
        """Reject labels that would not survive a render/parse round trip."""
        if not v.strip() or v != v.strip() or any(ch.isspace() for ch in v):
            raise ValueError(f"Invalid operator label: {v!r}")
        if _BAD_TOKEN_CHARS.intersection(v):
            raise ValueError(f"Invalid operator label: {v!r}")
        return v

    @field_validator("arguments")
    @classmethod
    def validate_arguments(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for token in v:
            if not token or any(ch.isspace() for ch in token):
                raise ValueError(f"Invalid argument token: {token!r}")
            if _BAD_TOKEN_CHARS.intersection(token):
                raise ValueError(f"Invalid argument token: {token!r}")
        return v

    def to_text(self) -> str:
        return "(" + " ".join((self.operator, *self.arguments)) + ")"

    def __str__(self) -> str:
        return self.to_text()


class Plan(BaseModel):
    """Ordered sequence of plan steps; list order is execution order."""

    model_config = ConfigDict(extra="forbid")

    steps: list[PlanStep] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def to_text(self) -> str:
        """Render the plan in result-file form, one step per line."""
        return "".join(f"{step.to_text()}\n" for step in self.steps)

    def __str__(self) -> str:
        return self.to_text()


# Candidates carry no ranking; callers must not treat the first as best.
PlanCandidates = list[Plan]


class PlanResult(BaseModel):
    """A planner name paired with the plan it contributed to a request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    planner: str
    plan: Plan


PlanResultList = list[PlanResult]


class ResultSpec(BaseModel):
    """Which workspace files hold a planner's results.

    Exactly one of ``filename`` (a single fixed file) or ``patterns`` (glob
    patterns, for tools that write one file per alternative plan) is set.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str | None = None
    patterns: tuple[str, ...] = ()

    @model_validator(mode="after")
    def validate_one_source(self) -> "ResultSpec":
        if (self.filename is None) == (not self.patterns):
            raise ValueError("ResultSpec needs exactly one of filename or patterns")
        for name in (self.filename, *self.patterns):
            if name is not None and ("/" in name or not name.strip()):
                raise ValueError(f"Result name must be a plain filename: {name!r}")
        return self

    @classmethod
    def fixed(cls, filename: str) -> "ResultSpec":
        return cls(filename=filename)

    @classmethod
    def matching(cls, *patterns: str) -> "ResultSpec":
        return cls(patterns=tuple(patterns))


def parse_step(line: str, line_number: int | None = None) -> PlanStep:
    """Parse a single ``(operator arg ...)`` line.

    Args:
        line: Line with comments already removed.
        line_number: 1-based line number used in error messages.

    Returns:
        The parsed step.

    Raises:
        PlanParseError: If the line is not a parenthesized token list.
    """
    text = line.strip()
    text = _TIMESTAMP_RE.sub("", text, count=1)
    text = _DURATION_RE.sub("", text, count=1)

    if not (text.startswith("(") and text.endswith(")")):
        raise PlanParseError(f"expected '(operator ...)', got {line.strip()!r}", line_number)

    inner = text[1:-1]
    if "(" in inner or ")" in inner:
        raise PlanParseError(f"nested parentheses in {line.strip()!r}", line_number)

    tokens = inner.split()
    if not tokens:
        raise PlanParseError("empty action", line_number)

    return PlanStep(operator=tokens[0], arguments=tuple(tokens[1:]))


def parse_plan(text: str) -> Plan:
    """Parse result-file text into a Plan.

    Blank lines and ``;`` comments are ignored. A text holding only those
    is the empty plan (the goal already holds in the initial state).

    Raises:
        PlanParseError: If a line is malformed.
    """
    steps: list[PlanStep] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.split(";", 1)[0].strip()
        if not line:
            continue
        steps.append(parse_step(line, number))
    return Plan(steps=steps)
