"""Value objects derived from E2E suite reports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import math
from typing import TypeAlias

__all__ = [
    "SuiteKind",
    "RunSummary",
    "SeriesPoint",
    "DurationPoint",
    "ChartRow",
    "Observation",
    "TestMatrix",
    "Observed",
    "NotRun",
    "NOT_RUN",
    "Cell",
    "TrendClassification",
    "WindowStat",
    "SuiteStats",
    "round_half_up",
]


class SuiteKind(str, Enum):
    """Enumerates the suite kinds present in a report."""

    SMOKE = "smokeTests"
    UI_UAT = "uiUatTests"
    PRICING_OVERRIDE = "pricingOverride"

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_TITLES = {
    SuiteKind.SMOKE: "Smoke Tests",
    SuiteKind.UI_UAT: "UI UAT Tests",
    SuiteKind.PRICING_OVERRIDE: "Pricing Override",
}
_LABELS = {
    SuiteKind.SMOKE: "Smoke",
    SuiteKind.UI_UAT: "UI UAT",
    SuiteKind.PRICING_OVERRIDE: "Pricing Override",
}


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Totals of a single run; ``start`` is epoch milliseconds."""

    key: str
    start: int
    total: int
    passes: int
    fails: int
    pass_percent: int


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    start: int
    pass_percent: int
    run_key: str


@dataclass(frozen=True, slots=True)
class DurationPoint:
    start: int
    minutes: float
    run_key: str


@dataclass(frozen=True, slots=True)
class ChartRow:
    """One x-axis position of a combined multi-kind chart."""

    date: int
    values: Mapping[SuiteKind, float | int | None]


@dataclass(frozen=True, slots=True)
class Observation:
    """Outcome of one test title in one run."""

    run_key: str
    start: int
    passed: bool


TestMatrix: TypeAlias = dict[str, tuple[Observation, ...]]


@dataclass(frozen=True, slots=True)
class Observed:
    passed: bool


@dataclass(frozen=True, slots=True)
class NotRun:
    """The test did not appear in the run. Distinct from a failure."""


NOT_RUN = NotRun()

Cell: TypeAlias = Observed | NotRun


@dataclass(frozen=True, slots=True)
class TrendClassification:
    pass_rate: int
    is_flaky: bool
    latest_fail: bool
    new_failure: bool
    recovered: bool


@dataclass(frozen=True, slots=True)
class WindowStat:
    """Pass rate over a trailing window; ``pct`` is ``None`` when there is no data."""

    days: int
    passes: int
    total: int
    count: int
    pct: int | None


@dataclass(frozen=True, slots=True)
class SuiteStats:
    kind: SuiteKind
    run_count: int
    latest: RunSummary | None
    overall_pct: int | None
    windows: tuple[WindowStat, ...]


def round_half_up(value: float) -> int:
    """Round ``x.5`` away from zero for non-negative percentages."""
    return math.floor(value + 0.5)
