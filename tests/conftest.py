"""Shared pytest fixtures: repo root on sys.path and report builders."""

from __future__ import annotations

from collections.abc import Callable, Iterable
import datetime as dt
from pathlib import Path
import sys
from typing import Any

import pytest

_REPO_ROOT = Path(__file__).resolve().parent
if _REPO_ROOT.name == "tests":
    _REPO_ROOT = _REPO_ROOT.parent

_ROOT_STR = str(_REPO_ROOT)
if _ROOT_STR not in sys.path:
    sys.path.insert(0, _ROOT_STR)

NOW = dt.datetime(2025, 7, 31, 12, 0, tzinfo=dt.UTC)

RunFactory = Callable[..., dict[str, Any]]


def make_run(
    start: str | dt.datetime | None,
    tests: Iterable[tuple[str, bool]] = (),
    *,
    total: int | None = None,
    passes: int | None = None,
    pass_percent: float | None = None,
    duration: float | None = None,
    test_duration: float | None = None,
) -> dict[str, Any]:
    """Build a raw run record shaped like a mochawesome report."""
    outcomes = list(tests)
    if isinstance(start, dt.datetime):
        start = start.isoformat().replace("+00:00", "Z")
    total = len(outcomes) if total is None else total
    passes = sum(1 for _, passed in outcomes if passed) if passes is None else passes
    if pass_percent is None:
        pass_percent = round(100 * passes / max(1, total))
    stats: dict[str, Any] = {
        "suites": 1,
        "tests": total,
        "passes": passes,
        "pending": 0,
        "start": start,
        "passPercent": pass_percent,
    }
    if duration is not None:
        stats["duration"] = duration
    return {
        "stats": stats,
        "results": [
            {
                "uuid": "root",
                "title": "Root Suite",
                "beforeHooks": [],
                "tests": [
                    {
                        "title": title,
                        "fullTitle": title,
                        "pass": passed,
                        "fail": not passed,
                        "duration": test_duration,
                    }
                    for title, passed in outcomes
                ],
                "suites": [],
            }
        ],
    }


@pytest.fixture
def now() -> dt.datetime:
    return NOW


@pytest.fixture
def run_factory() -> RunFactory:
    return make_run


@pytest.fixture
def sample_report() -> dict[str, Any]:
    return {
        "smokeTests": {
            "2025-07-01_02-10-04_main_aaaaaa": make_run(
                "2025-07-01T02:10:04.000Z",
                [("Smoke: Login works", True), ("Smoke: Logout", True)],
            ),
            "2025-07-02_02-10-04_main_aaaaaa": make_run(
                "2025-07-02T02:10:04.000Z",
                [("Smoke: Login works", False), ("Smoke: Logout", True)],
            ),
            "2025-07-03_02-10-04_main_aaaaaa": make_run(
                "2025-07-03T02:10:04.000Z",
                [("Smoke: Login works", True), ("Smoke: Cart persists", False)],
            ),
        },
        "uiUatTests": {
            "2025-07-02_02-10-04_release_bbbbbb": make_run(
                "2025-07-02T02:10:04.000Z",
                [("UAT: Place order", True), ("UAT: Apply coupon", False)],
            ),
            "broken": make_run("not a date", [("UAT: Place order", False)]),
        },
        "pricingOverride": {},
    }
