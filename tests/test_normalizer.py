from __future__ import annotations

from e2e_trends.io import coerce_report
from e2e_trends.models import RunSummary, SuiteKind
from e2e_trends.normalizer import normalize_runs, runs_by_kind


def test_normalize_runs_drops_unparseable_start(run_factory) -> None:
    report = coerce_report(
        {
            "smokeTests": {
                "b": run_factory("2025-07-02T00:00:00Z", [("t", True)], total=10, passes=7, pass_percent=70),
                "bad": run_factory("yesterday", [("t", True)]),
                "nil": run_factory(None, [("t", True)]),
                "a": run_factory("2025-07-01T00:00:00Z", [("t", False)], total=10, passes=12, pass_percent=100),
            }
        }
    )

    summaries = normalize_runs(report.runs_for(SuiteKind.SMOKE))

    assert [item.key for item in summaries] == ["b", "a"]
    assert summaries[0] == RunSummary(
        key="b", start=1751414400000, total=10, passes=7, fails=3, pass_percent=70
    )
    # fails is floored at zero
    assert summaries[1].fails == 0


def test_runs_by_kind_sorts_ascending(sample_report) -> None:
    by_kind = runs_by_kind(coerce_report(sample_report))

    smoke = by_kind[SuiteKind.SMOKE]
    assert [item.start for item in smoke] == sorted(item.start for item in smoke)
    assert [item.key for item in by_kind[SuiteKind.UI_UAT]] == ["2025-07-02_02-10-04_release_bbbbbb"]
    assert by_kind[SuiteKind.PRICING_OVERRIDE] == []


def test_fractional_pass_percent_is_rounded_half_up(run_factory) -> None:
    report = coerce_report(
        {"smokeTests": {"r": run_factory("2025-07-01T00:00:00Z", [("t", True)], pass_percent=66.5)}}
    )

    (summary,) = normalize_runs(report.runs_for(SuiteKind.SMOKE))

    assert summary.pass_percent == 67


def test_starts_outside_renderable_range_are_dropped(run_factory) -> None:
    report = coerce_report(
        {
            "smokeTests": {
                "year-one": run_factory("0001-01-01T00:00:00+05:00", [("A", True)]),
                "year-ten-thousand": run_factory("9999-12-31T23:00:00-05:00", [("A", True)]),
                "ok": run_factory("2025-07-01T00:00:00Z", [("A", False)]),
            }
        }
    )

    summaries = normalize_runs(report.runs_for(SuiteKind.SMOKE))

    assert [item.key for item in summaries] == ["ok"]
