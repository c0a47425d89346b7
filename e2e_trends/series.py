"""Trend series per suite kind and combined chart datasets."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

from .models import ChartRow, DurationPoint, SeriesPoint, SuiteKind, round_half_up
from .normalizer import iter_valid_runs
from .schema import ReportModel, RunRecordModel

__all__ = [
    "extract_passing_series",
    "extract_duration_series",
    "run_duration_minutes",
    "merge_series",
    "build_pass_chart",
    "build_duration_chart",
]

PointT = TypeVar("PointT", SeriesPoint, DurationPoint)


def extract_passing_series(report: ReportModel) -> dict[SuiteKind, tuple[SeriesPoint, ...]]:
    out: dict[SuiteKind, tuple[SeriesPoint, ...]] = {}
    for kind in SuiteKind:
        points = [
            SeriesPoint(
                start=start,
                pass_percent=round_half_up(record.stats.pass_percent),
                run_key=run_key,
            )
            for run_key, start, record in iter_valid_runs(report.runs_for(kind))
        ]
        points.sort(key=lambda point: point.start)
        out[kind] = tuple(points)
    return out


def run_duration_minutes(record: RunRecordModel) -> float:
    """Sum per-test durations (ms); fall back to the run's own duration (s)."""
    total_ms = 0.0
    for result in record.results:
        for test in result.tests:
            total_ms += test.duration or 0.0
    if total_ms > 0:
        return total_ms / 60000
    return (record.stats.duration or 0.0) / 60


def extract_duration_series(report: ReportModel) -> dict[SuiteKind, tuple[DurationPoint, ...]]:
    out: dict[SuiteKind, tuple[DurationPoint, ...]] = {}
    for kind in SuiteKind:
        points = [
            DurationPoint(start=start, minutes=run_duration_minutes(record), run_key=run_key)
            for run_key, start, record in iter_valid_runs(report.runs_for(kind))
        ]
        points.sort(key=lambda point: point.start)
        out[kind] = tuple(points)
    return out


def merge_series(
    series_by_kind: Mapping[SuiteKind, Sequence[PointT]],
    value: Callable[[PointT], float | int],
) -> list[ChartRow]:
    """Join sorted per-kind series on exact timestamps.

    Every distinct ``start`` becomes one row. A kind without a point at exactly
    that instant contributes ``None``; timestamps are never matched to
    neighbours. Inputs must be sorted by ``start``.
    """
    dates = sorted({point.start for points in series_by_kind.values() for point in points})
    cursors = {kind: 0 for kind in series_by_kind}
    rows: list[ChartRow] = []
    for date in dates:
        values: dict[SuiteKind, float | int | None] = {}
        for kind, points in series_by_kind.items():
            index = cursors[kind]
            while index < len(points) and points[index].start < date:
                index += 1
            if index < len(points) and points[index].start == date:
                values[kind] = value(points[index])
                # skip duplicates of this instant; the first one wins
                while index < len(points) and points[index].start == date:
                    index += 1
            else:
                values[kind] = None
            cursors[kind] = index
        rows.append(ChartRow(date=date, values=values))
    return rows


def build_pass_chart(report: ReportModel) -> list[ChartRow]:
    return merge_series(extract_passing_series(report), lambda point: point.pass_percent)


def build_duration_chart(report: ReportModel) -> list[ChartRow]:
    return merge_series(extract_duration_series(report), lambda point: point.minutes)
