"""Rendering of an analysis into JSON payloads and a Markdown snapshot."""

from __future__ import annotations

from collections.abc import Iterable
import datetime as dt
from typing import Any

from .analysis import ReportAnalysis, SuiteAnalysis
from .io import to_iso
from .models import Cell, ChartRow, Observed, RunSummary, WindowStat, round_half_up

__all__ = [
    "format_percentage",
    "format_minutes",
    "build_json_payload",
    "render_markdown",
]


def format_percentage(value: int | None) -> str:
    if value is None:
        return "N/A"
    return f"{value}%"


def format_minutes(value: float | None) -> str:
    """``75.2`` -> ``1h 15m``; values under an hour render as ``42m``."""
    if value is None:
        return ""
    hours, minutes = divmod(round_half_up(max(0.0, float(value))), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _cell_json(cell: Cell) -> bool | None:
    if isinstance(cell, Observed):
        return cell.passed
    return None


def _run_json(run: RunSummary) -> dict[str, Any]:
    return {
        "key": run.key,
        "start": to_iso(run.start),
        "total": run.total,
        "passes": run.passes,
        "fails": run.fails,
        "pass_percent": run.pass_percent,
    }


def _window_json(window: WindowStat) -> dict[str, Any]:
    return {
        "days": window.days,
        "pct": window.pct,
        "passes": window.passes,
        "total": window.total,
        "count": window.count,
    }


def _chart_json(rows: Iterable[ChartRow]) -> list[dict[str, Any]]:
    return [
        {"date": to_iso(row.date), **{kind.value: value for kind, value in row.values.items()}}
        for row in rows
    ]


def _suite_json(suite: SuiteAnalysis) -> dict[str, Any]:
    stats = suite.stats
    return {
        "kind": suite.kind.value,
        "title": suite.title,
        "run_count": stats.run_count,
        "overall_pct": stats.overall_pct,
        "latest": _run_json(stats.latest) if stats.latest else None,
        "windows": [_window_json(window) for window in stats.windows],
        "columns": [run.key for run in suite.table.runs],
        "rows": [
            {
                "title": row.title,
                "cells": [_cell_json(cell) for cell in row.cells],
                "pass_rate": row.classification.pass_rate,
                "flaky": row.classification.is_flaky,
                "latest_fail": row.classification.latest_fail,
                "new_failure": row.classification.new_failure,
                "recovered": row.classification.recovered,
            }
            for row in suite.table.rows
        ],
    }


def build_json_payload(analysis: ReportAnalysis) -> dict[str, Any]:
    return {
        "generated_at": analysis.generated_at.isoformat().replace("+00:00", "Z"),
        "suites": [_suite_json(suite) for suite in analysis.suites],
        "pass_chart": _chart_json(analysis.pass_chart),
        "duration_chart": _chart_json(analysis.duration_chart),
    }


def _latest_duration(analysis: ReportAnalysis, suite: SuiteAnalysis) -> str:
    latest = suite.stats.latest
    if latest is None:
        return "-"
    for row in analysis.duration_chart:
        if row.date == latest.start:
            return format_minutes(row.values.get(suite.kind)) or "-"
    return "-"


def _format_latest(run: RunSummary | None) -> str:
    if run is None:
        return "No runs yet"
    return f"{to_iso(run.start)}, {run.passes}/{run.total} passed ({run.pass_percent}%)"


def _unstable_lines(suite: SuiteAnalysis, limit: int) -> list[str]:
    header = "| Test | Pass Rate | Flaky | Latest | Transition |"
    divider = "|------|----------:|:-----:|:------:|------------|"
    rows = [
        row
        for row in suite.table.rows
        if row.classification.is_flaky or row.classification.latest_fail
    ]
    if not rows:
        return ["No unstable tests in scope."]
    lines = [header, divider]
    for row in rows[:limit]:
        trend = row.classification
        transition = "new failure" if trend.new_failure else "recovered" if trend.recovered else "-"
        lines.append(
            "| {title} | {rate}% | {flaky} | {latest} | {transition} |".format(
                title=row.title.replace("|", "\\|"),
                rate=trend.pass_rate,
                flaky="yes" if trend.is_flaky else "no",
                latest="fail" if trend.latest_fail else "pass",
                transition=transition,
            )
        )
    return lines


def render_markdown(analysis: ReportAnalysis, *, limit: int = 10) -> list[str]:
    today: dt.date = analysis.generated_at.date()
    lines: list[str] = [
        f"# E2E Quality Snapshot - {today.isoformat()}",
        "",
    ]
    for suite in analysis.suites:
        stats = suite.stats
        lines.extend(
            [
                f"## {suite.title}",
                "",
                f"- Runs: {stats.run_count}",
                f"- Latest: {_format_latest(stats.latest)}",
                f"- Latest duration: {_latest_duration(analysis, suite)}",
                f"- Overall: {format_percentage(stats.overall_pct)}",
            ]
        )
        for window in stats.windows:
            lines.append(
                f"- Last {window.days}d: {format_percentage(window.pct)} ({window.count} runs)"
            )
        lines.extend(["", *_unstable_lines(suite, limit), ""])
    return lines
