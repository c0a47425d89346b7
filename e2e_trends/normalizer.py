"""Turn raw run records into run summaries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
import logging

from .io import to_epoch_ms
from .models import RunSummary, SuiteKind, round_half_up
from .schema import ReportModel, RunRecordModel

LOGGER = logging.getLogger(__name__)

__all__ = ["iter_valid_runs", "normalize_runs", "runs_by_kind"]


def iter_valid_runs(
    runs: Mapping[str, RunRecordModel],
) -> Iterator[tuple[str, int, RunRecordModel]]:
    """Yield ``(run_key, start_ms, record)`` for runs whose start parses.

    Runs with an unparseable start are skipped without raising.
    """
    for run_key, record in runs.items():
        start = to_epoch_ms(record.stats.start)
        if start is None:
            LOGGER.debug("dropping run %s: unparseable start %r", run_key, record.stats.start)
            continue
        yield run_key, start, record


def normalize_runs(runs: Mapping[str, RunRecordModel]) -> list[RunSummary]:
    summaries: list[RunSummary] = []
    for run_key, start, record in iter_valid_runs(runs):
        stats = record.stats
        summaries.append(
            RunSummary(
                key=run_key,
                start=start,
                total=stats.tests,
                passes=stats.passes,
                fails=max(0, stats.tests - stats.passes),
                pass_percent=round_half_up(stats.pass_percent),
            )
        )
    return summaries


def runs_by_kind(report: ReportModel) -> dict[SuiteKind, list[RunSummary]]:
    """Return each kind's summaries sorted by start time."""
    out: dict[SuiteKind, list[RunSummary]] = {}
    for kind in SuiteKind:
        summaries = normalize_runs(report.runs_for(kind))
        summaries.sort(key=lambda item: item.start)
        out[kind] = summaries
    return out
