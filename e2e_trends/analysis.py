"""Full analysis pass over one acquired report."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import datetime as dt
import logging

from .config import AnalysisConfig
from .io import coerce_report, datetime_to_epoch_ms
from .matrix import build_test_matrix
from .models import ChartRow, Observation, RunSummary, SuiteKind, SuiteStats
from .normalizer import runs_by_kind
from .schema import ReportModel
from .series import build_duration_chart, build_pass_chart
from .table import FilterConfig, TableView, build_table
from .windows import suite_stats

LOGGER = logging.getLogger(__name__)

__all__ = ["SuiteAnalysis", "ReportAnalysis", "analyze_suite", "analyze_report"]


@dataclass(frozen=True)
class SuiteAnalysis:
    kind: SuiteKind
    title: str
    runs: tuple[RunSummary, ...]
    matrix: Mapping[str, tuple[Observation, ...]]
    stats: SuiteStats
    table: TableView


@dataclass(frozen=True)
class ReportAnalysis:
    generated_at: dt.datetime
    suites: tuple[SuiteAnalysis, ...]
    pass_chart: tuple[ChartRow, ...]
    duration_chart: tuple[ChartRow, ...]

    def suite(self, kind: SuiteKind) -> SuiteAnalysis:
        for item in self.suites:
            if item.kind is kind:
                return item
        raise KeyError(kind)


def analyze_suite(
    report: ReportModel,
    kind: SuiteKind,
    runs: list[RunSummary],
    *,
    now: dt.datetime,
    config: AnalysisConfig,
    filters: FilterConfig | None = None,
) -> SuiteAnalysis:
    matrix = build_test_matrix(report.runs_for(kind))
    table = build_table(runs, matrix, filters or config.filter, config.timezone)
    return SuiteAnalysis(
        kind=kind,
        title=config.title_for(kind),
        runs=tuple(runs),
        matrix=matrix,
        stats=suite_stats(kind, runs, datetime_to_epoch_ms(now), config.windows),
        table=table,
    )


def analyze_report(
    report: ReportModel | Mapping[str, object],
    *,
    now: dt.datetime,
    config: AnalysisConfig | None = None,
    filters: Mapping[SuiteKind, FilterConfig] | None = None,
) -> ReportAnalysis:
    """Derive every structure from scratch.

    ``filters`` overrides the configured filter per suite kind. The result
    only depends on the arguments, so identical input yields equal output.
    """
    report = coerce_report(report)
    config = config or AnalysisConfig()
    filters = filters or {}
    summaries = runs_by_kind(report)
    suites = tuple(
        analyze_suite(
            report,
            kind,
            summaries[kind],
            now=now,
            config=config,
            filters=filters.get(kind),
        )
        for kind in SuiteKind
    )
    for suite in suites:
        LOGGER.info(
            "%s: %d runs, %d tests, %d rows shown",
            suite.kind.value,
            suite.stats.run_count,
            len(suite.matrix),
            len(suite.table.rows),
        )
    return ReportAnalysis(
        generated_at=now,
        suites=suites,
        pass_chart=tuple(build_pass_chart(report)),
        duration_chart=tuple(build_duration_chart(report)),
    )
