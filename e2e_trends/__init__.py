"""Run-matrix and trend aggregation for E2E suite reports."""

from __future__ import annotations

from .analysis import ReportAnalysis, SuiteAnalysis, analyze_report
from .classifier import classify, is_flaky_sequence
from .config import AnalysisConfig, load_config
from .errors import ConfigError, E2ETrendsError, ReportError, ReportShapeError
from .export import build_matrix_csv, export_filename
from .io import acquire_report, load_report
from .matrix import build_test_matrix, cells_for_runs
from .models import (
    NOT_RUN,
    Observation,
    Observed,
    RunSummary,
    SeriesPoint,
    SuiteKind,
    TrendClassification,
    WindowStat,
)
from .normalizer import normalize_runs, runs_by_kind
from .series import build_pass_chart, extract_passing_series, merge_series
from .table import ColumnFilter, DateRange, FilterConfig, SortMode, build_table
from .windows import aggregate_windows

__all__ = [
    "AnalysisConfig",
    "ColumnFilter",
    "ConfigError",
    "DateRange",
    "E2ETrendsError",
    "FilterConfig",
    "NOT_RUN",
    "Observation",
    "Observed",
    "ReportAnalysis",
    "ReportError",
    "ReportShapeError",
    "RunSummary",
    "SeriesPoint",
    "SortMode",
    "SuiteAnalysis",
    "SuiteKind",
    "TrendClassification",
    "WindowStat",
    "acquire_report",
    "aggregate_windows",
    "analyze_report",
    "build_matrix_csv",
    "build_pass_chart",
    "build_table",
    "build_test_matrix",
    "cells_for_runs",
    "classify",
    "export_filename",
    "extract_passing_series",
    "is_flaky_sequence",
    "load_config",
    "load_report",
    "merge_series",
    "normalize_runs",
    "runs_by_kind",
]
