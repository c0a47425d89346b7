"""Per-test pass/fail history across runs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .models import NOT_RUN, Cell, Observation, Observed, RunSummary, SuiteKind
from .normalizer import iter_valid_runs
from .schema import ReportModel, RunRecordModel

__all__ = ["build_test_matrix", "matrix_by_kind", "cells_for_runs"]


def build_test_matrix(runs: Mapping[str, RunRecordModel]) -> dict[str, tuple[Observation, ...]]:
    """Group every test outcome by title and order each history by run start.

    Tests sharing a title are one logical test, whichever file they come from.
    A title only gets observations for the runs it appeared in.
    """
    grouped: dict[str, list[Observation]] = {}
    for run_key, start, record in iter_valid_runs(runs):
        for result in record.results:
            for test in result.tests:
                bucket = grouped.get(test.title)
                if bucket is None:
                    bucket = []
                    grouped[test.title] = bucket
                bucket.append(Observation(run_key=run_key, start=start, passed=test.passed))
    matrix: dict[str, tuple[Observation, ...]] = {}
    for title, observations in grouped.items():
        observations.sort(key=lambda item: item.start)
        matrix[title] = tuple(observations)
    return matrix


def matrix_by_kind(report: ReportModel) -> dict[SuiteKind, dict[str, tuple[Observation, ...]]]:
    return {kind: build_test_matrix(report.runs_for(kind)) for kind in SuiteKind}


def cells_for_runs(
    observations: Sequence[Observation], runs: Sequence[RunSummary]
) -> tuple[Cell, ...]:
    """Project a test's history onto the given run columns."""
    by_run: dict[str, bool] = {}
    for observation in observations:
        by_run[observation.run_key] = observation.passed
    cells: list[Cell] = []
    for run in runs:
        passed = by_run.get(run.key)
        cells.append(NOT_RUN if passed is None else Observed(passed))
    return tuple(cells)
