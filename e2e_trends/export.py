"""CSV export of a suite's full run matrix."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import csv
import io
import logging
from pathlib import Path
import re

from .io import to_iso
from .models import Observation, RunSummary

LOGGER = logging.getLogger(__name__)

__all__ = ["build_matrix_csv", "export_filename", "write_matrix_csv"]

_WHITESPACE_RE = re.compile(r"\s+")


def _cell_text(passed: bool | None) -> str:
    if passed is None:
        return ""
    return "pass" if passed else "fail"


def build_matrix_csv(
    suite_title: str,
    runs: Sequence[RunSummary],
    matrix: Mapping[str, Sequence[Observation]],
) -> str:
    """Render every run and every test, ignoring any view filters.

    ``runs`` keep their given order (ascending by start). Tests are listed
    alphabetically; a test absent from a run gets an empty cell.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([suite_title, *(to_iso(run.start) for run in runs)])
    for title in sorted(matrix):
        by_run: dict[str, bool] = {}
        for observation in matrix[title]:
            by_run[observation.run_key] = observation.passed
        writer.writerow([title, *(_cell_text(by_run.get(run.key)) for run in runs)])
    return buffer.getvalue()


def export_filename(suite_title: str, runs: Sequence[RunSummary]) -> str:
    stamp = ""
    if runs:
        stamp = to_iso(runs[-1].start)[:19].replace(":", "-").replace("T", "-")
    return f"{_WHITESPACE_RE.sub('_', suite_title)}-{stamp}.csv"


def write_matrix_csv(
    directory: Path,
    suite_title: str,
    runs: Sequence[RunSummary],
    matrix: Mapping[str, Sequence[Observation]],
) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / export_filename(suite_title, runs)
    target.write_text(build_matrix_csv(suite_title, runs, matrix), encoding="utf-8")
    LOGGER.info("wrote %s (%d tests, %d runs)", target, len(matrix), len(runs))
    return target
