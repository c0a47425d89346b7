"""Filtering and sorting of the per-test matrix view."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
import datetime as dt
from enum import Enum
from types import MappingProxyType

from .classifier import classify
from .io import datetime_to_epoch_ms
from .matrix import cells_for_runs
from .models import Cell, NotRun, Observation, Observed, RunSummary, TrendClassification

__all__ = [
    "ColumnFilter",
    "SortMode",
    "DateRange",
    "FilterConfig",
    "MatrixRow",
    "TableView",
    "scope_runs",
    "build_table",
]


class ColumnFilter(str, Enum):
    ALL = "all"
    PASS = "pass"
    FAIL = "fail"
    MISSING = "missing"

    def accepts(self, cell: Cell) -> bool:
        if self is ColumnFilter.ALL:
            return True
        if self is ColumnFilter.MISSING:
            return isinstance(cell, NotRun)
        if not isinstance(cell, Observed):
            return False
        return cell.passed == (self is ColumnFilter.PASS)


class SortMode(str, Enum):
    """Ordering by pass rate; ``NONE`` keeps alphabetical title order."""

    NONE = "none"
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive calendar-day bounds; a missing bound leaves that side open."""

    start: dt.date | None = None
    end: dt.date | None = None

    def bounds_ms(self, tz: dt.tzinfo = dt.UTC) -> tuple[int | None, int | None]:
        low = high = None
        if self.start is not None:
            low = datetime_to_epoch_ms(dt.datetime.combine(self.start, dt.time.min, tzinfo=tz))
        if self.end is not None:
            day_end = dt.datetime.combine(self.end, dt.time(23, 59, 59, 999000), tzinfo=tz)
            high = datetime_to_epoch_ms(day_end)
        return low, high

    def contains(self, epoch_ms: int, tz: dt.tzinfo = dt.UTC) -> bool:
        low, high = self.bounds_ms(tz)
        if low is not None and epoch_ms < low:
            return False
        if high is not None and epoch_ms > high:
            return False
        return True


@dataclass(frozen=True)
class FilterConfig:
    """Everything the matrix view can be narrowed or ordered by."""

    text: str = ""
    flaky_only: bool = False
    latest_fail_only: bool = False
    new_failure_only: bool = False
    recovered_only: bool = False
    date_range: DateRange = DateRange()
    column_filters: Mapping[str, ColumnFilter] = field(default_factory=dict)
    sort: SortMode = SortMode.NONE

    def __post_init__(self) -> None:
        frozen = {key: ColumnFilter(value) for key, value in self.column_filters.items()}
        object.__setattr__(self, "column_filters", MappingProxyType(frozen))
        object.__setattr__(self, "sort", SortMode(self.sort))

    def with_text(self, text: str) -> FilterConfig:
        return replace(self, text=text)

    def with_date_range(self, start: dt.date | None, end: dt.date | None) -> FilterConfig:
        return replace(self, date_range=DateRange(start, end))

    def with_sort(self, sort: SortMode | str) -> FilterConfig:
        return replace(self, sort=SortMode(sort))

    def with_column_filter(self, run_key: str, mode: ColumnFilter | str) -> FilterConfig:
        filters = dict(self.column_filters)
        mode = ColumnFilter(mode)
        if mode is ColumnFilter.ALL:
            filters.pop(run_key, None)
        else:
            filters[run_key] = mode
        return replace(self, column_filters=filters)

    def cycle_sort(self) -> FilterConfig:
        """none -> desc -> asc -> none, like the column header toggle."""
        order = {SortMode.NONE: SortMode.DESC, SortMode.DESC: SortMode.ASC, SortMode.ASC: SortMode.NONE}
        return replace(self, sort=order[self.sort])


@dataclass(frozen=True, slots=True)
class MatrixRow:
    title: str
    cells: tuple[Cell, ...]
    classification: TrendClassification


@dataclass(frozen=True, slots=True)
class TableView:
    runs: tuple[RunSummary, ...]
    rows: tuple[MatrixRow, ...]


def scope_runs(
    runs: Sequence[RunSummary], date_range: DateRange, tz: dt.tzinfo = dt.UTC
) -> tuple[RunSummary, ...]:
    return tuple(run for run in runs if date_range.contains(run.start, tz))


def _passes_quick_filters(row: MatrixRow, config: FilterConfig) -> bool:
    trend = row.classification
    if config.flaky_only and not trend.is_flaky:
        return False
    if config.latest_fail_only and not trend.latest_fail:
        return False
    if config.new_failure_only and not trend.new_failure:
        return False
    if config.recovered_only and not trend.recovered:
        return False
    return True


def build_table(
    runs: Sequence[RunSummary],
    matrix: Mapping[str, Sequence[Observation]],
    config: FilterConfig | None = None,
    tz: dt.tzinfo = dt.UTC,
) -> TableView:
    """Produce the displayed rows for one suite.

    The date range is applied first and every row is re-classified against the
    remaining columns, so it changes pass rates and flaky flags, not only the
    visible columns. Text, quick toggles and column filters follow, then the
    pass-rate sort. ``runs`` must be sorted by start.
    """
    config = config or FilterConfig()
    scoped = scope_runs(runs, config.date_range, tz)

    rows: list[MatrixRow] = []
    for title in sorted(matrix):
        cells = cells_for_runs(matrix[title], scoped)
        rows.append(MatrixRow(title=title, cells=cells, classification=classify(cells)))

    needle = config.text.casefold()
    if needle:
        rows = [row for row in rows if needle in row.title.casefold()]

    rows = [row for row in rows if _passes_quick_filters(row, config)]

    column_index = {run.key: index for index, run in enumerate(scoped)}
    active = [
        (column_index[run_key], mode)
        for run_key, mode in config.column_filters.items()
        if run_key in column_index and mode is not ColumnFilter.ALL
    ]
    if active:
        rows = [row for row in rows if all(mode.accepts(row.cells[index]) for index, mode in active)]

    if config.sort is not SortMode.NONE:
        rows = sorted(
            rows,
            key=lambda row: row.classification.pass_rate,
            reverse=config.sort is SortMode.DESC,
        )

    return TableView(runs=scoped, rows=tuple(rows))
