"""Rolling pass-rate statistics over trailing day windows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import RunSummary, SuiteKind, SuiteStats, WindowStat, round_half_up

MS_PER_DAY = 24 * 60 * 60 * 1000
DEFAULT_WINDOWS: tuple[int, ...] = (3, 7, 14, 30)

__all__ = [
    "MS_PER_DAY",
    "DEFAULT_WINDOWS",
    "percentage",
    "window_stat",
    "aggregate_windows",
    "suite_stats",
]


def percentage(passes: int, total: int) -> int | None:
    if total <= 0:
        return None
    return round_half_up(100 * passes / total)


def window_stat(summaries: Iterable[RunSummary], now_ms: int, days: int) -> WindowStat:
    cutoff = now_ms - days * MS_PER_DAY
    passes = total = count = 0
    for summary in summaries:
        if summary.start >= cutoff:
            passes += summary.passes
            total += summary.total
            count += 1
    return WindowStat(days=days, passes=passes, total=total, count=count, pct=percentage(passes, total))


def aggregate_windows(
    summaries: Sequence[RunSummary],
    now_ms: int,
    days: Iterable[int] = DEFAULT_WINDOWS,
) -> tuple[WindowStat, ...]:
    """Windows overlap: a run inside the 3-day window counts in every longer one too."""
    return tuple(window_stat(summaries, now_ms, value) for value in days)


def suite_stats(
    kind: SuiteKind,
    summaries: Sequence[RunSummary],
    now_ms: int,
    days: Iterable[int] = DEFAULT_WINDOWS,
) -> SuiteStats:
    latest = max(summaries, key=lambda item: item.start, default=None)
    passes = sum(item.passes for item in summaries)
    total = sum(item.total for item in summaries)
    return SuiteStats(
        kind=kind,
        run_count=len(summaries),
        latest=latest,
        overall_pct=percentage(passes, total),
        windows=aggregate_windows(summaries, now_ms, days),
    )
