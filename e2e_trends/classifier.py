"""Per-test trend classification over the runs in scope."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Cell, Observed, TrendClassification, round_half_up

__all__ = ["observed_outcomes", "is_flaky_sequence", "pass_rate", "classify"]


def observed_outcomes(cells: Iterable[Cell]) -> list[bool]:
    """Chronological outcomes with not-run cells removed."""
    return [cell.passed for cell in cells if isinstance(cell, Observed)]


def is_flaky_sequence(outcomes: Sequence[bool]) -> bool:
    """A single flip between two adjacent runs is enough."""
    for index in range(1, len(outcomes)):
        if outcomes[index] != outcomes[index - 1]:
            return True
    return False


def pass_rate(cells: Sequence[Cell]) -> int:
    # not-run columns count against the rate
    passed = sum(1 for cell in cells if isinstance(cell, Observed) and cell.passed)
    return round_half_up(100 * passed / max(1, len(cells)))


def classify(cells: Sequence[Cell]) -> TrendClassification:
    """Classify one test from its cells over the scoped run columns.

    ``cells`` must be in chronological order and hold one entry per column
    currently in scope, so re-scoping the columns changes the result.
    """
    outcomes = observed_outcomes(cells)
    latest = outcomes[-1] if outcomes else None
    prev = outcomes[-2] if len(outcomes) >= 2 else None
    return TrendClassification(
        pass_rate=pass_rate(cells),
        is_flaky=is_flaky_sequence(outcomes),
        latest_fail=latest is False,
        new_failure=latest is False and prev is True,
        recovered=latest is True and prev is False,
    )
