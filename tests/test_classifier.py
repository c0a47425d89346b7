from __future__ import annotations

import pytest

from e2e_trends.classifier import classify, is_flaky_sequence, observed_outcomes, pass_rate
from e2e_trends.models import NOT_RUN, Observed, TrendClassification


def _cells(*values: bool | None):
    return tuple(NOT_RUN if value is None else Observed(value) for value in values)


@pytest.mark.parametrize(
    "outcomes, expected",
    [
        ([True, True, False, False], True),
        ([True, True, True], False),
        ([False], False),
        ([], False),
        ([False, False, True], True),
    ],
)
def test_is_flaky_sequence(outcomes: list[bool], expected: bool) -> None:
    assert is_flaky_sequence(outcomes) is expected


def test_not_run_cells_are_dropped_before_flip_detection() -> None:
    cells = _cells(True, None, True, None)

    assert observed_outcomes(cells) == [True, True]
    assert classify(cells).is_flaky is False


def test_pass_rate_counts_not_run_columns_in_denominator() -> None:
    # 2 passes over 4 displayed runs, not 2 of 3 executed
    assert pass_rate(_cells(True, None, True, False)) == 50
    assert pass_rate(_cells(True, False, True)) == 67
    assert pass_rate(()) == 0


def test_new_failure() -> None:
    assert classify(_cells(True, True, False)) == TrendClassification(
        pass_rate=67,
        is_flaky=True,
        latest_fail=True,
        new_failure=True,
        recovered=False,
    )


def test_recovered_skips_not_run_between_observations() -> None:
    trend = classify(_cells(False, None, True))

    assert trend.recovered is True
    assert trend.new_failure is False
    assert trend.latest_fail is False
    assert trend.pass_rate == 33


def test_persistent_failure_is_not_new() -> None:
    trend = classify(_cells(False, False))

    assert trend.latest_fail is True
    assert trend.new_failure is False
    assert trend.is_flaky is False


def test_single_observation_has_no_transition() -> None:
    trend = classify(_cells(None, False, None))

    assert trend.latest_fail is True
    assert trend.is_flaky is False
    assert trend.new_failure is False
    assert trend.recovered is False


def test_absent_from_every_run() -> None:
    assert classify(_cells(None, None)) == TrendClassification(
        pass_rate=0,
        is_flaky=False,
        latest_fail=False,
        new_failure=False,
        recovered=False,
    )
