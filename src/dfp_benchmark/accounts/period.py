"""Resolve a fiscal year and exercise order into a reporting window."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dfp_benchmark.exceptions import InvalidPeriod
from dfp_benchmark.models import ExerciseOrder, TimeWindow

log = logging.getLogger(__name__)


def resolve_period(year: int, penultimate: bool = False) -> tuple[ExerciseOrder, TimeWindow]:
    """Return the exercise order and the `[Jan 1 Y, Jan 1 Y+1)` window.

    The second-to-last exercise of year Y is published in the filing of
    year Y+1, so asking for it moves the window one year ahead.

    Args:
        year: Target fiscal year.
        penultimate: Select the second-to-last exercise instead of the last.

    Raises:
        InvalidPeriod: if the year cannot be turned into a calendar date.
    """
    requested = year
    order = ExerciseOrder.LAST
    if penultimate:
        order = ExerciseOrder.PENULTIMATE
        year += 1

    bounds = []
    for y in (year, year + 1):
        try:
            bounds.append(datetime(y, 1, 1, tzinfo=timezone.utc))
        except (ValueError, OverflowError, TypeError) as e:
            raise InvalidPeriod(
                "invalid fiscal year",
                year=requested,
                details={"penultimate": penultimate},
                cause=e,
            ) from e

    window = TimeWindow(start=bounds[0], end=bounds[1])
    log.debug("Resolved %s exercise to [%s, %s)", order.name, window.start, window.end)
    return order, window
