"""Calendar conversion wrappers around astropy.time (Julian date to civil date)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from astropy.time import Time

from ephemeris_charts.constants import CALENDAR_JD_MAX, CALENDAR_JD_MIN, MONTH_NAMES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CivilDate:
    """Calendar date and time of day for one Julian date."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float


def calendar_from_jd(jds: Sequence[float] | np.ndarray) -> list[CivilDate]:
    """Convert Julian dates to calendar dates.

    Julian dates are treated as a uniform time scale (TT) so no leap-second
    adjustment is applied; the calendar is proleptic Gregorian.

    Parameters:
        jds: Julian day numbers, each within calendar_range_ok().

    Returns:
        One CivilDate per input, in order.

    Raises:
        ValueError: If any value is non-finite or outside the convertible range.
    """
    values = np.atleast_1d(np.asarray(jds, dtype=float))
    if values.size == 0:
        return []
    bad = [float(v) for v in values if not calendar_range_ok(float(v))]
    if bad:
        raise ValueError(f'Julian date {bad[0]!r} cannot be converted to a calendar date')
    ymdhms = Time(values, format='jd', scale='tt').ymdhms
    return [
        CivilDate(
            year=int(ymdhms['year'][i]),
            month=int(ymdhms['month'][i]),
            day=int(ymdhms['day'][i]),
            hour=int(ymdhms['hour'][i]),
            minute=int(ymdhms['minute'][i]),
            second=float(ymdhms['second'][i]),
        )
        for i in range(values.size)
    ]


def calendar_range_ok(jd: float) -> bool:
    """True if jd is finite and inside the range the calendar conversion accepts."""
    return CALENDAR_JD_MIN <= jd <= CALENDAR_JD_MAX


def month_abbreviation(month: int) -> str:
    """Return three-letter month name (1=Jan .. 12=Dec).

    Raises:
        ValueError: If month is outside 1..12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f'Invalid month {month}; expected 1..12')
    return MONTH_NAMES[month - 1][:3]
