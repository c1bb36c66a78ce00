"""Tests for calendar tick labels on ephemeris tracks."""

from __future__ import annotations

from ephemeris_charts.time_utils import CivilDate
from ephemeris_charts.tracks import Sample, assign_labels, label_for_date, should_display


def _dates(*ymd: tuple[int, int, int]) -> list[CivilDate]:
    return [CivilDate(y, m, d, 0, 0, 0.0) for y, m, d in ymd]


def _samples(n: int) -> list[Sample]:
    return [Sample(time=2458849.5 + i, ra=1.0, dec=0.0) for i in range(n)]


def test_label_for_date() -> None:
    """Early-month dates name the month; later dates name the week."""
    assert label_for_date(1, 1, 2020, 'Dec') == ('Jan 2020', False)
    assert label_for_date(3, 2, 2020, '28') == ('Feb', False)
    assert label_for_date(1, 2, 2020, '') == ('Feb 2020', False)
    assert label_for_date(13, 2, 2020, 'Feb') == ('7', True)
    assert label_for_date(31, 1, 2020, '21') == ('28', True)


def test_should_display() -> None:
    """Labels repeat-suppress on their first three characters."""
    assert not should_display('Jan', 'Jan 2020', 3)
    assert should_display('Feb', 'Jan 2020', 1)
    assert not should_display('Jan 2020', '', 5)
    assert should_display('Jan 2020', '', 1)


def test_assign_labels_weekly_sampling() -> None:
    """A weekly track shows the month with year, then the weekly ticks, then the next month."""
    dates = _dates(
        (2020, 1, 1),
        (2020, 1, 5),
        (2020, 1, 10),
        (2020, 1, 17),
        (2020, 1, 24),
        (2020, 1, 31),
        (2020, 2, 1),
    )
    labelled = assign_labels(_samples(len(dates)), dates)
    assert [s.text_label for s in labelled] == [
        'Jan 2020',
        None,
        '7',
        '14',
        '21',
        '28',
        'Feb',
    ]
    assert [s.is_minor_tick for s in labelled] == [False, False, True, True, True, True, False]
    assert labelled[0].year == 2020
    assert labelled[1].day == 0


def test_assign_labels_waits_for_month_start() -> None:
    """A track starting mid-month stays unlabelled until the 1st, which carries the year."""
    dates = _dates(
        (2020, 1, 5),
        (2020, 1, 12),
        (2020, 1, 19),
        (2020, 1, 26),
        (2020, 2, 1),
        (2020, 2, 8),
    )
    labelled = assign_labels(_samples(len(dates)), dates)
    assert [s.text_label for s in labelled] == [None, None, None, None, 'Feb 2020', '7']


def test_assign_labels_daily_sampling_single_tick_per_week() -> None:
    """Consecutive days in one week produce one weekly label."""
    dates = _dates(*[(2021, 3, d) for d in range(1, 16)])
    labelled = assign_labels(_samples(len(dates)), dates)
    shown = [(s.day, s.text_label) for s in labelled if s.is_labelled]
    assert shown == [(1, 'Mar 2021'), (7, '7'), (14, '14')]


def test_assign_labels_skips_missing_dates() -> None:
    """Samples without a calendar date are never labelled."""
    dates = [None, *_dates((2020, 1, 1))]
    labelled = assign_labels(_samples(2), dates)
    assert labelled[0].text_label is None
    assert labelled[1].text_label == 'Jan 2020'
