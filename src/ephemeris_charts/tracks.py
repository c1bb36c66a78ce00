"""Ephemeris track samples and calendar tick labels."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from ephemeris_charts.params import TraceSpec
from ephemeris_charts.time_utils import CivilDate, month_abbreviation


@dataclass(frozen=True)
class Sample:
    """One ephemeris row: Julian date and J2000 RA/Dec in radians."""

    time: float
    ra: float
    dec: float


@dataclass(frozen=True)
class LabelledSample(Sample):
    """Sample with an optional tick label.

    Calendar fields are only set on labelled samples; unlabelled samples carry
    zeros, as do their is_minor_tick flags.
    """

    text_label: str | None = None
    day: int = 0
    month: int = 0
    year: int = 0
    is_minor_tick: bool = False

    @property
    def is_labelled(self) -> bool:
        return self.text_label is not None


@dataclass(frozen=True)
class Track:
    """Time-ordered samples of one solar-system object."""

    spec: TraceSpec
    samples: tuple[LabelledSample, ...]

    def __len__(self) -> int:
        return len(self.samples)

    def labelled(self) -> Iterator[tuple[int, LabelledSample]]:
        """Yield (index, sample) for every sample carrying a tick label."""
        for i, sample in enumerate(self.samples):
            if sample.is_labelled:
                yield i, sample


def label_for_date(day: int, month: int, year: int, previous_label: str) -> tuple[str, bool]:
    """Candidate tick label text for a calendar date.

    After the sixth of the month, labels mark weeks (7, 14, 21, 28) and are minor.
    Otherwise the label names the month, with the year in January or when the
    track has shown no label yet.

    Parameters:
        day, month, year: Calendar date of the sample.
        previous_label: Text of the last label shown on this track ('' if none).

    Returns:
        (text, is_minor).
    """
    if day > 6:
        return str(7 * (day // 7)), True
    if month == 1 or not previous_label:
        return f'{month_abbreviation(month)} {year}', False
    return month_abbreviation(month), False


def should_display(text: str, previous_label: str, day: int) -> bool:
    """Whether a candidate label is shown.

    A label is shown when it differs from the last shown label in its first three
    characters. A track's first label waits for the first day of a month.
    """
    return text[:3] != previous_label[:3] and (bool(previous_label) or day == 1)


def assign_labels(
    samples: Sequence[Sample],
    dates: Sequence[CivilDate | None],
) -> list[LabelledSample]:
    """Attach tick labels to one track's samples.

    Parameters:
        samples: Time-ordered samples of one track.
        dates: Calendar date per sample; None where the time has no calendar date.

    Returns:
        One LabelledSample per input sample.
    """
    if len(samples) != len(dates):
        raise ValueError(f'Got {len(dates)} dates for {len(samples)} samples')
    previous_label = ''
    out: list[LabelledSample] = []
    for sample, date in zip(samples, dates):
        labelled = LabelledSample(time=sample.time, ra=sample.ra, dec=sample.dec)
        if date is not None:
            text, is_minor = label_for_date(date.day, date.month, date.year, previous_label)
            if should_display(text, previous_label, date.day):
                labelled = LabelledSample(
                    time=sample.time,
                    ra=sample.ra,
                    dec=sample.dec,
                    text_label=text,
                    day=date.day,
                    month=date.month,
                    year=date.year,
                    is_minor_tick=is_minor,
                )
                previous_label = text
        out.append(labelled)
    return out
