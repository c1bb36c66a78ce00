"""Coarse sky-coverage grid marking which RA and Dec bands any track passes through."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

import numpy as np

from ephemeris_charts.constants import DEC_BINS, HALF_PI, RA_BINS, TWO_PI
from ephemeris_charts.tracks import Sample, Track

logger = logging.getLogger(__name__)


def ra_bin(ra: float) -> int:
    """RA grid bin for a right ascension in radians (wrapped into [0, 2pi))."""
    index = math.floor((ra % TWO_PI) / TWO_PI * RA_BINS)
    return index % RA_BINS


def dec_bin(dec: float) -> int:
    """Dec grid bin for a declination in radians; dec = +pi/2 falls in the top bin."""
    index = math.floor((dec + HALF_PI) / math.pi * DEC_BINS)
    return min(max(index, 0), DEC_BINS - 1)


class CoverageGrid:
    """Occupancy flags over RA (192 bins) and Dec (144 bins).

    A bin is occupied iff at least one marked sample falls in it. Marking never
    clears a bin.
    """

    def __init__(self) -> None:
        self.ra_usage = np.zeros(RA_BINS, dtype=bool)
        self.dec_usage = np.zeros(DEC_BINS, dtype=bool)

    @classmethod
    def from_tracks(cls, tracks: Iterable[Track]) -> CoverageGrid:
        """Grid with every sample of every track marked."""
        grid = cls()
        for track in tracks:
            grid.mark_samples(track.samples)
        return grid

    def mark(self, ra: float, dec: float) -> bool:
        """Mark the bins containing (ra, dec) in radians.

        Returns:
            False (and marks nothing) if either coordinate is not finite.
        """
        if not (math.isfinite(ra) and math.isfinite(dec)):
            return False
        self.ra_usage[ra_bin(ra)] = True
        self.dec_usage[dec_bin(dec)] = True
        return True

    def mark_samples(self, samples: Iterable[Sample]) -> int:
        """Mark every sample; returns how many were skipped as non-finite."""
        skipped = 0
        for sample in samples:
            if not self.mark(sample.ra, sample.dec):
                skipped += 1
        if skipped:
            logger.warning('Skipped %d non-finite ephemeris samples', skipped)
        return skipped

    def is_ra_occupied(self, index: int) -> bool:
        return bool(self.ra_usage[index % RA_BINS])

    def is_dec_occupied(self, index: int) -> bool:
        return bool(self.dec_usage[index])

    def is_occupied(self, ra_index: int, dec_index: int) -> bool:
        """True if both the RA band and the Dec band have been visited."""
        return self.is_ra_occupied(ra_index) and self.is_dec_occupied(dec_index)
