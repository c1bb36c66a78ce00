"""Autoscale: frame a star chart around the sky area covered by ephemeris tracks.

The solver peels sky coverage back from the point opposite the tracks' centroid:
scanning east and west in RA from the anti-centre until an occupied bin is met
gives the RA limits, and scanning Dec from each pole gives the Dec limits. The
bounding box then fixes the chart centre, angular width, aspect ratio, and
projection (gnomonic for narrow fields, flat for wide ones).

If an RA scan arrives at the centroid's own bin without meeting coverage, or every
sample lies in a single grid bin (one RA bin and one Dec bin), coverage is
degenerate and autoscale is disabled; the caller's framing stands.
A track that visits every RA bin frames the whole sky instead.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from ephemeris_charts.angle_utils import mean_position, wrap_hours
from ephemeris_charts.constants import (
    ANGULAR_MARGIN,
    DEC_BINS,
    DEGREES_PER_CIRCLE,
    DEGREES_PER_HOUR_RA,
    FLAMSTEED_WIDTH_LIMIT_DEG,
    FLAT_ASPECT_STRETCH,
    FLAT_DEC_LIMIT_DEG,
    FLAT_FONT_SCALE,
    FLAT_MAG_LIMIT,
    FLAT_MAX_ASPECT,
    FLAT_MAX_STAR_LABELS,
    FLAT_PROJECTION_WIDTH_DEG,
    FLAT_TALL_WIDTH_SCALE,
    FLAT_WIDTH_SCALE,
    FULL_SKY_THRESHOLD_DEG,
    GNOMONIC_MAX_ASPECT,
    GNOMONIC_MIN_ASPECT,
    HOURS_PER_CIRCLE,
    RA_BINS,
)
from ephemeris_charts.coverage import CoverageGrid, ra_bin
from ephemeris_charts.params import (
    PROJECTION_FLAT,
    PROJECTION_GNOMONIC,
    ChartConfig,
    ProjectionKind,
)
from ephemeris_charts.tracks import Sample, Track

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Chart framing derived from track coverage.

    Bounds are in hours (RA) and degrees (Dec). The framing fields (centre,
    angular_width, aspect, projection_kind) are None when autoscale failed. The
    remaining fields describe display adjustments that go with the chosen frame.
    """

    ra_min: float
    ra_max: float
    dec_min: float
    dec_max: float
    angular_width_base: float
    autoscale_succeeded: bool
    centre_ra: float | None = None
    centre_dec: float | None = None
    angular_width: float | None = None
    aspect: float | None = None
    projection_kind: ProjectionKind | None = None
    width_scale: float = 1.0
    font_scale: float = 1.0
    suppress_flamsteed_labels: bool = False
    mag_limit: float | None = None
    maximum_star_label_count: int | None = None
    show_dso_names: bool | None = None

    @property
    def ra_span_deg(self) -> float:
        return (self.ra_max - self.ra_min) * DEGREES_PER_HOUR_RA

    @property
    def dec_span(self) -> float:
        return self.dec_max - self.dec_min


def _snap_full_sky(width: float) -> float:
    """Charts covering almost the whole sky may as well cover all of it."""
    return DEGREES_PER_CIRCLE if width > FULL_SKY_THRESHOLD_DEG else width


def choose_projection(angular_width_base: float) -> ProjectionKind:
    """Flat projection for charts strictly wider than 110 degrees, else gnomonic."""
    if angular_width_base > FLAT_PROJECTION_WIDTH_DEG:
        return PROJECTION_FLAT
    return PROJECTION_GNOMONIC


def _scan_ra(grid: CoverageGrid, start: int, step: int, centre_bin: int) -> tuple[int, bool]:
    """Walk RA bins from start in direction step until an occupied bin.

    Returns:
        (bin, found). found is False if the walk reached an unoccupied centre_bin
        first; the walk visits each bin at most once, so it always terminates.
    """
    index = start % RA_BINS
    for _ in range(RA_BINS):
        if grid.is_ra_occupied(index):
            return index, True
        if index == centre_bin:
            return index, False
        index = (index + step) % RA_BINS
    return index, False


def _scan_dec(grid: CoverageGrid, start: int, step: int) -> tuple[int, bool]:
    """Walk Dec bins from one pole toward the other until an occupied bin.

    Returns:
        (bin, found). found is False if the opposite pole is reached unoccupied.
    """
    index = start
    end = DEC_BINS - 1 - start
    while not grid.is_dec_occupied(index):
        if index == end:
            return index, False
        index += step
    return index, True


def solve(samples: Sequence[Sample], grid: CoverageGrid) -> FrameResult:
    """Derive chart framing from all samples of all tracks and their coverage grid.

    Parameters:
        samples: Every sample across every track.
        grid: Coverage grid with those samples marked.

    Returns:
        FrameResult; autoscale_succeeded is False for degenerate coverage.
    """
    try:
        ra_centroid, _dec_centroid = mean_position(
            [s.ra for s in samples], [s.dec for s in samples]
        )
    except ValueError:
        logger.warning('No finite ephemeris samples; autoscale disabled')
        return FrameResult(
            ra_min=0.0,
            ra_max=HOURS_PER_CIRCLE,
            dec_min=-90.0,
            dec_max=90.0,
            angular_width_base=DEGREES_PER_CIRCLE,
            autoscale_succeeded=False,
        )

    centre_bin = ra_bin(ra_centroid)
    anti_bin = ra_bin(ra_centroid + math.pi)

    ra_bin_min, ok_ra_min = _scan_ra(grid, anti_bin + 1, 1, centre_bin)
    ra_bin_max, ok_ra_max = _scan_ra(grid, anti_bin, -1, centre_bin)
    dec_bin_min, ok_dec_min = _scan_dec(grid, 0, 1)
    dec_bin_max, ok_dec_max = _scan_dec(grid, DEC_BINS - 1, -1)
    # Every sample in one grid bin: one RA bin and one Dec bin
    single_bin = ra_bin_min == ra_bin_max == centre_bin and dec_bin_min == dec_bin_max
    succeeded = ok_ra_min and ok_ra_max and ok_dec_min and ok_dec_max and not single_bin

    # A bin index denotes its lower edge
    ra_min = ra_bin_min * HOURS_PER_CIRCLE / RA_BINS
    ra_max = (ra_bin_max + 1) * HOURS_PER_CIRCLE / RA_BINS
    dec_min = dec_bin_min * 180.0 / DEC_BINS - 90.0
    dec_max = (dec_bin_max + 1) * 180.0 / DEC_BINS - 90.0
    while ra_max <= ra_min:
        ra_max += HOURS_PER_CIRCLE
    while ra_max > ra_min + HOURS_PER_CIRCLE:
        ra_max -= HOURS_PER_CIRCLE

    ra_span_deg = (ra_max - ra_min) * DEGREES_PER_HOUR_RA
    dec_span = dec_max - dec_min
    angular_width_base = _snap_full_sky(max(ra_span_deg, dec_span) * ANGULAR_MARGIN)

    logger.debug('RA  range: %.1fh to %.1fh', ra_min, ra_max)
    logger.debug('Dec range: %.1fd to %.1fd', dec_min, dec_max)
    logger.debug('Ang width: %.1f deg', angular_width_base)

    if not succeeded:
        logger.warning(
            'Ephemeris sky coverage is degenerate (RA scans ended at bins %d and %d, '
            'centroid bin %d, Dec bins %d to %d); autoscale disabled',
            ra_bin_min,
            ra_bin_max,
            centre_bin,
            dec_bin_min,
            dec_bin_max,
        )
        return FrameResult(
            ra_min=ra_min,
            ra_max=ra_max,
            dec_min=dec_min,
            dec_max=dec_max,
            angular_width_base=angular_width_base,
            autoscale_succeeded=False,
        )

    centre_ra = wrap_hours((ra_min + ra_max) / 2.0)
    centre_dec = (dec_min + dec_max) / 2.0
    projection = choose_projection(angular_width_base)
    suppress_flamsteed = angular_width_base > FLAMSTEED_WIDTH_LIMIT_DEG
    ratio = abs(dec_span) / abs(ra_span_deg)

    if projection == PROJECTION_FLAT:
        width_scale = FLAT_WIDTH_SCALE
        aspect = min(FLAT_MAX_ASPECT, ratio * FLAT_ASPECT_STRETCH)
        if ratio > FLAT_MAX_ASPECT:
            # Tall narrow finder chart
            aspect = 1.0
            width_scale *= FLAT_TALL_WIDTH_SCALE
        half_height = angular_width_base * aspect / 2.0
        centre_dec = max(centre_dec, -FLAT_DEC_LIMIT_DEG + half_height)
        centre_dec = min(centre_dec, FLAT_DEC_LIMIT_DEG - half_height)
        frame = FrameResult(
            ra_min=ra_min,
            ra_max=ra_max,
            dec_min=dec_min,
            dec_max=dec_max,
            angular_width_base=angular_width_base,
            autoscale_succeeded=True,
            centre_ra=centre_ra,
            centre_dec=centre_dec,
            angular_width=angular_width_base,
            aspect=aspect,
            projection_kind=projection,
            width_scale=width_scale,
            font_scale=FLAT_FONT_SCALE,
            suppress_flamsteed_labels=suppress_flamsteed,
            mag_limit=FLAT_MAG_LIMIT,
            maximum_star_label_count=FLAT_MAX_STAR_LABELS,
            show_dso_names=False,
        )
    else:
        aspect = math.ceil(ratio * 10.0) / 10.0
        aspect = min(max(aspect, GNOMONIC_MIN_ASPECT), GNOMONIC_MAX_ASPECT)
        angular_width = _snap_full_sky(max(ra_span_deg, dec_span / aspect) * ANGULAR_MARGIN)
        frame = FrameResult(
            ra_min=ra_min,
            ra_max=ra_max,
            dec_min=dec_min,
            dec_max=dec_max,
            angular_width_base=angular_width_base,
            autoscale_succeeded=True,
            centre_ra=centre_ra,
            centre_dec=centre_dec,
            angular_width=angular_width,
            aspect=aspect,
            projection_kind=projection,
            suppress_flamsteed_labels=suppress_flamsteed,
        )

    logger.info(
        'Autoscaled chart: %s projection, centre %.2fh %+.2fd, width %.1f deg, aspect %.2f',
        frame.projection_kind,
        frame.centre_ra,
        frame.centre_dec,
        frame.angular_width,
        frame.aspect,
    )
    return frame


def solve_tracks(tracks: Iterable[Track]) -> FrameResult:
    """Build the coverage grid for tracks and solve their framing."""
    tracks = list(tracks)
    grid = CoverageGrid.from_tracks(tracks)
    samples = [s for track in tracks for s in track.samples]
    return solve(samples, grid)


def apply_frame(config: ChartConfig, frame: FrameResult) -> ChartConfig:
    """Return config updated with an autoscaled frame.

    The config is returned unchanged when autoscale is switched off. A failed frame
    only clears ephemeris_autoscale, leaving the caller's framing in place.
    """
    if not config.ephemeris_autoscale:
        return config
    if not frame.autoscale_succeeded:
        return replace(config, ephemeris_autoscale=False)
    if (
        frame.centre_ra is None
        or frame.centre_dec is None
        or frame.angular_width is None
        or frame.aspect is None
        or frame.projection_kind is None
    ):
        raise ValueError('Autoscaled frame is missing its centre or projection fields')
    updated = replace(
        config,
        ra0=frame.centre_ra,
        dec0=frame.centre_dec,
        angular_width=frame.angular_width,
        aspect=frame.aspect,
        projection=frame.projection_kind,
        width=config.width * frame.width_scale,
        font_size=config.font_size * frame.font_scale,
    )
    if frame.suppress_flamsteed_labels:
        updated = replace(updated, star_flamsteed_labels=False)
    if frame.mag_limit is not None:
        updated = replace(updated, mag_min=min(updated.mag_min, frame.mag_limit))
    if frame.maximum_star_label_count is not None:
        updated = replace(updated, maximum_star_label_count=frame.maximum_star_label_count)
    if frame.show_dso_names is not None:
        updated = replace(updated, dso_names=frame.show_dso_names)
    return updated
