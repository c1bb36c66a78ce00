"""Ephemeris track rendering: path, date ticks, and tick labels on a star chart."""

from __future__ import annotations

import bisect
import math

from ephemeris_charts.constants import (
    LABEL_GAP_FAR,
    LABEL_GAP_NEAR,
    MAJOR_FONT_SIZE,
    MAJOR_TICK_LEN,
    MAJOR_TICK_WIDTH,
    MINOR_EXTRA_MARGIN,
    MINOR_FONT_SIZE,
    MINOR_TICK_LEN,
    MINOR_TICK_WIDTH,
    POINT_EXCLUSION_FRAC,
    PRIORITY_APR_NOV_BONUS,
    PRIORITY_BASE,
    PRIORITY_DAY14_BONUS,
    PRIORITY_INDEX_STEP,
    PRIORITY_JANUARY_BONUS,
    PRIORITY_JULY_BONUS,
    PRIORITY_MAJOR_BONUS,
    TICK_EXCLUSION_FRAC,
)
from ephemeris_charts.params import ChartConfig
from ephemeris_charts.rendering.labels import (
    ExclusionRegion,
    LabelBuffer,
    LabelPosition,
    LabelRequest,
)
from ephemeris_charts.rendering.projection import CanvasBounds, Projector
from ephemeris_charts.rendering.surface import Surface
from ephemeris_charts.tracks import LabelledSample, Track

# Track direction sectors (degrees, upper bounds) -> (h_align, v_align) of the
# label at the tick's leading end, so text reads away from the tick.
_SECTOR_BOUNDS = (-157.5, -112.5, -67.5, -22.5, 22.5, 67.5, 112.5, 157.5)
_SECTOR_ALIGNS = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
)


def alignment_for_direction(theta_deg: float) -> tuple[int, int]:
    """Label (h_align, v_align) for a track heading theta_deg in canvas coordinates.

    The heading is split into eight 45 degree sectors centred on multiples of 45.
    """
    return _SECTOR_ALIGNS[bisect.bisect_right(_SECTOR_BOUNDS, theta_deg)]


def label_priority(index: int, sample: LabelledSample) -> float:
    """Placement priority of a tick label (lower value is placed first).

    Month starts beat weekly ticks; mid-month, January, July, April and November
    labels get small bonuses so quarter and year boundaries survive collisions.
    The sample index breaks ties deterministically.
    """
    priority = PRIORITY_BASE + PRIORITY_INDEX_STEP * index
    if not sample.is_minor_tick:
        priority -= PRIORITY_MAJOR_BONUS
    if sample.day == 14:
        priority -= PRIORITY_DAY14_BONUS
    if sample.month == 1:
        priority -= PRIORITY_JANUARY_BONUS
    if sample.month == 7:
        priority -= PRIORITY_JULY_BONUS
    if sample.month in (4, 11):
        priority -= PRIORITY_APR_NOV_BONUS
    return priority


def tick_length(sample: LabelledSample, bounds: CanvasBounds, config: ChartConfig) -> float:
    """Tick length in canvas units; weekly ticks are shorter than month ticks."""
    physical = MINOR_TICK_LEN if sample.is_minor_tick else MAJOR_TICK_LEN
    return physical * bounds.width / config.width


def render_path(
    track: Track,
    projector: Projector,
    bounds: CanvasBounds,
    surface: Surface,
    config: ChartConfig,
) -> float:
    """Draw the track as a line through its projected samples.

    Samples outside the canvas are skipped, which lifts the pen: the path breaks
    into separate segments there with no interpolation to the edge.

    Returns:
        Initial track direction (radians), measured at the third sample, for ticks
        on the first two samples.
    """
    surface.set_colour(config.ephemeris_col)
    surface.set_line_width(config.line_width_base)
    initial_theta = 0.0
    last_x = last_y = 0.0
    segment: list[tuple[float, float]] = []
    for i, sample in enumerate(track.samples):
        x, y = projector.project(sample.ra, sample.dec)
        if not bounds.contains(x, y):
            if len(segment) > 1:
                surface.polyline(segment)
            segment = []
            continue
        segment.append((x, y))
        if i == 2:
            initial_theta = math.atan2(y - last_y, x - last_x)
        last_x, last_y = x, y
    if len(segment) > 1:
        surface.polyline(segment)
    return initial_theta


def place_ticks(
    track: Track,
    projector: Projector,
    bounds: CanvasBounds,
    labels: LabelBuffer,
    surface: Surface,
    config: ChartConfig,
    initial_theta: float = 0.0,
) -> list[LabelRequest]:
    """Draw date ticks across the track and submit their labels.

    Every projected sample reserves a small exclusion square so unrelated labels
    avoid the path. Labelled samples on the canvas also get a tick perpendicular
    to the local direction of travel, a larger exclusion square, and a label
    request with four candidate positions: both tick ends at 1.5 and 1.85 tick
    lengths, the far end with mirrored alignment.

    Parameters:
        track: Labelled track.
        projector: Sky-to-canvas projection.
        bounds: Visible canvas area.
        labels: Page-wide exclusion regions and label resolver.
        surface: Drawing surface for the tick marks.
        config: Chart settings (physical width, line width, track colour).
        initial_theta: Direction used for the first two samples (from render_path).

    Returns:
        The label requests submitted, in track order.
    """
    requests: list[LabelRequest] = []
    last_x = last_y = 0.0
    surface.set_colour(config.ephemeris_col)
    for i, sample in enumerate(track.samples):
        tick_len = tick_length(sample, bounds, config)
        x, y = projector.project(sample.ra, sample.dec)

        if i < 2:
            theta = initial_theta
        else:
            theta = math.atan2(y - last_y, x - last_x)
        # Repeated or unprojectable points
        if not math.isfinite(theta):
            theta = 0.0
        last_x, last_y = x, y

        if math.isfinite(x) and math.isfinite(y):
            labels.add_exclusion(ExclusionRegion.around(x, y, tick_len * POINT_EXCLUSION_FRAC))

        if sample.text_label is None or not bounds.contains(x, y):
            continue

        labels.add_exclusion(ExclusionRegion.around(x, y, tick_len * TICK_EXCLUSION_FRAC))

        sin_t, cos_t = math.sin(theta), math.cos(theta)
        line_width = MINOR_TICK_WIDTH if sample.is_minor_tick else MAJOR_TICK_WIDTH
        surface.set_line_width(line_width * config.line_width_base)
        surface.line(
            x + tick_len * sin_t,
            y - tick_len * cos_t,
            x - tick_len * sin_t,
            y + tick_len * cos_t,
        )

        h_align, v_align = alignment_for_direction(math.degrees(theta))
        positions = []
        for gap in (LABEL_GAP_NEAR, LABEL_GAP_FAR):
            dx = gap * tick_len * sin_t
            dy = gap * tick_len * cos_t
            positions.append(LabelPosition(x + dx, y - dy, 0.0, h_align, v_align))
            positions.append(LabelPosition(x - dx, y + dy, 0.0, -h_align, -v_align))

        request = LabelRequest(
            text=sample.text_label,
            colour=config.ephemeris_col,
            positions=(positions[0], positions[1], positions[2], positions[3]),
            font_size=MINOR_FONT_SIZE if sample.is_minor_tick else MAJOR_FONT_SIZE,
            extra_margin=MINOR_EXTRA_MARGIN if sample.is_minor_tick else 0.0,
            priority=label_priority(i, sample),
        )
        labels.submit(request)
        requests.append(request)
    return requests
