"""Trace definitions and chart configuration (env, CLI, API)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

from ephemeris_charts.constants import DEFAULT_JD_STEP

logger = logging.getLogger(__name__)

ProjectionKind = Literal['gnomonic', 'flat']
PROJECTION_GNOMONIC: ProjectionKind = 'gnomonic'
PROJECTION_FLAT: ProjectionKind = 'flat'
PROJECTIONS: tuple[ProjectionKind, ...] = (PROJECTION_GNOMONIC, PROJECTION_FLAT)


@dataclass(frozen=True)
class TraceSpec:
    """One solar-system object to track: identifier and Julian date range."""

    object_id: str
    jd_start: float
    jd_end: float
    jd_step: float = DEFAULT_JD_STEP


def parse_trace_definition(definition: str) -> TraceSpec:
    """Parse a trace definition string ``object_id,jd_start,jd_end``.

    Fields are comma-separated with no escaping; any fields after the third are
    ignored. The sampling step is fixed at DEFAULT_JD_STEP.

    Parameters:
        definition: e.g. ``"jupiter,2458849.5,2459216.5"``.

    Returns:
        Parsed TraceSpec.

    Raises:
        ValueError: If fields are missing, the object id is empty, a date is not
            numeric, or the end date precedes the start date.
    """
    parts = [p.strip() for p in definition.split(',')]
    if len(parts) < 3:
        raise ValueError(
            f'Invalid trace definition {definition!r}; expected object_id,jd_start,jd_end'
        )
    object_id = parts[0]
    if not object_id:
        raise ValueError(f'Invalid trace definition {definition!r}; empty object id')
    try:
        jd_start = float(parts[1])
        jd_end = float(parts[2])
    except ValueError:
        raise ValueError(
            f'Invalid trace definition {definition!r}; Julian dates must be numeric'
        ) from None
    if not (math.isfinite(jd_start) and math.isfinite(jd_end)):
        raise ValueError(f'Invalid trace definition {definition!r}; Julian dates must be finite')
    if jd_end < jd_start:
        raise ValueError(
            f'Invalid trace definition {definition!r}; jd_end precedes jd_start'
        )
    if len(parts) > 3:
        logger.debug('Ignoring extra fields in trace definition %r', definition)
    return TraceSpec(object_id=object_id, jd_start=jd_start, jd_end=jd_end)


@dataclass
class ChartConfig:
    """Chart framing and display settings.

    Framing (ra0, dec0, angular_width, aspect, projection) is caller-supplied and
    is replaced by autoscale when ephemeris_autoscale is set and coverage allows.
    The display flags are consumed by chart setup outside the track code; autoscale
    adjusts them as a side effect of choosing a wide-field frame.
    """

    ra0: float = 0.0  # hours
    dec0: float = 0.0  # degrees
    angular_width: float = 25.0  # degrees
    aspect: float = 1.0 / math.sqrt(2.0)
    projection: ProjectionKind = PROJECTION_GNOMONIC
    width: float = 16.5  # cm
    font_size: float = 1.0
    line_width_base: float = 1.0
    mag_min: float = 6.0
    maximum_star_label_count: int = 1000
    dso_names: bool = True
    star_flamsteed_labels: bool = True
    ephemeris_autoscale: bool = True
    ephemeris_col: tuple[float, float, float] = (0.0, 0.0, 0.0)
    ephemeris_compute_path: str | None = None  # None: EPHEMERIS_DATA_PATH or EPHEMERIS_COMPUTE_PATH
    title: str = ''
