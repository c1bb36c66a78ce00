"""Ephemeris chart tool: fetch tracks, autoscale the frame, and draw paths with date labels."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ephemeris_charts.autoscale import FrameResult, apply_frame, solve_tracks
from ephemeris_charts.constants import TEXT_HEIGHT_CM
from ephemeris_charts.ephemeris import EphemerisProvider, default_provider, fetch_tracks
from ephemeris_charts.params import ChartConfig
from ephemeris_charts.rendering.draw_tracks import place_ticks, render_path
from ephemeris_charts.rendering.labels import LabelBuffer, PlacedLabel
from ephemeris_charts.rendering.projection import Projector, projector_for
from ephemeris_charts.rendering.surface import Surface
from ephemeris_charts.tracks import Track

logger = logging.getLogger(__name__)

FORMAT_POSTSCRIPT = 'ps'
FORMAT_MATPLOTLIB = 'mpl'
_SUFFIX_FORMATS = {
    '.ps': FORMAT_POSTSCRIPT,
    '.eps': FORMAT_POSTSCRIPT,
    '.png': FORMAT_MATPLOTLIB,
    '.pdf': FORMAT_MATPLOTLIB,
    '.svg': FORMAT_MATPLOTLIB,
}
_TITLE_GAP_CM = 0.3


def output_format(path: str | Path) -> str:
    """Output back end for a file name ('ps' or 'mpl').

    Raises:
        ValueError: If the suffix is not a supported chart format.
    """
    suffix = Path(path).suffix.lower()
    if suffix not in _SUFFIX_FORMATS:
        raise ValueError(
            f'Unsupported chart format {suffix!r}; expected one of {", ".join(_SUFFIX_FORMATS)}'
        )
    return _SUFFIX_FORMATS[suffix]


def prepare_chart(
    config: ChartConfig,
    definitions: Sequence[str],
    provider: EphemerisProvider | None = None,
) -> tuple[ChartConfig, list[Track], FrameResult]:
    """Load all tracks and frame the chart around them.

    Parameters:
        config: Caller's chart settings (defaults used if autoscale fails).
        definitions: Trace definitions ``object_id,jd_start,jd_end``.
        provider: Ephemeris source; chosen from config/environment if None.

    Returns:
        (framed config, tracks, frame result).

    Raises:
        ValueError: On a malformed trace definition.
        EphemerisError: If any object yields no data.
    """
    if provider is None:
        provider = default_provider(config.ephemeris_compute_path)
    tracks = fetch_tracks(definitions, provider)
    frame = solve_tracks(tracks)
    return apply_frame(config, frame), tracks, frame


def draw_chart(
    config: ChartConfig,
    tracks: Sequence[Track],
    surface: Surface,
    projector: Projector | None = None,
) -> list[PlacedLabel]:
    """Draw frame, title, and every track with its ticks and labels, then finish the surface.

    All tracks share one page-wide label buffer, so labels avoid every path.

    Returns:
        Labels the resolver placed.
    """
    if projector is None:
        projector = projector_for(config)
    bounds = projector.bounds
    labels = LabelBuffer()
    text_height = TEXT_HEIGHT_CM * config.font_size

    surface.set_colour((0.0, 0.0, 0.0))
    surface.set_line_width(config.line_width_base)
    surface.polyline(
        [
            (bounds.x_min, bounds.y_min),
            (bounds.x_max, bounds.y_min),
            (bounds.x_max, bounds.y_max),
            (bounds.x_min, bounds.y_max),
            (bounds.x_min, bounds.y_min),
        ]
    )
    if config.title.strip():
        surface.text(
            (bounds.x_min + bounds.x_max) / 2.0,
            bounds.y_min - _TITLE_GAP_CM,
            config.title.strip(),
            1.4 * text_height,
            0,
            1,
        )

    for track in tracks:
        initial_theta = render_path(track, projector, bounds, surface, config)
        place_ticks(track, projector, bounds, labels, surface, config, initial_theta)

    placed = labels.resolve(bounds, text_height)
    for label in placed:
        surface.set_colour(label.request.colour)
        surface.text(
            label.position.x,
            label.position.y,
            label.request.text,
            label.request.font_size * text_height,
            label.position.h_align,
            label.position.v_align,
        )
    surface.finish()
    logger.debug('Placed %d labels', len(placed))
    return placed


def render_chart(
    config: ChartConfig,
    definitions: Sequence[str],
    output_path: str | Path,
    provider: EphemerisProvider | None = None,
    fmt: str | None = None,
) -> tuple[ChartConfig, FrameResult, list[PlacedLabel]]:
    """Fetch tracks, frame the chart, and write it to output_path.

    Parameters:
        config: Caller's chart settings.
        definitions: Trace definitions.
        output_path: Chart file (.ps/.eps PostScript; .png/.pdf/.svg via matplotlib).
        provider: Ephemeris source; chosen from config/environment if None.
        fmt: 'ps' or 'mpl'; inferred from output_path if None.

    Returns:
        (framed config, frame result, placed labels).
    """
    fmt = fmt or output_format(output_path)
    if fmt not in (FORMAT_POSTSCRIPT, FORMAT_MATPLOTLIB):
        raise ValueError(f'Unknown chart format {fmt!r}')
    framed, tracks, frame = prepare_chart(config, definitions, provider)
    projector = projector_for(framed)
    if fmt == FORMAT_POSTSCRIPT:
        from ephemeris_charts.rendering.postscript import PostScriptSurface

        with open(output_path, 'w') as f:
            placed = draw_chart(
                framed, tracks, PostScriptSurface(f, projector.bounds, framed.title), projector
            )
    else:
        from ephemeris_charts.rendering.matplotlib_chart import MatplotlibSurface

        placed = draw_chart(framed, tracks, MatplotlibSurface(output_path, projector.bounds), projector)
    return framed, frame, placed
