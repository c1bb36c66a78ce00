"""Tests for track path, tick, and tick-label drawing."""

from __future__ import annotations

import math

import pytest
from conftest import RecordingSurface

from ephemeris_charts.params import ChartConfig, TraceSpec
from ephemeris_charts.rendering.draw_tracks import (
    alignment_for_direction,
    label_priority,
    place_ticks,
    render_path,
    tick_length,
)
from ephemeris_charts.rendering.labels import LabelBuffer
from ephemeris_charts.rendering.projection import CanvasBounds
from ephemeris_charts.tracks import LabelledSample, Track

BOUNDS = CanvasBounds(0.0, 10.0, 0.0, 10.0)


class _PlaneProjector:
    """Treats (ra, dec) as canvas (x, y) directly."""

    bounds = BOUNDS

    def project(self, ra: float, dec: float) -> tuple[float, float]:
        return ra, dec


def _track(*samples: LabelledSample) -> Track:
    return Track(TraceSpec('test', 0.0, 1.0), samples)


def _point(x: float, y: float, label: str | None = None, **kwargs: object) -> LabelledSample:
    return LabelledSample(0.0, x, y, text_label=label, **kwargs)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ('theta', 'expected'),
    [
        (0.0, (0, 1)),
        (45.0, (-1, 1)),
        (90.0, (-1, 0)),
        (135.0, (-1, -1)),
        (180.0, (0, -1)),
        (-180.0, (0, -1)),
        (-135.0, (1, -1)),
        (-90.0, (1, 0)),
        (-45.0, (1, 1)),
    ],
)
def test_alignment_for_direction(theta: float, expected: tuple[int, int]) -> None:
    """Each 45 degree sector aligns the label to read away from the tick."""
    assert alignment_for_direction(theta) == expected


def test_label_priority_ordering() -> None:
    """Month starts beat weeks; day 14 beats later days; January beats February."""
    jan = _point(0, 0, 'Jan 2020', day=1, month=1, year=2020)
    feb = _point(0, 0, 'Feb', day=1, month=2, year=2020)
    d14 = _point(0, 0, '14', day=14, month=2, year=2020, is_minor_tick=True)
    d21 = _point(0, 0, '21', day=21, month=2, year=2020, is_minor_tick=True)
    assert label_priority(5, jan) < label_priority(5, feb)
    assert label_priority(5, feb) < label_priority(5, d14)
    assert label_priority(5, d14) < label_priority(5, d21)
    assert label_priority(5, d21) < label_priority(6, d21)
    major14 = _point(0, 0, 'x', day=14, month=5, year=2020)
    major20 = _point(0, 0, 'x', day=20, month=5, year=2020)
    assert label_priority(5, major14) < label_priority(5, major20)


def test_tick_length_scales_with_canvas() -> None:
    """Ticks are 0.2 cm (major) and 0.12 cm (minor) at physical chart width."""
    config = ChartConfig(width=20.0)
    assert tick_length(_point(0, 0, 'Feb'), BOUNDS, config) == pytest.approx(0.1)
    minor = _point(0, 0, '7', is_minor_tick=True)
    assert tick_length(minor, BOUNDS, config) == pytest.approx(0.06)


def test_render_path_splits_at_off_canvas_points(recording_surface: RecordingSurface) -> None:
    """Off-canvas and unprojectable samples lift the pen between segments."""
    track = _track(
        _point(1, 1),
        _point(2, 2),
        _point(3, 3),
        _point(20, 3),
        _point(5, 5),
        _point(6, 5),
        _point(math.nan, math.nan),
        _point(8, 8),
    )
    theta = render_path(track, _PlaneProjector(), BOUNDS, recording_surface, ChartConfig())
    assert recording_surface.polylines == [[(1, 1), (2, 2), (3, 3)], [(5, 5), (6, 5)]]
    assert theta == pytest.approx(math.pi / 4)


def test_place_ticks_exclusions_and_requests(recording_surface: RecordingSurface) -> None:
    """Every point reserves space; on-canvas labelled points get ticks and four candidates."""
    track = _track(
        _point(1, 5, 'Jan 2020', day=1, month=1, year=2020),
        _point(2, 5),
        _point(3, 5, '7', day=7, month=1, year=2020, is_minor_tick=True),
        _point(4, 5),
        _point(40, 5, '14', day=14, month=1, year=2020, is_minor_tick=True),
    )
    labels = LabelBuffer()
    requests = place_ticks(
        track, _PlaneProjector(), BOUNDS, labels, recording_surface, ChartConfig(width=10.0)
    )
    assert [r.text for r in requests] == ['Jan 2020', '7']
    assert labels.requests == requests
    # 5 point exclusions + 2 tick exclusions
    assert len(labels.exclusion_regions) == 7
    assert len(recording_surface.lines) == 2
    assert all(len(r.positions) == 4 for r in requests)
    assert requests[0].font_size == pytest.approx(1.7)
    assert requests[1].font_size == pytest.approx(1.3)
    assert requests[1].extra_margin == pytest.approx(2.0)
    assert requests[0].priority < requests[1].priority


def test_place_ticks_geometry(recording_surface: RecordingSurface) -> None:
    """A track heading +x gets a vertical tick and labels above and below it."""
    track = _track(
        _point(4, 5),
        _point(5, 5, 'Mar', day=1, month=3, year=2020),
        _point(6, 5),
    )
    labels = LabelBuffer()
    (request,) = place_ticks(
        track, _PlaneProjector(), BOUNDS, labels, recording_surface, ChartConfig(width=10.0)
    )
    x1, y1, x2, y2 = recording_surface.lines[0]
    assert (x1, y1) == (pytest.approx(5.0), pytest.approx(4.8))
    assert (x2, y2) == (pytest.approx(5.0), pytest.approx(5.2))
    near, near_mirror, far, far_mirror = request.positions
    assert (near.x, near.y) == (pytest.approx(5.0), pytest.approx(5.0 - 0.3))
    assert (near.h_align, near.v_align) == (0, 1)
    assert (near_mirror.y, near_mirror.v_align) == (pytest.approx(5.3), -1)
    assert far.y == pytest.approx(5.0 - 0.37)
    assert far_mirror.y == pytest.approx(5.37)


def test_place_ticks_repeated_point_defaults_direction(recording_surface: RecordingSurface) -> None:
    """A repeated sample has no direction of travel; theta falls back to 0."""
    track = _track(
        _point(math.nan, math.nan),
        _point(math.nan, math.nan),
        _point(5, 5),
        _point(5, 5, 'Apr', day=1, month=4, year=2020),
    )
    (request,) = place_ticks(
        track, _PlaneProjector(), BOUNDS, LabelBuffer(), recording_surface, ChartConfig(width=10.0)
    )
    assert (request.positions[0].h_align, request.positions[0].v_align) == (0, 1)
