"""Shared fixtures: a Jupiter-like ephemeris and a recording drawing surface."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from ephemeris_charts.params import TraceSpec

# 60 days from 2020-01-01 06:00 at the fixed half-day cadence, drifting east and north
JUPITER_JD_START = 2458849.75
JUPITER_ROWS = 120
JUPITER_TRACE = f'jupiter,{JUPITER_JD_START},{JUPITER_JD_START + 0.5 * (JUPITER_ROWS - 1)}'


def jupiter_rows() -> list[str]:
    rows = ['# jd ra dec']
    for i in range(JUPITER_ROWS):
        jd = JUPITER_JD_START + 0.5 * i
        ra = 1.0 + 0.3 * i / (JUPITER_ROWS - 1)
        dec = 0.1 + 0.1 * i / (JUPITER_ROWS - 1)
        rows.append(f'{jd:.6f} {ra:.9f} {dec:.9f} 5.20 -2.1')
    return rows


class StaticProvider:
    """Ephemeris provider serving canned lines for every object."""

    def __init__(self, lines: Sequence[str]) -> None:
        self.lines = list(lines)
        self.specs: list[TraceSpec] = []

    def fetch_lines(self, spec: TraceSpec) -> Iterator[str]:
        self.specs.append(spec)
        yield from self.lines


class RecordingSurface:
    """Surface that records drawing calls instead of rendering them."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.polylines: list[list[tuple[float, float]]] = []
        self.lines: list[tuple[float, float, float, float]] = []
        self.texts: list[tuple[float, float, str, float, int, int]] = []
        self.finished = False

    def set_colour(self, rgb: tuple[float, float, float]) -> None:
        self.calls.append(('colour', rgb))

    def set_line_width(self, width: float) -> None:
        self.calls.append(('line_width', width))

    def polyline(self, points: Sequence[tuple[float, float]]) -> None:
        self.calls.append(('polyline', len(points)))
        self.polylines.append(list(points))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.calls.append(('line', None))
        self.lines.append((x1, y1, x2, y2))

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        h_align: int = 0,
        v_align: int = 0,
    ) -> None:
        self.calls.append(('text', text))
        self.texts.append((x, y, text, size, h_align, v_align))

    def finish(self) -> None:
        self.finished = True


@pytest.fixture
def jupiter_provider() -> StaticProvider:
    return StaticProvider(jupiter_rows())


@pytest.fixture
def ephemeris_dir(tmp_path: Path) -> Path:
    """Directory holding jupiter.txt in generator output format."""
    (tmp_path / 'jupiter.txt').write_text('\n'.join(jupiter_rows()) + '\n')
    return tmp_path


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()
