"""PostScript drawing surface: EPS output of chart paths and text."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TextIO

from ephemeris_charts.constants import POINTS_PER_CM
from ephemeris_charts.rendering.projection import CanvasBounds

# Page margin around the canvas (points); cap height as a fraction of font size
MARGIN_PTS = 36.0
CAP_HEIGHT_FRAC = 0.7


def ps_string(s: str) -> str:
    """Escape backslash and parentheses for PostScript and wrap in parentheses.

    Unicode degree (U+00B0) is written as \\260 so PostScript shows one glyph.
    """
    temp = s.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')
    temp = temp.replace('°', '\\260')
    return f'({temp})'


class PostScriptSurface:
    """EPS device for one chart. Canvas cm (y downward) map to points (y upward)."""

    def __init__(self, stream: TextIO, bounds: CanvasBounds, title: str = '') -> None:
        self._stream = stream
        self._bounds = bounds
        self._line_width = 1.0
        self._rgb = (0.0, 0.0, 0.0)
        self._header(title)

    def _emit(self, s: str) -> None:
        self._stream.write(s + '\n')

    def to_device(self, x: float, y: float) -> tuple[float, float]:
        """Canvas (x, y) in cm to page coordinates in points."""
        px = MARGIN_PTS + (x - self._bounds.x_min) * POINTS_PER_CM
        py = MARGIN_PTS + (self._bounds.y_max - y) * POINTS_PER_CM
        return px, py

    def _header(self, title: str) -> None:
        width_pt = self._bounds.width * POINTS_PER_CM + 2 * MARGIN_PTS
        height_pt = self._bounds.height * POINTS_PER_CM + 2 * MARGIN_PTS
        self._emit('%!PS-Adobe-3.0 EPSF-3.0')
        self._emit(f'%%Title: {title or "Ephemeris chart"}')
        self._emit('%%Creator: ephemeris_charts')
        self._emit(f'%%CreationDate: {datetime.now().strftime("%a %b %d %H:%M:%S %Y")}')
        self._emit(f'%%BoundingBox: 0 0 {int(width_pt + 0.5)} {int(height_pt + 0.5)}')
        self._emit('%%Pages: 1')
        self._emit('%%DocumentFonts: Helvetica')
        self._emit('%%EndComments')
        self._emit('1 setlinejoin 1 setlinecap')
        # Aligned text: (string) h v size x y AT
        # h: -1 left, 0 centre, 1 right; v: -1 top, 0 middle, 1 bottom edge at (x, y)
        self._emit('/AT {moveto /Helvetica findfont exch scalefont setfont')
        self._emit('  /v exch def /h exch def dup stringwidth pop')
        self._emit('  h 1 add -0.5 mul mul')
        self._emit('  currentfont /FontMatrix get 3 get 0.7 mul 1000 mul v 1 sub 0.5 mul mul')
        self._emit('  rmoveto show} def')
        self._emit('%%EndProlog')

    def set_colour(self, rgb: tuple[float, float, float]) -> None:
        """Set stroke and fill colour (components 0..1)."""
        self._rgb = rgb
        self._emit(f'{rgb[0]:.3f} {rgb[1]:.3f} {rgb[2]:.3f} setrgbcolor')

    def set_line_width(self, width: float) -> None:
        """Set line width in points."""
        self._line_width = width
        self._emit(f'{width:.2f} setlinewidth')

    def polyline(self, points: Sequence[tuple[float, float]]) -> None:
        """Stroke a connected path through points."""
        if len(points) < 2:
            return
        x, y = self.to_device(*points[0])
        self._emit(f'newpath {x:.2f} {y:.2f} moveto')
        for point in points[1:]:
            x, y = self.to_device(*point)
            self._emit(f'{x:.2f} {y:.2f} lineto')
        self._emit('stroke')

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Draw a single line segment."""
        self.polyline([(x1, y1), (x2, y2)])

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        h_align: int = 0,
        v_align: int = 0,
    ) -> None:
        """Draw text anchored at (x, y); size is the text height in cm."""
        px, py = self.to_device(x, y)
        size_pt = size / CAP_HEIGHT_FRAC * POINTS_PER_CM
        self._emit(f'{ps_string(text)} {h_align} {v_align} {size_pt:.2f} {px:.2f} {py:.2f} AT')

    def finish(self) -> None:
        """Write PostScript trailer."""
        self._emit('showpage')
        self._emit('%%Trailer')
        self._emit('%%EOF')
