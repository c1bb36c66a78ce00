"""Matplotlib-based chart surface (alternative to PostScript) for PNG, PDF and SVG output."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ephemeris_charts.rendering.postscript import CAP_HEIGHT_FRAC
from ephemeris_charts.rendering.projection import CanvasBounds

CM_PER_INCH = 2.54
POINTS_PER_INCH = 72.0
MARGIN_CM = 1.0
_H_ALIGN = {-1: 'left', 0: 'center', 1: 'right'}
_V_ALIGN = {-1: 'top', 0: 'center', 1: 'bottom'}


class MatplotlibSurface:
    """Agg figure sized to the canvas; saved to path on finish()."""

    def __init__(
        self,
        path: str | Path,
        bounds: CanvasBounds,
        dpi: int = 150,
    ) -> None:
        try:
            import matplotlib

            matplotlib.use('Agg')
            import matplotlib.pyplot as plt
        except ImportError:
            raise ImportError('matplotlib is required for MatplotlibSurface') from None
        self._plt = plt
        self._path = Path(path)
        self._dpi = dpi
        self._colour: tuple[float, float, float] = (0.0, 0.0, 0.0)
        self._line_width = 1.0
        fig_w = (bounds.width + 2 * MARGIN_CM) / CM_PER_INCH
        fig_h = (bounds.height + 2 * MARGIN_CM) / CM_PER_INCH
        self.fig = plt.figure(figsize=(fig_w, fig_h))
        self.ax = self.fig.add_axes(
            (
                MARGIN_CM / CM_PER_INCH / fig_w,
                MARGIN_CM / CM_PER_INCH / fig_h,
                bounds.width / CM_PER_INCH / fig_w,
                bounds.height / CM_PER_INCH / fig_h,
            )
        )
        self.ax.set_xlim(bounds.x_min, bounds.x_max)
        # Canvas y increases downward
        self.ax.set_ylim(bounds.y_max, bounds.y_min)
        self.ax.axis('off')

    def set_colour(self, rgb: tuple[float, float, float]) -> None:
        self._colour = rgb

    def set_line_width(self, width: float) -> None:
        """Set line width in points."""
        self._line_width = width

    def polyline(self, points: Sequence[tuple[float, float]]) -> None:
        if len(points) < 2:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self.ax.plot(xs, ys, color=self._colour, linewidth=self._line_width, clip_on=True)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
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
        fontsize = size / CAP_HEIGHT_FRAC / CM_PER_INCH * POINTS_PER_INCH
        self.ax.text(
            x,
            y,
            text,
            color=self._colour,
            fontsize=fontsize,
            ha=_H_ALIGN[h_align],
            va=_V_ALIGN[v_align],
        )

    def finish(self) -> None:
        """Save the figure and release it."""
        self.fig.savefig(self._path, dpi=self._dpi)
        self._plt.close(self.fig)
