"""Sky-to-canvas projections for chart framing (gnomonic and flat).

Canvas coordinates are centimetres with the origin at the top-left corner and y
increasing downward; north is up and east is to the left.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from ephemeris_charts.constants import DEGREES_PER_HOUR_RA
from ephemeris_charts.params import PROJECTION_FLAT, PROJECTION_GNOMONIC, ChartConfig


@dataclass(frozen=True)
class CanvasBounds:
    """Visible chart area in canvas coordinates."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside or on the edge; NaN is outside."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


class Projector(Protocol):
    """Maps (ra, dec) in radians onto the canvas."""

    bounds: CanvasBounds

    def project(self, ra: float, dec: float) -> tuple[float, float]: ...


class _CanvasProjector:
    """Common scaling from a projection plane onto a width x (width * aspect) canvas."""

    def __init__(
        self,
        ra0_hours: float,
        dec0_deg: float,
        angular_width_deg: float,
        width_cm: float,
        aspect: float,
    ) -> None:
        if width_cm <= 0 or aspect <= 0:
            raise ValueError(f'Invalid canvas size: width {width_cm}, aspect {aspect}')
        self.ra0 = math.radians(ra0_hours * DEGREES_PER_HOUR_RA)
        self.dec0 = math.radians(dec0_deg)
        self.angular_width = angular_width_deg
        self.bounds = CanvasBounds(0.0, width_cm, 0.0, width_cm * aspect)
        self._scale = width_cm / self._plane_width()

    def _plane_width(self) -> float:
        raise NotImplementedError

    def _plane(self, ra: float, dec: float) -> tuple[float, float]:
        raise NotImplementedError

    def project(self, ra: float, dec: float) -> tuple[float, float]:
        """Canvas (x, y) of a sky position; (nan, nan) if it cannot be projected."""
        xi, eta = self._plane(ra, dec)
        x = self.bounds.width / 2.0 - xi * self._scale
        y = self.bounds.height / 2.0 - eta * self._scale
        return x, y


class GnomonicProjector(_CanvasProjector):
    """Tangent-plane projection about the chart centre, for narrow fields."""

    def __init__(
        self,
        ra0_hours: float,
        dec0_deg: float,
        angular_width_deg: float,
        width_cm: float,
        aspect: float,
    ) -> None:
        if not 0 < angular_width_deg < 180:
            raise ValueError(
                f'Gnomonic projection needs 0 < angular width < 180 degrees; '
                f'got {angular_width_deg}'
            )
        super().__init__(ra0_hours, dec0_deg, angular_width_deg, width_cm, aspect)

    def _plane_width(self) -> float:
        return 2.0 * math.tan(math.radians(self.angular_width) / 2.0)

    def _plane(self, ra: float, dec: float) -> tuple[float, float]:
        dra = ra - self.ra0
        sin_d, cos_d = math.sin(dec), math.cos(dec)
        sin_d0, cos_d0 = math.sin(self.dec0), math.cos(self.dec0)
        cos_c = sin_d0 * sin_d + cos_d0 * cos_d * math.cos(dra)
        if not cos_c > 1e-12:
            # Behind the tangent plane
            return math.nan, math.nan
        xi = cos_d * math.sin(dra) / cos_c
        eta = (cos_d0 * sin_d - sin_d0 * cos_d * math.cos(dra)) / cos_c
        return xi, eta


class FlatProjector(_CanvasProjector):
    """Plate carree (cylindrical) projection about the chart centre, for wide fields."""

    def _plane_width(self) -> float:
        if self.angular_width <= 0:
            raise ValueError(f'Invalid angular width {self.angular_width}')
        return self.angular_width

    def _plane(self, ra: float, dec: float) -> tuple[float, float]:
        dra_deg = math.degrees(ra - self.ra0)
        xi = (dra_deg + 180.0) % 360.0 - 180.0
        eta = math.degrees(dec - self.dec0)
        return xi, eta


def projector_for(config: ChartConfig) -> GnomonicProjector | FlatProjector:
    """Build the projector selected by config.projection.

    Raises:
        ValueError: On an unknown projection or invalid framing.
    """
    args = (config.ra0, config.dec0, config.angular_width, config.width, config.aspect)
    if config.projection == PROJECTION_GNOMONIC:
        return GnomonicProjector(*args)
    if config.projection == PROJECTION_FLAT:
        return FlatProjector(*args)
    raise ValueError(f'Unknown projection {config.projection!r}')
