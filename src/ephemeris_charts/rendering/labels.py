"""Page-wide label buffer: exclusion regions and collision-avoiding label placement.

Drawing code registers exclusion regions (areas labels must avoid) and submits
label requests, each offering several candidate anchor positions. Once everything
is drawn, resolve() places labels in priority order (lower value first), taking
the first candidate that fits on the canvas without colliding with an exclusion
region or a label already placed. Labels with no free candidate are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ephemeris_charts.rendering.projection import CanvasBounds

logger = logging.getLogger(__name__)

# Text box estimate: character advance and margin unit as fractions of text height
CHAR_WIDTH_FRAC = 0.6
MARGIN_UNIT_FRAC = 0.05


@dataclass(frozen=True)
class ExclusionRegion:
    """Axis-aligned rectangle in canvas coordinates that labels must avoid."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @classmethod
    def around(cls, x: float, y: float, half_size: float) -> ExclusionRegion:
        """Square of side 2 * half_size centred on (x, y)."""
        return cls(x - half_size, x + half_size, y - half_size, y + half_size)

    def overlaps(self, other: ExclusionRegion) -> bool:
        """True if the two rectangles share interior area."""
        return (
            self.x_min < other.x_max
            and other.x_min < self.x_max
            and self.y_min < other.y_max
            and other.y_min < self.y_max
        )

    def inside(self, bounds: CanvasBounds) -> bool:
        return (
            self.x_min >= bounds.x_min
            and self.x_max <= bounds.x_max
            and self.y_min >= bounds.y_min
            and self.y_max <= bounds.y_max
        )


@dataclass(frozen=True)
class LabelPosition:
    """Candidate text anchor.

    h_align: -1 left edge at anchor, 0 centred, 1 right edge at anchor.
    v_align: -1 top edge at anchor, 0 middle, 1 bottom edge at anchor.
    """

    x: float
    y: float
    rotation: float
    h_align: int
    v_align: int


@dataclass(frozen=True)
class LabelRequest:
    """A label to place at one of several candidate positions (lower priority wins)."""

    text: str
    colour: tuple[float, float, float]
    positions: tuple[LabelPosition, ...]
    font_size: float
    extra_margin: float
    priority: float
    visible: bool = True


@dataclass(frozen=True)
class PlacedLabel:
    """A label the resolver accepted, with its chosen position and footprint."""

    request: LabelRequest
    position: LabelPosition
    box: ExclusionRegion


def text_box(
    text: str,
    position: LabelPosition,
    font_size: float,
    text_height: float,
    extra_margin: float = 0.0,
) -> ExclusionRegion:
    """Estimated footprint of text anchored at position, grown by extra_margin units.

    Parameters:
        text: Label text.
        position: Anchor and alignment.
        font_size: Font scale relative to text_height.
        text_height: Canvas height of text at font scale 1.
        extra_margin: Margin in units of MARGIN_UNIT_FRAC * text height.
    """
    height = text_height * font_size
    width = CHAR_WIDTH_FRAC * height * len(text)
    x0 = position.x - (position.h_align + 1) * width / 2.0
    y0 = position.y - (position.v_align + 1) * height / 2.0
    margin = extra_margin * MARGIN_UNIT_FRAC * height
    return ExclusionRegion(x0 - margin, x0 + width + margin, y0 - margin, y0 + height + margin)


@dataclass
class LabelBuffer:
    """Append-only exclusion regions plus pending label requests for one page."""

    exclusion_regions: list[ExclusionRegion] = field(default_factory=list)
    requests: list[LabelRequest] = field(default_factory=list)

    def add_exclusion(self, region: ExclusionRegion) -> None:
        self.exclusion_regions.append(region)

    def submit(self, request: LabelRequest) -> None:
        """Queue a label; the resolver decides its final position or drops it."""
        self.requests.append(request)

    def _collides(self, box: ExclusionRegion) -> bool:
        return any(box.overlaps(region) for region in self.exclusion_regions)

    def resolve(self, bounds: CanvasBounds, text_height: float) -> list[PlacedLabel]:
        """Place queued labels in priority order (ties in submission order).

        Each placed label's footprint is appended to the exclusion regions.

        Parameters:
            bounds: Canvas area labels must stay within.
            text_height: Canvas height of text at font scale 1.

        Returns:
            Placed labels, highest priority first.
        """
        placed: list[PlacedLabel] = []
        order = sorted(range(len(self.requests)), key=lambda i: (self.requests[i].priority, i))
        for i in order:
            request = self.requests[i]
            if not request.visible:
                continue
            for position in request.positions:
                box = text_box(
                    request.text, position, request.font_size, text_height, request.extra_margin
                )
                if box.inside(bounds) and not self._collides(box):
                    self.add_exclusion(box)
                    placed.append(PlacedLabel(request=request, position=position, box=box))
                    break
            else:
                logger.debug('Dropped label %r: no free position', request.text)
        self.requests.clear()
        return placed
