"""Drawing surface interface shared by the PostScript and matplotlib back ends."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class Surface(Protocol):
    """Path and text primitives in canvas coordinates (cm, y downward)."""

    def set_colour(self, rgb: tuple[float, float, float]) -> None: ...

    def set_line_width(self, width: float) -> None: ...

    def polyline(self, points: Sequence[tuple[float, float]]) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        h_align: int = 0,
        v_align: int = 0,
    ) -> None: ...

    def finish(self) -> None: ...
