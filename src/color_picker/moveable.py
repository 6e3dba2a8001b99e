from __future__ import annotations

import logging
from dataclasses import dataclass
from math import isfinite
from typing import Callable, Tuple

from .errors import DegenerateSurface

log = logging.getLogger(__name__)

Offset = Tuple[float, float]
ChangeFn = Callable[[float, float], None]  # (x, y) in surface pixels
GeometryFn = Callable[[], "Rect"]  # queried live on every interaction


@dataclass(frozen=True)
class Rect:
    """Bounding rectangle of a surface, in viewport pixels."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative surface size {self.width}x{self.height}")


@dataclass(frozen=True)
class PointerEvent:
    """Pointer or touch position relative to the viewport."""

    client_x: float
    client_y: float


def _clamp(x: float, hi: float) -> float:
    return 0.0 if x < 0.0 else hi if x > hi else x


def _ratio(x: float, extent: float) -> float:
    if extent <= 0.0:
        raise DegenerateSurface(f"cannot normalise {x} on a zero-size axis")
    return x / extent


class Moveable:
    """Maps a pointer drag over a bounded surface to a clamped offset.

    The mapper knows nothing about colors: its owner supplies ``on_change``
    and interprets ``(x, y)`` however it likes. Positions are always taken
    relative to the surface's current top-left corner, never as deltas, so
    a long drag cannot accumulate drift.
    """

    def __init__(
        self,
        geometry: GeometryFn,
        on_change: ChangeFn,
        *,
        lock_x: bool = False,
        lock_y: bool = False,
        name: str = "surface",
    ) -> None:
        self.geometry = geometry
        self.on_change = on_change
        self.lock_x = lock_x
        self.lock_y = lock_y
        self.name = name
        self._offset: Offset = (0.0, 0.0)
        self._engaged = False

    @property
    def offset(self) -> Offset:
        return self._offset

    @property
    def engaged(self) -> bool:
        return self._engaged

    # ---- pointer lifecycle ----

    def begin(self, event: PointerEvent) -> None:
        # a tap jumps the handle to the tapped point
        self._engaged = True
        self.move(event)

    def move(self, event: PointerEvent) -> None:
        if not self._engaged:
            return
        rect = self.geometry()
        self._apply(event.client_x - rect.left, event.client_y - rect.top, rect)

    def end(self) -> None:
        self._engaged = False

    # ---- programmatic access ----

    def update(self, x: float = 0.0, y: float = 0.0) -> None:
        """Reposition without a drag; indistinguishable from one for the owner."""
        self._apply(x, y, self.geometry())

    def trigger(self) -> None:
        self.on_change(*self._offset)

    def fraction(self) -> Offset:
        """Offset as (x/width, y/height); a zero-size axis reports 0."""
        rect = self.geometry()
        x, y = self._offset
        try:
            fx = _ratio(x, rect.width)
        except DegenerateSurface:
            fx = 0.0
        try:
            fy = _ratio(y, rect.height)
        except DegenerateSurface:
            fy = 0.0
        # a shrunk surface can leave a stale offset past its edge
        return min(fx, 1.0), min(fy, 1.0)

    def _apply(self, x: float, y: float, rect: Rect) -> None:
        if not (self.lock_x or isfinite(x)) or not (self.lock_y or isfinite(y)):
            log.debug("%s ignoring non-finite position (%r, %r)", self.name, x, y)
            return
        x = 0.0 if self.lock_x else _clamp(x, rect.width)
        y = 0.0 if self.lock_y else _clamp(y, rect.height)
        self._offset = (x, y)
        log.debug("%s offset -> (%.1f, %.1f)", self.name, x, y)
        self.on_change(x, y)


__all__ = ["Moveable", "Rect", "PointerEvent"]
