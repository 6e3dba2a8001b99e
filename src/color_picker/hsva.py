from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, NamedTuple, Tuple

from .convert import (
    hsv_to_hsl,
    hsv_to_rgb,
    rgb_to_cmyk,
    rgba_to_hex,
    fmt_number,
    round_half_up,
)
from .errors import InvalidRange

Hue = float
Percent = float
Alpha = float

DOMAINS: Dict[str, Tuple[float, float]] = {
    "h": (0.0, 360.0),
    "s": (0.0, 100.0),
    "v": (0.0, 100.0),
    "a": (0.0, 1.0),
}


class RGBa(NamedTuple):
    r: int
    g: int
    b: int
    a: Alpha


class HSLa(NamedTuple):
    h: Hue
    s: Percent
    l: Percent
    a: Alpha


class CMYK(NamedTuple):
    c: Percent
    m: Percent
    y: Percent
    k: Percent


def check_range(channel: str, value: float) -> float:
    lo, hi = DOMAINS[channel]
    # written so that NaN fails too
    if not lo <= value <= hi:
        raise InvalidRange(channel, value, (lo, hi))
    return value


@dataclass(frozen=True)
class HSVaColor:
    """Canonical picker color.

    Instances are immutable; the picker replaces its color rather than
    editing it, so any reference handed to a callback stays consistent.
    Every derived representation is computed from (h, s, v, a) on demand.
    """

    h: Hue = 0.0
    s: Percent = 0.0
    v: Percent = 0.0
    a: Alpha = 1.0

    def __post_init__(self) -> None:
        for channel in "hsva":
            check_range(channel, getattr(self, channel))

    @classmethod
    def from_hsva(cls, h: Hue, s: Percent, v: Percent, a: Alpha = 1.0) -> "HSVaColor":
        """Build a color, raising InvalidRange if any channel is out of domain."""
        return cls(float(h), float(s), float(v), float(a))

    # ---- derived representations ----

    def to_hsva(self) -> Tuple[Hue, Percent, Percent, Alpha]:
        return self.h, self.s, self.v, self.a

    def to_rgba(self) -> RGBa:
        r, g, b = hsv_to_rgb(self.h, self.s, self.v)
        return RGBa(round_half_up(r), round_half_up(g), round_half_up(b), self.a)

    def to_hexa(self) -> str:
        r, g, b, a = self.to_rgba()
        return rgba_to_hex(r, g, b, a)

    def to_hsla(self) -> HSLa:
        h, s, l = hsv_to_hsl(self.h, self.s, self.v)
        return HSLa(h, s, l, self.a)

    def to_cmyk(self) -> CMYK:
        r, g, b, _ = self.to_rgba()
        return CMYK(*rgb_to_cmyk(r, g, b))

    # ---- CSS-style strings ----

    def to_rgba_string(self) -> str:
        r, g, b, a = self.to_rgba()
        return f"rgba({r}, {g}, {b}, {fmt_number(a)})"

    def to_hsla_string(self) -> str:
        h, s, l, a = self.to_hsla()
        return (
            f"hsla({round_half_up(h)}, {round_half_up(s)}%, "
            f"{round_half_up(l)}%, {fmt_number(a)})"
        )

    def to_cmyk_string(self) -> str:
        c, m, y, k = (round_half_up(x) for x in self.to_cmyk())
        return f"cmyk({c}%, {m}%, {y}%, {k}%)"

    def format(self, kind: str) -> str:
        """Render in one of the output formats; unknown kinds give ''."""
        render = FORMATS.get(kind)
        return render(self) if render else ""

    def clone(self) -> "HSVaColor":
        return replace(self)


FORMATS: Dict[str, Callable[[HSVaColor], str]] = {
    "hex": HSVaColor.to_hexa,
    "rgba": HSVaColor.to_rgba_string,
    "hsla": HSVaColor.to_hsla_string,
    "cmyk": HSVaColor.to_cmyk_string,
}


__all__ = ["HSVaColor", "RGBa", "HSLa", "CMYK", "FORMATS", "DOMAINS", "check_range"]
