# convert.py – scalar conversions between the picker's color spaces
#   - HSV is canonical: h in degrees [0,360], s and v in percent [0,100]
#   - RGB channels are 0..255, HSL and CMYK channels are percent
#   - rounding is half-up everywhere (JS Math.round semantics)

from __future__ import annotations

from math import floor
from typing import Tuple

Triplet = Tuple[float, float, float]

HEX_DIGITS = "0123456789abcdefABCDEF"


# --- rounding ----------------------------------------------------------------
def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; 0.5 must always go up here.
    return int(floor(x + 0.5))


def round_to(x: float, places: int) -> float:
    scale = 10**places
    return round_half_up(x * scale) / scale


def fmt_number(x: float, places: int = 2) -> str:
    # at most `places` decimals, no trailing zeros: 0.5 -> "0.5", 1.0 -> "1"
    return f"{round_to(x, places):g}"


# --- HSV <-> RGB -------------------------------------------------------------
def hsv_to_rgb(h: float, s: float, v: float) -> Triplet:
    """HSV → unrounded RGB in [0,255]. h=360 wraps onto h=0."""
    h = (h % 360.0) / 60.0
    s /= 100.0
    v /= 100.0

    i = min(int(h), 5)
    f = h - i
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)

    r, g, b = ((v, t, p), (q, v, p), (p, v, t), (p, q, v), (t, p, v), (v, p, q))[i]
    return r * 255.0, g * 255.0, b * 255.0


def rgb_to_hsv(r: float, g: float, b: float) -> Triplet:
    """RGB in [0,255] → HSV with h in [0,360). Achromatic input reports h=0."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    mx = max(r, g, b)
    delta = mx - min(r, g, b)

    if delta == 0:
        h = 0.0
    elif mx == r:
        h = ((g - b) / delta) % 6.0
    elif mx == g:
        h = (b - r) / delta + 2.0
    else:
        h = (r - g) / delta + 4.0

    s = 0.0 if mx == 0 else delta / mx
    return h * 60.0, s * 100.0, mx * 100.0


# --- HSV <-> HSL -------------------------------------------------------------
def hsv_to_hsl(h: float, s: float, v: float) -> Triplet:
    s /= 100.0
    v /= 100.0
    l = v * (1.0 - s / 2.0)
    sl = 0.0 if l <= 0.0 or l >= 1.0 else (v - l) / min(l, 1.0 - l)
    return h, sl * 100.0, l * 100.0


def hsl_to_hsv(h: float, s: float, l: float) -> Triplet:
    s /= 100.0
    l /= 100.0
    v = min(l + s * min(l, 1.0 - l), 1.0)
    sv = 0.0 if v <= 0.0 else min(2.0 * (1.0 - l / v), 1.0)
    return h, sv * 100.0, v * 100.0


# --- RGB -> CMYK -------------------------------------------------------------
def rgb_to_cmyk(r: float, g: float, b: float) -> Tuple[float, float, float, float]:
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    k = 1.0 - max(r, g, b)
    if k >= 1.0:
        # pure black: chromatic channels are undefined, report them as 0
        return 0.0, 0.0, 0.0, 100.0

    c = (1.0 - r - k) / (1.0 - k)
    m = (1.0 - g - k) / (1.0 - k)
    y = (1.0 - b - k) / (1.0 - k)
    return c * 100.0, m * 100.0, y * 100.0, k * 100.0


# --- hex ---------------------------------------------------------------------
def rgba_to_hex(r: int, g: int, b: int, a: float) -> str:
    """Lowercase '#rrggbbaa'; alpha is scaled from [0,1] to [0,255]."""
    return f"#{r:02x}{g:02x}{b:02x}{round_half_up(a * 255.0):02x}"


def hex_to_rgba(digits: str) -> Tuple[int, int, int, float]:
    """Decode 3, 6 or 8 hex digits (no leading '#') into r, g, b, a."""
    raw = digits.strip().lstrip("#")
    if not raw or not all(c in HEX_DIGITS for c in raw):
        raise ValueError(f"invalid hex: {digits!r}")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) not in (6, 8):
        raise ValueError(f"hex must be 3, 6 or 8 digits: {digits!r}")

    r, g, b = (int(raw[i : i + 2], 16) for i in (0, 2, 4))
    a = int(raw[6:8], 16) / 255.0 if len(raw) == 8 else 1.0
    return r, g, b, a


__all__ = [
    "round_half_up",
    "round_to",
    "fmt_number",
    "hsv_to_rgb",
    "rgb_to_hsv",
    "hsv_to_hsl",
    "hsl_to_hsv",
    "rgb_to_cmyk",
    "rgba_to_hex",
    "hex_to_rgba",
]
