"""Best-effort lexer for color text typed into the picker's output field.

Three syntaxes are recognised, each as a tagged variant with its own pattern
and converter to HSVa:

  hex   ``#rgb``, ``#rrggbb``, ``#rrggbbaa`` (the ``#`` is optional)
  rgb   ``rgb(r, g, b)`` / ``rgba(r, g, b, a)``
  hsl   ``hsl(h, s%, l%)`` / ``hsla(h, s%, l%, a)``

Matching ignores case and surrounding or interior whitespace.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from .convert import hex_to_rgba, hsl_to_hsv, rgb_to_hsv
from .errors import UnparsableText

log = logging.getLogger(__name__)

HSVa = Tuple[float, float, float, float]

_NUM = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)"
_SEP = r"\s*,\s*"


class Syntax(str, Enum):
    HEX = "hex"
    RGB = "rgb"
    HSL = "hsl"


class Parsed(NamedTuple):
    syntax: Syntax
    hsva: HSVa


PATTERNS: Dict[Syntax, "re.Pattern[str]"] = {
    Syntax.HEX: re.compile(r"#?([0-9a-f]{8}|[0-9a-f]{6}|[0-9a-f]{3})", re.I),
    Syntax.RGB: re.compile(
        rf"rgba?\(\s*({_NUM}){_SEP}({_NUM}){_SEP}({_NUM})(?:{_SEP}({_NUM}))?\s*\)",
        re.I,
    ),
    Syntax.HSL: re.compile(
        rf"hsla?\(\s*({_NUM})(?:deg)?{_SEP}({_NUM})%?{_SEP}({_NUM})%?"
        rf"(?:{_SEP}({_NUM}))?\s*\)",
        re.I,
    ),
}


def _bounded(value: str, hi: float) -> float:
    x = float(value)
    if not 0.0 <= x <= hi:
        raise ValueError(f"{x} outside [0, {hi}]")
    return x


def _alpha(value: Optional[str]) -> float:
    return 1.0 if value is None else _bounded(value, 1.0)


def _from_hex(m: "re.Match[str]") -> HSVa:
    r, g, b, a = hex_to_rgba(m.group(1))
    return (*rgb_to_hsv(r, g, b), a)


def _from_rgb(m: "re.Match[str]") -> HSVa:
    r, g, b = (_bounded(m.group(i), 255.0) for i in (1, 2, 3))
    return (*rgb_to_hsv(r, g, b), _alpha(m.group(4)))


def _from_hsl(m: "re.Match[str]") -> HSVa:
    h = _bounded(m.group(1), 360.0)
    s = _bounded(m.group(2), 100.0)
    l = _bounded(m.group(3), 100.0)
    return (*hsl_to_hsv(h, s, l), _alpha(m.group(4)))


CONVERTERS: Dict[Syntax, Callable[["re.Match[str]"], HSVa]] = {
    Syntax.HEX: _from_hex,
    Syntax.RGB: _from_rgb,
    Syntax.HSL: _from_hsl,
}


def parse_tagged(text: str) -> Parsed:
    """Return the matching syntax and HSVa, or raise UnparsableText."""
    candidate = (text or "").strip()
    for syntax, pattern in PATTERNS.items():
        m = pattern.fullmatch(candidate)
        if m is None:
            continue
        try:
            return Parsed(syntax, CONVERTERS[syntax](m))
        except ValueError as exc:
            log.debug("%s text %r rejected: %s", syntax.value, text, exc)
            break
    raise UnparsableText(text)


def parse(text: str) -> HSVa:
    """Interpret free-form color text as an (h, s, v, a) tuple."""
    return parse_tagged(text).hsva


def try_parse(text: str) -> Optional[HSVa]:
    try:
        return parse(text)
    except UnparsableText:
        return None


__all__ = ["Syntax", "Parsed", "parse", "parse_tagged", "try_parse"]
