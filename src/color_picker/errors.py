from __future__ import annotations

from typing import Tuple


class ColorPickerError(Exception):
    """Base class for every error raised by the picker engines."""


class InvalidRange(ColorPickerError, ValueError):
    """A channel value lies outside its domain; the update must not be applied."""

    def __init__(self, channel: str, value: float, domain: Tuple[float, float]):
        self.channel = channel
        self.value = value
        self.domain = domain
        lo, hi = domain
        super().__init__(f"{channel}={value!r} outside [{lo}, {hi}]")


class UnparsableText(ColorPickerError, ValueError):
    """Free-form text did not match any recognised color syntax."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"not a recognised color: {text!r}")


class DegenerateSurface(ColorPickerError, ZeroDivisionError):
    """A drag surface has zero width or height."""


__all__ = ["ColorPickerError", "InvalidRange", "UnparsableText", "DegenerateSurface"]
