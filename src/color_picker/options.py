from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from .hsva import HSVaColor
    from .picker import ColorPicker, Frame

ColorCallback = Callable[["HSVaColor", "ColorPicker"], None]
Renderer = Callable[["Frame"], None]
TextSink = Callable[[str], None]

OUTPUT_FORMATS: Tuple[str, ...] = ("hex", "rgba", "hsla", "cmyk")


def _noop(*_: Any) -> None:
    return None


def _flag(val: Any, default: bool) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        v = val.strip().lower()
        if v in {"1", "true", "yes", "on"}:
            return True
        if v in {"0", "false", "no", "off"}:
            return False
    return default


@dataclass(frozen=True)
class OutputOptions:
    """Which parts of the output row exist."""

    input: bool = True
    hex: bool = True
    rgba: bool = True
    hsla: bool = True
    cmyk: bool = True

    def formats(self) -> Tuple[str, ...]:
        return tuple(f for f in OUTPUT_FORMATS if getattr(self, f))

    @classmethod
    def from_mapping(cls, raw: Any) -> "OutputOptions":
        # `output: false` hides the whole row
        if raw is False:
            return cls(**{f.name: False for f in fields(cls)})
        if not isinstance(raw, Mapping):
            return cls()
        return cls(**{f.name: _flag(raw.get(f.name), True) for f in fields(cls)})


@dataclass(frozen=True)
class Components:
    preview: bool = True
    hue: bool = True
    opacity: bool = True
    output: OutputOptions = field(default_factory=OutputOptions)

    @classmethod
    def from_mapping(cls, raw: Any) -> "Components":
        if not isinstance(raw, Mapping):
            raw = {}
        return cls(
            preview=_flag(raw.get("preview"), True),
            hue=_flag(raw.get("hue"), True),
            opacity=_flag(raw.get("opacity"), True),
            output=OutputOptions.from_mapping(raw.get("output", {})),
        )


@dataclass
class PickerOptions:
    components: Components = field(default_factory=Components)
    on_change: ColorCallback = _noop
    on_save: ColorCallback = _noop
    renderer: Renderer = _noop
    text_sink: TextSink = _noop

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "PickerOptions":
        """Coerce a plain dict; missing or non-callable hooks become no-ops."""
        raw = raw or {}

        def hook(name: str) -> Any:
            fn = raw.get(name)
            return fn if callable(fn) else _noop

        components = raw.get("components")
        return cls(
            components=components
            if isinstance(components, Components)
            else Components.from_mapping(components),
            on_change=hook("on_change"),
            on_save=hook("on_save"),
            renderer=hook("renderer"),
            text_sink=hook("text_sink"),
        )


__all__ = ["PickerOptions", "Components", "OutputOptions", "OUTPUT_FORMATS"]
