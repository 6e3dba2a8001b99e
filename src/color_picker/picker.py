from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .convert import fmt_number, round_half_up, round_to
from .errors import InvalidRange, UnparsableText
from .hsva import HSVaColor
from .moveable import GeometryFn, Moveable
from .options import PickerOptions
from .parse import parse
from .selectable import Selectable

log = logging.getLogger(__name__)

ALPHA_PLACES = 2  # every alpha the picker stores is quantised to 0.01


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to paint the picker for one color."""

    color: str  # rgba() of the current color
    palette: Tuple[str, str]  # two CSS gradient layers behind the palette
    hue: str  # hue handle fill
    opacity: str  # opacity handle fill
    last_color: str  # rgba() of the last committed color
    format: Optional[str]  # active output format id
    visible: bool


def palette_gradient(h: float, a: float) -> Tuple[str, str]:
    alpha = fmt_number(a)
    return (
        f"linear-gradient(to top, rgba(0, 0, 0, {alpha}), transparent)",
        f"linear-gradient(to left, hsla({fmt_number(h)}, 100%, 50%, {alpha}), "
        f"rgba(255, 255, 255, {alpha}))",
    )


class ColorPicker:
    """Keeps one HSVa color and three drag surfaces consistent.

    palette  (x, y) → saturation, value
    hue      y      → hue
    opacity  y      → alpha

    Every channel change rebuilds the whole color from (h, s, v, a) and
    funnels through the palette's change handler, so rendering, text
    write-back and ``on_change`` happen in exactly one place.
    """

    def __init__(
        self,
        palette: GeometryFn,
        hue: GeometryFn,
        opacity: GeometryFn,
        options: Union[PickerOptions, Mapping[str, Any], None] = None,
    ) -> None:
        if not isinstance(options, PickerOptions):
            options = PickerOptions.from_mapping(options)
        self.options = options

        self.input_active = False
        self.visible = False
        self._syncing = False
        self._color = HSVaColor()
        self._last_color = HSVaColor()

        self.palette = Moveable(palette, self._palette_changed, name="palette")
        self.hue_slider = Moveable(hue, self._hue_changed, lock_x=True, name="hue")
        self.opacity_slider = Moveable(
            opacity, self._opacity_changed, lock_x=True, name="opacity"
        )
        self.selection = Selectable(
            options.components.output.formats(), on_change=self._format_changed
        )

        self.set_hsva(0, 0, 100, 1)
        self.hide()

    # ---- accessors ----

    @property
    def color(self) -> HSVaColor:
        return self._color

    @property
    def last_color(self) -> HSVaColor:
        return self._last_color

    @property
    def surfaces(self) -> Dict[str, Moveable]:
        return {
            "palette": self.palette,
            "hue": self.hue_slider,
            "opacity": self.opacity_slider,
        }

    def frame(self) -> Frame:
        c = self._color
        return Frame(
            color=c.to_rgba_string(),
            palette=palette_gradient(c.h, c.a),
            hue=f"hsl({fmt_number(c.h)}, 100%, 50%)",
            opacity=f"rgba(0, 0, 0, {fmt_number(c.a)})",
            last_color=self._last_color.to_rgba_string(),
            format=self.selection.active,
            visible=self.visible,
        )

    # ---- surface handlers ----

    def _palette_changed(self, x: float, y: float) -> None:
        if self._syncing:
            return
        fx, fy = self.palette.fraction()
        self._color = replace(
            self._color,
            s=float(round_half_up(fx * 100)),
            v=float(round_half_up(100 - fy * 100)),
        )
        self._update_color()

    def _hue_changed(self, x: float, y: float) -> None:
        if self._syncing or not self.options.components.hue:
            return
        _, fy = self.hue_slider.fraction()
        self._color = replace(self._color, h=float(round_half_up(fy * 360)))
        self.palette.trigger()

    def _opacity_changed(self, x: float, y: float) -> None:
        if self._syncing or not self.options.components.opacity:
            return
        _, fy = self.opacity_slider.fraction()
        self._color = replace(self._color, a=round_half_up(fy * 100) / 100)
        self.palette.trigger()

    def _format_changed(self, kind: str) -> None:
        self.input_active = False
        self.palette.trigger()

    def _update_color(self) -> None:
        self.options.renderer(self.frame())

        active = self.selection.active
        if not self.input_active and active is not None:
            self.options.text_sink(self._color.format(active))

        self.options.on_change(self._color, self)

    # ---- public API ----

    def set_hsva(
        self, h: float = 360, s: float = 0, v: float = 0, a: float = 1
    ) -> bool:
        """Move every surface to match (h, s, v, a) and adopt that color.

        Out-of-range input is rejected as a whole: nothing moves, the
        current color is kept and False is returned.
        """
        try:
            color = HSVaColor.from_hsva(h, s, v, a)
        except InvalidRange as exc:
            log.debug("set_hsva rejected: %s", exc)
            return False
        color = replace(color, a=round_to(color.a, ALPHA_PLACES))

        # surfaces report back through their handlers; silence them so no
        # half-updated color escapes
        self._syncing = True
        try:
            rect = self.hue_slider.geometry()
            self.hue_slider.update(0, rect.height * (color.h / 360))

            rect = self.opacity_slider.geometry()
            self.opacity_slider.update(0, rect.height * color.a)

            rect = self.palette.geometry()
            self.palette.update(
                rect.width * (color.s / 100), rect.height * (1 - color.v / 100)
            )
        finally:
            self._syncing = False

        self._color = color
        self._update_color()
        return True

    def input_text(self, text: str) -> bool:
        """Apply text typed into the output field, if it is a color."""
        self.input_active = True
        try:
            hsva = parse(text)
        except UnparsableText as exc:
            log.debug("%s", exc)
            return False
        return self.set_hsva(*hsva)

    def select_format(self, kind: str) -> None:
        self.selection.select(kind)

    def revert(self) -> bool:
        return self.set_hsva(*self._last_color.to_hsva())

    def show(self) -> None:
        self.visible = True
        self.options.renderer(self.frame())

    def hide(self) -> None:
        """Hide the picker and commit the current color as the last color."""
        self.visible = False
        self._last_color = self._color.clone()
        self.options.renderer(self.frame())
        log.info("color saved: %s", self._color.to_hexa())
        self.options.on_save(self._color, self)

    def cancel(self) -> None:
        self.visible = False
        self.options.renderer(self.frame())

    def toggle(self) -> None:
        if self.visible:
            self.hide()
        else:
            self.show()


__all__ = ["ColorPicker", "Frame", "palette_gradient", "ALPHA_PLACES"]
