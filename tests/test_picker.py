import pytest

from color_picker.convert import round_half_up
from color_picker.hsva import HSVaColor
from color_picker.moveable import PointerEvent, Rect
from color_picker.options import Components, OutputOptions, PickerOptions
from color_picker.picker import ColorPicker, Frame

PALETTE = Rect(0, 0, 200, 150)
HUE = Rect(300, 0, 20, 200)
OPACITY = Rect(400, 0, 20, 200)


class Harness:
    """A picker wired to recording sinks."""

    def __init__(self, components=None, rects=None):
        self.rects = {"palette": PALETTE, "hue": HUE, "opacity": OPACITY, **(rects or {})}
        self.changes = []
        self.saves = []
        self.frames = []
        self.texts = []
        self.picker = ColorPicker(
            lambda: self.rects["palette"],
            lambda: self.rects["hue"],
            lambda: self.rects["opacity"],
            PickerOptions(
                components=components or Components(),
                on_change=lambda c, p: self.changes.append(c),
                on_save=lambda c, p: self.saves.append(c),
                renderer=self.frames.append,
                text_sink=self.texts.append,
            ),
        )

    def reset(self):
        del self.changes[:], self.saves[:], self.frames[:], self.texts[:]

    def drag(self, name, x, y):
        rect = self.rects[name]
        mover = self.picker.surfaces[name]
        mover.begin(PointerEvent(rect.left + x, rect.top + y))
        mover.end()


def forward(picker):
    """Re-derive (h, s, v, a) from the surface offsets alone."""
    _, hy = picker.hue_slider.fraction()
    _, ay = picker.opacity_slider.fraction()
    px, py = picker.palette.fraction()
    return (
        round_half_up(hy * 360),
        round_half_up(px * 100),
        round_half_up(100 - py * 100),
        round_half_up(ay * 100) / 100,
    )


@pytest.fixture
def harness():
    return Harness()


def test_initial_state(harness):
    p = harness.picker
    assert p.color == HSVaColor(0, 0, 100, 1)
    assert p.last_color == p.color
    assert p.last_color is not p.color
    assert not p.visible
    assert harness.saves == [p.color]
    assert harness.texts[-1] == "#ffffffff"


def test_hue_drag_to_middle_is_180(harness):
    harness.drag("hue", 10, 100)
    assert harness.picker.color.h == 180


def test_opacity_drag_to_top_is_transparent(harness):
    harness.drag("opacity", 10, 0)
    assert harness.picker.color.a == 0


def test_palette_top_right_is_full_saturation_and_value(harness):
    harness.drag("palette", 200, 0)
    c = harness.picker.color
    assert (c.s, c.v) == (100, 100)


def test_palette_bottom_left_is_black(harness):
    harness.drag("palette", 0, 150)
    c = harness.picker.color
    assert (c.s, c.v) == (0, 0)
    assert c.to_cmyk().k == 100


def test_drag_emits_one_change_per_move(harness):
    harness.reset()
    p = harness.picker
    p.palette.begin(PointerEvent(20, 30))
    p.palette.move(PointerEvent(40, 30))
    p.palette.move(PointerEvent(60, 30))
    p.palette.end()
    assert [c.s for c in harness.changes] == [10, 20, 30]
    assert harness.changes[-1] is p.color


def test_hue_change_keeps_other_channels(harness):
    p = harness.picker
    p.set_hsva(10, 40, 60, 0.5)
    harness.drag("hue", 0, 50)
    assert p.color.to_hsva() == (90, 40, 60, 0.5)


@pytest.mark.parametrize(
    "hsva",
    [
        (0, 0, 0, 0),
        (360, 100, 100, 1),
        (200, 40, 70, 0.25),
        (123, 57, 33, 0.8),
        (17.4, 99.6, 0.4, 0.31),
    ],
)
def test_offsets_match_color_after_set_hsva(harness, hsva):
    p = harness.picker
    assert p.set_hsva(*hsva)
    h, s, v, a = forward(p)
    assert abs(h - hsva[0]) <= 1
    assert abs(s - hsva[1]) <= 1
    assert abs(v - hsva[2]) <= 1
    assert a == pytest.approx(hsva[3], abs=0.01)


def test_set_hsva_emits_once_with_final_color(harness):
    harness.reset()
    assert harness.picker.set_hsva(200, 40, 80, 0.25)
    assert harness.changes == [HSVaColor(200, 40, 80, 0.25)]
    assert len(harness.frames) == 1
    assert harness.texts == ["#7ab1cc40"]


@pytest.mark.parametrize(
    "bad", [(361, 0, 0, 1), (0, -1, 0, 1), (0, 0, 101, 1), (0, 0, 0, 1.5)]
)
def test_set_hsva_rejects_out_of_range(harness, bad):
    p = harness.picker
    p.set_hsva(50, 50, 50, 0.5)
    before = p.color
    offsets = {n: m.offset for n, m in p.surfaces.items()}
    harness.reset()

    assert p.set_hsva(*bad) is False
    assert p.color is before
    assert {n: m.offset for n, m in p.surfaces.items()} == offsets
    assert harness.changes == []


def test_set_hsva_quantises_alpha(harness):
    harness.picker.set_hsva(0, 0, 0, 0.337)
    assert harness.picker.color.a == 0.34


def test_text_follows_active_format(harness):
    p = harness.picker
    p.set_hsva(120, 100, 100, 0.5)
    assert harness.texts[-1] == "#00ff0080"
    p.select_format("rgba")
    assert harness.texts[-1] == "rgba(0, 255, 0, 0.5)"
    p.select_format("hsla")
    assert harness.texts[-1] == "hsla(120, 100%, 50%, 0.5)"
    p.select_format("cmyk")
    assert harness.texts[-1] == "cmyk(100%, 0%, 100%, 0%)"


def test_unknown_format(harness):
    with pytest.raises(KeyError):
        harness.picker.select_format("lab")


def test_input_text_applies_color_without_rewriting_field(harness):
    p = harness.picker
    harness.reset()
    assert p.input_text("#ff0000")
    assert p.color.to_hsva() == (0, 100, 100, 1)
    assert harness.texts == []
    assert len(harness.changes) == 1


def test_input_text_rejects_garbage(harness):
    p = harness.picker
    before = p.color
    harness.reset()
    assert p.input_text("not-a-color") is False
    assert p.color is before
    assert harness.changes == []


def test_format_switch_resumes_writing(harness):
    p = harness.picker
    p.input_text("rgba(0,255,0,0.5)")
    assert p.input_active
    p.select_format("rgba")
    assert not p.input_active
    assert harness.texts[-1] == "rgba(0, 255, 0, 0.5)"


def test_hide_commits_last_color(harness):
    p = harness.picker
    p.show()
    p.set_hsva(30, 60, 90, 1)
    assert p.last_color == HSVaColor(0, 0, 100, 1)
    harness.reset()

    p.hide()
    assert not p.visible
    assert p.last_color == p.color
    assert p.last_color is not p.color
    assert harness.saves == [p.color]
    assert harness.frames[-1].last_color == p.color.to_rgba_string()


def test_cancel_does_not_commit(harness):
    p = harness.picker
    p.show()
    p.set_hsva(30, 60, 90, 1)
    harness.reset()
    p.cancel()
    assert not p.visible
    assert harness.saves == []
    assert p.last_color == HSVaColor(0, 0, 100, 1)


def test_toggle(harness):
    p = harness.picker
    p.toggle()
    assert p.visible
    assert harness.frames[-1].visible
    p.toggle()
    assert not p.visible
    assert len(harness.saves) == 2


def test_revert_restores_last_color(harness):
    p = harness.picker
    p.set_hsva(30, 60, 90, 0.5)
    p.hide()
    p.set_hsva(250, 10, 20, 1)
    assert p.revert()
    assert p.color == HSVaColor(30, 60, 90, 0.5)
    assert forward(p) == (30, 60, 90, 0.5)


def test_frame_contents(harness):
    p = harness.picker
    p.set_hsva(120, 100, 100, 0.5)
    frame = harness.frames[-1]
    assert isinstance(frame, Frame)
    assert frame.color == "rgba(0, 255, 0, 0.5)"
    assert frame.hue == "hsl(120, 100%, 50%)"
    assert frame.opacity == "rgba(0, 0, 0, 0.5)"
    assert frame.format == "hex"
    assert "hsla(120, 100%, 50%, 0.5)" in frame.palette[1]
    assert "rgba(0, 0, 0, 0.5)" in frame.palette[0]


def test_disabled_hue_slider_is_inert():
    h = Harness(components=Components(hue=False))
    h.drag("hue", 0, 100)
    assert h.picker.color.h == 0


def test_disabled_opacity_slider_is_inert():
    h = Harness(components=Components(opacity=False))
    h.drag("opacity", 0, 100)
    assert h.picker.color.a == 1


def test_no_output_means_no_text():
    h = Harness(components=Components(output=OutputOptions.from_mapping(False)))
    h.picker.set_hsva(10, 10, 10, 1)
    assert h.texts == []
    assert h.picker.selection.active is None


def test_first_enabled_format_is_active():
    h = Harness(components=Components(output=OutputOptions(hex=False)))
    assert h.picker.selection.active == "rgba"
    assert h.texts[-1] == "rgba(255, 255, 255, 1)"


def test_interleaved_surfaces_stay_consistent(harness):
    p = harness.picker
    p.palette.begin(PointerEvent(100, 75))
    p.hue_slider.begin(PointerEvent(300, 100))
    p.palette.move(PointerEvent(50, 30))
    p.hue_slider.move(PointerEvent(300, 20))
    p.opacity_slider.begin(PointerEvent(400, 150))
    p.palette.move(PointerEvent(150, 0))
    for m in p.surfaces.values():
        m.end()
    assert p.color.to_hsva() == forward(p)


def test_degenerate_palette_does_not_crash():
    h = Harness(rects={"palette": Rect(0, 0, 0, 0)})
    h.drag("palette", 40, 40)
    assert (h.picker.color.s, h.picker.color.v) == (0, 100)


def test_options_from_mapping():
    seen = []
    p = ColorPicker(
        lambda: PALETTE,
        lambda: HUE,
        lambda: OPACITY,
        {"components": {"hue": "false"}, "on_save": lambda c, p: seen.append(c)},
    )
    assert p.options.components.hue is False
    assert seen == [p.color]


def test_non_finite_drag_leaves_color_alone(harness):
    p = harness.picker
    p.set_hsva(200, 40, 80, 0.5)
    before = p.color
    harness.reset()
    p.palette.begin(PointerEvent(float("nan"), 10))
    p.palette.end()
    assert p.color is before
    assert harness.changes == []
    p.select_format("hsla")
    assert harness.texts[-1] == p.color.to_hsla_string()


@pytest.mark.parametrize("raw", [None, [1], "hue", 3])
def test_components_from_non_mapping_is_default(raw):
    assert Components.from_mapping(raw) == Components()
