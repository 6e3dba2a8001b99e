from __future__ import annotations

import logging
import threading
from math import isfinite
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .errors import InvalidRange, UnparsableText
from .hsva import FORMATS, HSVaColor
from .moveable import PointerEvent, Rect
from .options import Components, PickerOptions
from .parse import parse_tagged
from .picker import ColorPicker

log = logging.getLogger(__name__)

DEFAULT_CONFIG: Mapping[str, Any] = {
    "PALETTE_SIZE": (200, 200),  # width, height in px
    "SLIDER_SIZE": (20, 200),
    "COMPONENTS": {},
    "LOG_LEVEL": "INFO",
}

DRAG_EVENTS = {"begin", "move", "end"}


def describe(color: HSVaColor) -> Dict[str, Any]:
    """Every representation of one color, JSON-ready."""
    return {
        "hsva": list(color.to_hsva()),
        "rgba": color.to_rgba()._asdict(),
        "hsla": color.to_hsla()._asdict(),
        "cmyk": color.to_cmyk()._asdict(),
        "strings": {kind: color.format(kind) for kind in FORMATS},
    }


def _size(val: Any, default: tuple[float, float]) -> tuple[float, float]:
    try:
        w, h = (float(x) for x in val)
    except (TypeError, ValueError):
        return default
    return (w, h) if w >= 0 and h >= 0 else default


def _log_level(val: Any) -> int:
    level = logging.getLevelName(str(val).strip().upper())
    return level if isinstance(level, int) else logging.INFO


class PickerSession:
    """One picker plus the text it last wrote, guarded for threaded serving."""

    def __init__(self, config: Mapping[str, Any]):
        self.lock = threading.Lock()
        self.text = ""
        pw, ph = _size(config.get("PALETTE_SIZE"), DEFAULT_CONFIG["PALETTE_SIZE"])
        sw, sh = _size(config.get("SLIDER_SIZE"), DEFAULT_CONFIG["SLIDER_SIZE"])
        self.rects = {
            "palette": Rect(0, 0, pw, ph),
            "hue": Rect(0, 0, sw, sh),
            "opacity": Rect(0, 0, sw, sh),
        }
        options = PickerOptions(
            components=Components.from_mapping(config.get("COMPONENTS")),
            text_sink=self._write_text,
        )
        self.picker = ColorPicker(
            lambda: self.rects["palette"],
            lambda: self.rects["hue"],
            lambda: self.rects["opacity"],
            options,
        )

    def _write_text(self, text: str) -> None:
        self.text = text

    def state(self) -> Dict[str, Any]:
        p = self.picker
        return {
            "color": describe(p.color),
            "last_color": describe(p.last_color),
            "offsets": {name: list(m.offset) for name, m in p.surfaces.items()},
            "format": p.selection.active,
            "formats": p.selection.state(),
            "text": self.text,
            "visible": p.visible,
        }


def _session() -> PickerSession:
    return current_app.extensions["color_picker"]


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _drag_events(raw: Any) -> List[Tuple[str, Optional[PointerEvent]]]:
    """Validate a whole drag batch up front; raises ValueError on any bad event."""
    if not isinstance(raw, list):
        raise ValueError("events must be a list")
    out: List[Tuple[str, Optional[PointerEvent]]] = []
    for ev in raw:
        kind = str(ev.get("type") or "move").lower() if isinstance(ev, dict) else ""
        if kind not in DRAG_EVENTS:
            raise ValueError(f"bad drag event {ev!r}")
        if kind == "end":
            out.append((kind, None))
            continue
        try:
            x, y = float(ev["x"]), float(ev["y"])
        except (KeyError, TypeError, ValueError):
            raise ValueError("x and y must be numbers") from None
        if not (isfinite(x) and isfinite(y)):
            raise ValueError("x and y must be finite")
        out.append((kind, PointerEvent(x, y)))
    return out


# ----------------------------- Flask app ----------------------------------


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env("COLOR_PICKER")
    if config:
        app.config.from_mapping(config)

    logging.basicConfig(
        level=_log_level(app.config.get("LOG_LEVEL")),
        format="%(levelname)s: %(message)s",
    )
    app.extensions["color_picker"] = PickerSession(app.config)

    @app.errorhandler(Exception)
    def unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        log.exception("Request failed")
        return jsonify({"error": str(exc)}), 500

    @app.route("/convert")
    def convert():
        text = request.args.get("color", "")
        try:
            syntax, hsva = parse_tagged(text)
        except UnparsableText as e:
            return jsonify({"error": str(e)}), 400
        out = describe(HSVaColor.from_hsva(*hsva))
        out["syntax"] = syntax.value
        return jsonify(out)

    @app.route("/picker")
    def state():
        session = _session()
        with session.lock:
            return jsonify(session.state())

    @app.route("/picker/hsva", methods=["POST"])
    def set_hsva():
        body = _body()
        try:
            h, s, v = (float(body[k]) for k in "hsv")
            a = float(body.get("a", 1))
        except (KeyError, TypeError, ValueError):
            return jsonify({"error": "h, s, v must be numbers"}), 400
        try:
            HSVaColor.from_hsva(h, s, v, a)
        except InvalidRange as e:
            return jsonify({"error": str(e)}), 422
        session = _session()
        with session.lock:
            session.picker.set_hsva(h, s, v, a)
            return jsonify(session.state())

    @app.route("/picker/<surface>/drag", methods=["POST"])
    def drag(surface: str):
        session = _session()
        mover = session.picker.surfaces.get(surface)
        if mover is None:
            return (
                jsonify(
                    {
                        "error": f"unknown surface '{surface}'",
                        "supported": sorted(session.picker.surfaces),
                    }
                ),
                404,
            )
        try:
            events = _drag_events(_body().get("events", []))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        with session.lock:
            for kind, point in events:
                if kind == "end":
                    mover.end()
                elif kind == "begin":
                    mover.begin(point)
                else:
                    mover.move(point)
            return jsonify(session.state())

    @app.route("/picker/input", methods=["POST"])
    def input_text():
        text = str(_body().get("text", ""))
        session = _session()
        with session.lock:
            session.text = text
            if not session.picker.input_text(text):
                return jsonify({"error": f"not a recognised color: {text!r}"}), 422
            return jsonify(session.state())

    @app.route("/picker/format", methods=["POST"])
    def select_format():
        kind = str(_body().get("format", "")).lower()
        session = _session()
        with session.lock:
            try:
                session.picker.select_format(kind)
            except KeyError:
                return (
                    jsonify(
                        {
                            "error": f"unknown format '{kind}'",
                            "supported": session.picker.selection.options,
                        }
                    ),
                    400,
                )
            return jsonify(session.state())

    def _action(name: str):
        def view():
            session = _session()
            with session.lock:
                getattr(session.picker, name)()
                return jsonify(session.state())

        view.__name__ = f"picker_{name}"
        return view

    app.add_url_rule("/picker/save", view_func=_action("hide"), methods=["POST"])
    app.add_url_rule("/picker/revert", view_func=_action("revert"), methods=["POST"])
    app.add_url_rule("/picker/show", view_func=_action("show"), methods=["POST"])
    app.add_url_rule("/picker/cancel", view_func=_action("cancel"), methods=["POST"])

    return app


if __name__ == "__main__":
    create_app().run(debug=False, threaded=True)
