"""Color picker JSON service (Flask).

Serves one picker session whose surfaces can be dragged, typed into and
committed over HTTP, plus a stateless converter.

Usage
-----
$ pip install -e .
$ python main.py            # starts on http://127.0.0.1:5000

  GET  /convert?color=%23ff0000       every format of one color
  GET  /picker                         current picker state
  POST /picker/hsva     {"h":..,"s":..,"v":..,"a":..}
  POST /picker/palette/drag  {"events":[{"type":"begin","x":..,"y":..}, ...]}
  POST /picker/input    {"text":"rgba(0, 255, 0, 0.5)"}
  POST /picker/format   {"format":"hsla"}
  POST /picker/save | /picker/revert | /picker/show | /picker/cancel

Settings can be overridden with COLOR_PICKER_* environment variables, e.g.
COLOR_PICKER_PALETTE_SIZE="[300, 300]" or COLOR_PICKER_LOG_LEVEL=DEBUG.
"""

from color_picker.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=False, threaded=True)
