import os
import uuid
import threading
import traceback
from collections import OrderedDict
from datetime import datetime

from flask import Flask, request, render_template, redirect, url_for, session, jsonify, Response
from dotenv import load_dotenv
from werkzeug.exceptions import RequestEntityTooLarge

import ai_client
from default_content import load_default_content
from errors import CarIdentifierError, TooLarge
from site_config import SITE_CONFIG
from view_controller import ViewController

load_dotenv()

app = Flask(__name__)
# Slightly above the 20 MB image limit so multipart overhead does not trip it;
# anything bigger is answered by the 413 handler below.
app.config["MAX_CONTENT_LENGTH"] = 21 * 1024 * 1024
app.secret_key = os.environ.get("FLASK_SECRET_KEY") or os.urandom(32)

# Only these POST actions need the API key; the first page view works without one
_KEY_REQUIRED = {"upload", "analyze"}

ERROR_LOG    = "last_error.log"
MAX_SESSIONS = 256


# ── Helpers ───────────────────────────────────────────────────────────────────

def _log_error(context: str, exc: Exception) -> None:
    """Write the last error with timestamp to last_error.log (no user data)."""
    app.logger.warning("%s: %s", context, exc)
    with open(ERROR_LOG, "w", encoding="utf-8") as f:
        f.write(f"[{datetime.now().isoformat(timespec='seconds')}] {context}\n\n")
        if exc.__traceback__:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=f)
        else:
            f.write(f"{type(exc).__name__}: {exc}\n")


def _load_default():
    """Bundled photo + canned analysis, read once at startup."""
    try:
        return load_default_content()
    except CarIdentifierError as e:
        _log_error("default content", e)
        return None


DEFAULT_CONTENT = _load_default()

# session id → ViewController, most recently used last
_controllers: "OrderedDict[str, ViewController]" = OrderedDict()
_controllers_lock = threading.Lock()


def _get_controller() -> ViewController:
    sid = session.get("sid")
    with _controllers_lock:
        controller = _controllers.get(sid) if sid else None
        if controller is None:
            sid = uuid.uuid4().hex
            session["sid"] = sid
            controller = ViewController(
                DEFAULT_CONTENT,
                analyzer=ai_client.analyze,
                on_error=_log_error,
            )
            _controllers[sid] = controller
            while len(_controllers) > MAX_SESSIONS:
                _controllers.popitem(last=False)
        else:
            _controllers.move_to_end(sid)
    return controller


def _render_page(controller: ViewController, status: int = 200):
    return render_template(
        "index.html",
        state=controller.state,
        blocks=controller.blocks,
        accept=",".join(controller.switch_photo()),
    ), status


# ── Inject site config into every template automatically ──────────────────────
@app.context_processor
def inject_globals():
    return {"site": SITE_CONFIG}


@app.before_request
def require_api_key():
    if request.endpoint not in _KEY_REQUIRED:
        return
    if not os.environ.get("GEMINI_API_KEY"):
        return render_template("setup.html"), 503


@app.errorhandler(RequestEntityTooLarge)
def too_large(_exc):
    controller = _get_controller()
    controller.show_error("upload", TooLarge())
    return _render_page(controller, 413)


# ── Routes ────────────────────────────────────────────────────────────────────

@app.route("/robots.txt")
def robots_txt():
    return Response("User-agent: *\nDisallow: /\n", mimetype="text/plain")


@app.route("/")
def index():
    return _render_page(_get_controller())


@app.route("/upload", methods=["POST"])
async def upload():
    controller = _get_controller()
    file = request.files.get("image")
    if file is None or not file.filename:
        # Picker closed without choosing a file: nothing changes
        return redirect(url_for("index"), code=303)

    try:
        await controller.upload(file)
    except Exception as e:
        _log_error("upload", e)
        return render_template("error.html", message=f"Processing failed: {e}"), 500
    return redirect(url_for("index"), code=303)


@app.route("/analyze", methods=["POST"])
async def analyze():
    controller = _get_controller()
    try:
        await controller.analyze()
    except Exception as e:
        _log_error("analyze", e)
        return render_template("error.html", message=f"Processing failed: {e}"), 500
    return redirect(url_for("index"), code=303)


@app.route("/api/state")
def api_state():
    """Current page state with the analysis as typed display blocks."""
    controller = _get_controller()
    state = controller.state
    return jsonify({
        "image":      state.current_image.data_uri if state.current_image else None,
        "is_loading": state.is_loading,
        "error":      state.error_message,
        "blocks":     [block.model_dump() for block in controller.blocks],
    })


if __name__ == "__main__":
    print("Starting on http://localhost:5000")
    app.run(debug=True, port=5000)
