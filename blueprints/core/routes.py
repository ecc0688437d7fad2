from __future__ import annotations
import json, logging
from datetime import datetime, UTC

from flask import current_app, g, jsonify, request
from werkzeug.wrappers.response import Response

from flask_wtf.csrf import generate_csrf
from extensions import csrf
from scheduling.grid import SlotGrid

from . import bp
from . import api_bp

LOG_EXTRA_KEYS = ("event", "path", "method", "status", "duration_ms", "user_id", "booking_id", "action")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in LOG_EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _setup_structured_logging(app):
    # app logger and the service loggers (blueprints.*) share one JSON handler
    for logger in (app.logger, logging.getLogger("blueprints")):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
            logger.setLevel(app.config.get("LOG_LEVEL", logging.INFO))


@api_bp.get("/csrf")
@csrf.exempt          # токен выдаём без проверки
def get_csrf():
    token = generate_csrf()
    resp = jsonify({"csrf": token})
    resp.set_cookie("csrf_token", token, samesite="Lax")
    return resp


@api_bp.get("/slots")
def get_slots():
    grid = SlotGrid.from_config(current_app.config)
    return jsonify({
        "open": grid.display_slots()[0],
        "close": grid.display_slots()[-1],
        "step_minutes": grid.step_minutes,
        "slots": grid.display_slots(),
    })


@bp.before_app_request
def _start_timer():
    g._req_start = datetime.now(UTC)


@bp.after_app_request
def _log_request(response: Response):
    start = getattr(g, "_req_start", None)
    duration_ms = int((datetime.now(UTC) - start).total_seconds() * 1000) if start else None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    current_app.logger.info("request handled", extra=extra)
    return response


@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)


@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z"),
    })
