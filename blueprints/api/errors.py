from __future__ import annotations
import logging

from flask import jsonify, request
from flask_wtf.csrf import CSRFError
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from scheduling.errors import (
    SchedulingError, ValidationError, StateError, NotFoundError,
    TransportError, CapacityExceededError,
)

log = logging.getLogger(__name__)

# first match wins, subclasses before their bases
HTTP_STATUS = (
    (ValidationError, 422),
    (CapacityExceededError, 409),
    (StateError, 409),
    (NotFoundError, 404),
    (TransportError, 503),
)


def status_for(ex: SchedulingError) -> int:
    for cls, status in HTTP_STATUS:
        if isinstance(ex, cls):
            return status
    return 400


def _json_err(code: str, http: int, message: str | None = None, detail=None):
    body = {"error": code}
    if message:
        body["message"] = message
    if detail is not None:
        body["detail"] = detail
    return jsonify(body), http


def _pydantic_errors_safe(ve: PydanticValidationError):
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        if "input" in e:
            e["input"] = str(e["input"])
    return errs


def register_error_handlers(app) -> None:
    @app.errorhandler(SchedulingError)
    def _scheduling_error(ex: SchedulingError):
        status = status_for(ex)
        if status >= 500:
            log.error("request failed: %s", ex.message, extra={"event": "request_failed", "path": request.path})
        return _json_err(ex.code, status, ex.message)

    @app.errorhandler(PydanticValidationError)
    def _request_shape_error(ve: PydanticValidationError):
        return _json_err("validation_error", 422, "Request body is invalid", _pydantic_errors_safe(ve))

    @app.errorhandler(CSRFError)
    def _csrf_error(e: CSRFError):
        return _json_err("csrf_failed", 400, e.description)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        code = (e.name or "error").lower().replace(" ", "_")
        return _json_err(code, e.code or 500, e.description)
