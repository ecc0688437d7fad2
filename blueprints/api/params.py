from __future__ import annotations
from datetime import date
from typing import Optional

from flask import current_app, request

from scheduling.errors import ValidationError
from scheduling.grid import parse_iso_date

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def arg_date(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"{name} is required", code="date_required")
        return default
    return parse_iso_date(raw, name)


def arg_dates(name: str) -> list[date]:
    raw = request.args.get(name) or ""
    return [parse_iso_date(x, name) for x in raw.split(",") if x.strip()]


def arg_bool(name: str, default: Optional[bool]) -> Optional[bool]:
    raw = (request.args.get(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValidationError(f"{name} must be true or false", code="invalid_flag")


def arg_int(name: str, default: Optional[int] = None, *, lo: Optional[int] = None,
            hi: Optional[int] = None) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return default
    try:
        val = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", code="invalid_number")
    if lo is not None and val < lo:
        raise ValidationError(f"{name} must be >= {lo}", code="invalid_number")
    if hi is not None and val > hi:
        val = hi
    return val


def search_term() -> Optional[str]:
    """Free-text search; terms shorter than SEARCH_MIN_LENGTH are ignored."""
    q = (request.args.get("q") or "").strip()
    if len(q) < int(current_app.config.get("SEARCH_MIN_LENGTH", 2)):
        return None
    return q
