# blueprints/bookings/routes.py
from __future__ import annotations
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user

from . import services as svc
from .schemas import BookingCreateIn, BookingUpdateIn
from blueprints.api.params import arg_bool, arg_date, arg_int, search_term
from scheduling.query import ManageFilters

api_bp = Blueprint("bookings_api", __name__)


@api_bp.get("/bookings")
@login_required
def api_bookings_list():
    cfg = current_app.config
    today = date.today()
    filters = ManageFilters(
        date_from=arg_date("date_from", today),
        date_to=arg_date("date_to", today),
        dentist_id=arg_int("dentist_id"),
        status=(request.args.get("status") or "all").lower(),
        q=search_term(),
        include_deleted=bool(arg_bool("include_deleted", False)),
    )
    page = arg_int("page", 0, lo=0)
    page_size = arg_int("page_size", cfg.get("DEFAULT_PAGE_SIZE", 20), lo=1, hi=cfg.get("MAX_PAGE_SIZE", 200))
    result = svc.list_bookings_filtered(filters, page, page_size)
    return jsonify(result.to_dict())


@api_bp.post("/bookings")
@login_required
def api_bookings_create():
    data = BookingCreateIn.model_validate(request.get_json(silent=True) or {})
    booking_id = svc.create_booking(data.to_draft(), created_by=getattr(current_user, "id", None))
    return jsonify({"ok": True, "booking": svc.get_booking(booking_id).to_dict()}), 201


@api_bp.get("/bookings/<int:booking_id>")
@login_required
def api_bookings_get(booking_id: int):
    return jsonify(svc.get_booking(booking_id).to_dict())


@api_bp.put("/bookings/<int:booking_id>")
@login_required
def api_bookings_update(booking_id: int):
    data = BookingUpdateIn.model_validate(request.get_json(silent=True) or {})
    svc.update_booking(booking_id, data.to_draft())
    return jsonify({"ok": True, "booking": svc.get_booking(booking_id).to_dict()})


@api_bp.post("/bookings/<int:booking_id>/cancel")
@login_required
def api_bookings_cancel(booking_id: int):
    svc.cancel_booking(booking_id)
    return jsonify({"ok": True, "booking": svc.get_booking(booking_id).to_dict()})


@api_bp.delete("/bookings/<int:booking_id>")
@login_required
def api_bookings_delete(booking_id: int):
    svc.soft_delete_booking(booking_id)
    return "", 204
