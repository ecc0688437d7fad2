from __future__ import annotations
from dataclasses import asdict

from flask import current_app, jsonify, request
from flask_login import login_required

from . import bp
from .schemas import DentistOut, PatientOut, ServiceOut, SettingsIn, SettingsOut
from . import services as svc
from blueprints.api.params import arg_bool, arg_int
from blueprints.auth.routes import admin_required


def ok(data, status: int = 200):
    return jsonify(data), status


@bp.get("/dentists")
@login_required
def api_dentists_list():
    active_only = arg_bool("active_only", True)
    items = [DentistOut.model_validate(asdict(d)).model_dump(mode="json")
             for d in svc.list_dentists(active_only=active_only)]
    return ok({"items": items})


@bp.get("/services")
@login_required
def api_services_list():
    active_only = arg_bool("active_only", True)
    items = [ServiceOut.model_validate(asdict(s)).model_dump(mode="json")
             for s in svc.list_services(active_only=active_only)]
    return ok({"items": items})


@bp.get("/patients")
@login_required
def api_patients_search():
    q = request.args.get("q", "")
    limit = arg_int("limit", current_app.config.get("PATIENT_SEARCH_LIMIT", 20), lo=1, hi=100)
    offset = arg_int("offset", 0, lo=0)
    items = [PatientOut.model_validate(asdict(p)).model_dump(mode="json")
             for p in svc.search_patients(q, limit=limit, offset=offset)]
    return ok({"items": items, "meta": {"limit": limit, "offset": offset}})


@bp.get("/settings")
@login_required
def api_settings_get():
    row = svc.get_settings_row()
    return ok(SettingsOut.model_validate(row, from_attributes=True).model_dump(mode="json"))


@bp.put("/settings")
@admin_required
def api_settings_update():
    parsed = SettingsIn.model_validate(request.get_json(silent=True) or {})
    row = svc.update_settings(parsed.slot_capacity_per_dentist, parsed.slot_capacity_unassigned)
    return ok(SettingsOut.model_validate(row, from_attributes=True).model_dump(mode="json"))
