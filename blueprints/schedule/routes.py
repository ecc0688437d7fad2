# blueprints/schedule/routes.py
from __future__ import annotations
from datetime import date

from flask import Blueprint, jsonify
from flask_login import login_required

from blueprints.schedule import services as svc
from blueprints.api.params import arg_bool, arg_date, arg_dates, arg_int

api_bp = Blueprint("schedule_api", __name__)


@api_bp.get("/timetable")
@login_required
def api_timetable():
    # date: якорный день (первая колонка); days: остальные колонки через запятую
    anchor = arg_date("date", date.today())
    columns = svc.build_columns(anchor, arg_dates("days"))
    data = svc.timetable_for(
        columns,
        dentist_id=arg_int("dentist_id"),
        include_unassigned=bool(arg_bool("include_unassigned", True)),
    )
    return jsonify(data)
