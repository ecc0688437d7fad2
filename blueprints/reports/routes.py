# blueprints/reports/routes.py
from __future__ import annotations
from datetime import date
from flask import Blueprint, Response, jsonify, request
from flask_login import login_required

from .services import summary, summary_csv
from blueprints.api.params import arg_bool, arg_date, arg_int
from scheduling.query import GROUP_BY_DATE, SummaryFilters

api_bp = Blueprint("reports_api", __name__)


def _filters() -> SummaryFilters:
    today = date.today()
    return SummaryFilters(
        date_from=arg_date("date_from", today),
        date_to=arg_date("date_to", today),
        dentist_id=arg_int("dentist_id"),
        include_cancelled=bool(arg_bool("include_cancelled", False)),
        include_unassigned=arg_bool("include_unassigned", True),
    )


def _group_by() -> str:
    return (request.args.get("group_by") or GROUP_BY_DATE).lower()


def _csv_resp(content: str, filename: str) -> Response:
    return Response(
        content,
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@api_bp.get("/summary")
@login_required
def api_summary():
    filters = _filters()
    group_by = _group_by()
    groups = summary(filters, group_by)
    return jsonify({
        "range": {"date_from": filters.date_from.isoformat(), "date_to": filters.date_to.isoformat()},
        "group_by": group_by,
        "total": sum(len(g.rows) for g in groups),
        "groups": [g.to_dict() for g in groups],
    })


@api_bp.get("/summary.csv")
@login_required
def api_summary_csv():
    filters = _filters()
    content = summary_csv(filters, _group_by())
    return _csv_resp(content, f"summary_{filters.date_from.isoformat()}_{filters.date_to.isoformat()}.csv")
