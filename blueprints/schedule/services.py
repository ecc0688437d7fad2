# blueprints/schedule/services.py
from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional, Sequence

from flask import current_app

from blueprints.bookings.services import current_grid, list_bookings_in_range
from blueprints.directory.services import active_dentist_count, get_settings
from scheduling.capacity import aggregate_capacity
from scheduling.errors import ValidationError
from scheduling.grid import format_time
from scheduling.query import DayColumns, timetable


def build_columns(anchor: date, extra: Sequence[date] = ()) -> DayColumns:
    limit = int(current_app.config.get("MAX_TIMETABLE_DAYS", 14))
    if 1 + len(extra) > limit:
        raise ValidationError(f"At most {limit} day columns can be shown", code="too_many_days")
    return DayColumns(anchor, extra)


def timetable_for(columns: DayColumns, dentist_id: Optional[int] = None,
                  include_unassigned: bool = True) -> Dict:
    """Timetable payload: every grid slot × every day column, with capacity."""
    grid = current_grid()
    settings = get_settings()
    n_dentists = active_dentist_count()
    d_from, d_to = columns.query_range()
    bookings = list_bookings_in_range(d_from, d_to)

    rows = timetable(columns.days, grid, bookings, n_dentists, settings,
                     dentist_filter=dentist_id, include_unassigned=include_unassigned)
    out_rows: List[Dict] = []
    for slot, cells in zip(grid, rows):
        out_rows.append({
            "time": format_time(slot),
            "cells": [c.to_dict() for c in cells],
        })
    return {
        "days": [d.isoformat() for d in columns.days],
        "range": {"date_from": d_from.isoformat(), "date_to": d_to.isoformat()},
        "filter": {"dentist_id": dentist_id, "include_unassigned": include_unassigned},
        "settings": {
            "slot_capacity_per_dentist": settings.slot_capacity_per_dentist,
            "slot_capacity_unassigned": settings.slot_capacity_unassigned,
        },
        "active_dentists": n_dentists,
        "aggregate_capacity": aggregate_capacity(n_dentists, settings),
        "rows": out_rows,
    }
