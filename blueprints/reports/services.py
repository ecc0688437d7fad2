# blueprints/reports/services.py
from __future__ import annotations
from io import StringIO
import csv
from typing import List

from blueprints.bookings.services import list_bookings_in_range
from scheduling.entities import BookingView
from scheduling.grid import format_time
from scheduling.query import SummaryFilters, SummaryGroup, group_summary, summary_rows

CSV_HEADER = ["group", "date", "time", "patient", "phone", "dentist", "services", "status", "note"]


def list_bookings_for_summary(filters: SummaryFilters) -> List[BookingView]:
    rows = list_bookings_in_range(filters.date_from, filters.date_to, include_deleted=False)
    return summary_rows(rows, filters)


def summary(filters: SummaryFilters, group_by: str) -> List[SummaryGroup]:
    return group_summary(list_bookings_for_summary(filters), group_by)


def _services_text(b: BookingView) -> str:
    return ", ".join([*b.service_names, *b.other_services])


def summary_csv(filters: SummaryFilters, group_by: str) -> str:
    """
    CSV: group;date;time;patient;phone;dentist;services;status;note
    rows come out in group order, then by date and time
    """
    groups = summary(filters, group_by)
    buf = StringIO()
    w = csv.writer(buf, delimiter=";")
    w.writerow(CSV_HEADER)
    for g in groups:
        for b in g.rows:
            w.writerow([
                g.key,
                b.booking_date.isoformat(),
                format_time(b.booking_time),
                b.patient_label,
                (b.phone or ""),
                b.dentist_label,
                _services_text(b),
                b.status,
                (b.note or ""),
            ])
    return buf.getvalue()
