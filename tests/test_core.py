from __future__ import annotations
import json
import logging

from app import create_app
from blueprints.core.routes import JSONFormatter


def test_health_ok():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert data["ts"].endswith("Z")


def test_csrf_token_endpoint():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/api/v1/csrf")
        assert rv.status_code == 200
        assert rv.get_json()["csrf"]


def test_slots_endpoint():
    app = create_app("test")
    with app.test_client() as c:
        data = c.get("/api/v1/slots").get_json()
        assert data["open"] == "10:00"
        assert data["close"] == "18:45"
        assert data["step_minutes"] == 15
        assert len(data["slots"]) == 36


def test_unknown_route_is_json_404():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/api/v1/nope")
        assert rv.status_code == 404
        assert rv.get_json()["error"] == "not_found"


def test_json_formatter_carries_extra_keys():
    rec = logging.LogRecord("blueprints.bookings", logging.INFO, __file__, 1, "booking created", None, None)
    rec.event = "booking_created"
    rec.booking_id = 42
    out = json.loads(JSONFormatter().format(rec))
    assert out["msg"] == "booking created"
    assert out["event"] == "booking_created"
    assert out["booking_id"] == 42
    assert out["level"] == "INFO"


def test_api_packages_expose_their_blueprints():
    import blueprints.bookings, blueprints.reports, blueprints.schedule

    for pkg, name in ((blueprints.bookings, "bookings_api"),
                      (blueprints.schedule, "schedule_api"),
                      (blueprints.reports, "reports_api")):
        assert pkg.__file__ is not None  # regular package, not a namespace one
        assert pkg.api_bp.name == name

    app = create_app("test")
    assert {"bookings_api", "schedule_api", "reports_api"} <= set(app.blueprints)
