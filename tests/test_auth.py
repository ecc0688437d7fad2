from __future__ import annotations
import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from blueprints.auth.routes import reset_rate_limits
from extensions import db
from models import User

@pytest.fixture()
def client_app():
    app = create_app("test")
    app.config.update(AUTH_RL_MAX=3, AUTH_RL_WINDOW=60)  # агрессивный лимит для теста
    reset_rate_limits()
    with app.app_context():
        db.create_all()
        db.session.add_all([
            User(email="admin@example.com", password_hash=generate_password_hash("adminpass"), role="ADMIN", is_active=True),
            User(email="front@example.com", password_hash=generate_password_hash("frontpass"), role="STAFF", is_active=True),
            User(email="gone@example.com", password_hash=generate_password_hash("gonepass"), role="STAFF", is_active=False),
        ])
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(client_app):
    return client_app.test_client()

def _login(client, email, password):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})

def test_unauthorized_401(client):
    r = client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.get_json()["error"] == "unauthorized"
    assert client.get("/api/v1/bookings").status_code == 401

def test_login_success_and_me(client):
    r = _login(client, "Admin@Example.com ", "adminpass")
    assert r.status_code == 200
    js = r.get_json()
    assert js["ok"] is True and js["user"]["role"] == "ADMIN"

    r2 = client.get("/api/v1/auth/me")
    assert r2.status_code == 200
    assert r2.get_json()["email"] == "admin@example.com"

def test_login_errors(client):
    assert _login(client, "", "").status_code == 400
    r = _login(client, "front@example.com", "nope")
    assert r.status_code == 401 and r.get_json()["error"] == "invalid_credentials"
    r = _login(client, "gone@example.com", "gonepass")
    assert r.status_code == 403 and r.get_json()["error"] == "inactive"

def test_forbidden_403_for_staff_on_settings(client):
    assert _login(client, "front@example.com", "frontpass").status_code == 200
    r = client.put("/api/v1/settings", json={"slot_capacity_per_dentist": 2, "slot_capacity_unassigned": 1})
    assert r.status_code == 403
    assert r.get_json()["error"] == "forbidden"

def test_rate_limit_login(client):
    for _ in range(3):  # AUTH_RL_MAX
        _login(client, "x@example.com", "wrong")
    r2 = _login(client, "x@example.com", "wrong")
    assert r2.status_code == 429
    assert r2.get_json()["error"] == "too_many_attempts"

def test_logout(client):
    assert _login(client, "front@example.com", "frontpass").status_code == 200
    r2 = client.post("/api/v1/auth/logout")
    assert r2.status_code == 200
    # теперь защищённый ресурс снова 401
    r3 = client.get("/api/v1/auth/me")
    assert r3.status_code == 401
