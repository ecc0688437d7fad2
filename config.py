from __future__ import annotations
import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'clinic.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    WTF_CSRF_HEADERS = ["X-CSRF-Token", "X-CSRFToken"]
    WTF_CSRF_TIME_LIMIT = None

    # booking grid: first and last bookable slot, step in minutes
    SLOT_OPEN = os.getenv("SLOT_OPEN", "10:00")
    SLOT_CLOSE = os.getenv("SLOT_CLOSE", "18:45")
    SLOT_STEP_MINUTES = int(os.getenv("SLOT_STEP_MINUTES", "15"))

    # used only when the booking_settings row is created
    DEFAULT_SLOT_CAPACITY_PER_DENTIST = int(os.getenv("DEFAULT_SLOT_CAPACITY_PER_DENTIST", "1"))
    DEFAULT_SLOT_CAPACITY_UNASSIGNED = int(os.getenv("DEFAULT_SLOT_CAPACITY_UNASSIGNED", "1"))

    # capacity is advisory unless switched on
    ENFORCE_SLOT_CAPACITY = _env_bool("ENFORCE_SLOT_CAPACITY", False)

    SEARCH_MIN_LENGTH = int(os.getenv("SEARCH_MIN_LENGTH", "2"))
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "200"))
    MAX_TIMETABLE_DAYS = int(os.getenv("MAX_TIMETABLE_DAYS", "14"))
    PATIENT_SEARCH_LIMIT = 20

    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300

    SEED_TEST_DATA = False
    DEFAULT_USERS: list[dict] = []


class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"email": "admin@example.com", "password": "pass", "role": "ADMIN"},
        {"email": "front@example.com", "password": "pass", "role": "STAFF"},
    ]


class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    AUTH_RL_MAX = 3
    AUTH_RL_WINDOW = 60


class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False


config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
