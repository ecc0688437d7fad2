from logging.config import fileConfig
import logging
import os
import sys

from alembic import context

# корень репозитория в sys.path, чтобы работал `from app import create_app`
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
log = logging.getLogger("alembic.env")

from app import create_app   # noqa: E402
from extensions import db    # noqa: E402
import models                # noqa: E402,F401  (booking, patient, ... попадают в metadata)

# FLASK_CONFIG выбирает БД так же, как при обычном запуске
app = create_app(os.getenv("FLASK_CONFIG"))
app.app_context().push()

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", str(db.engine.url).replace("%", "%%"))

target_metadata = db.metadata


def _configure(**kw):
    # batch mode: SQLite не умеет ALTER для check-constraints на booking / booking_settings
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
        **kw,
    )


def run_migrations_offline():
    """Generate SQL without a connection."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with db.engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    log.info("clinic schema is at head")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
