from __future__ import annotations
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from scheduling.errors import SchedulingError, TransportError

log = logging.getLogger(__name__)


@contextmanager
def store_call(action: str):
    """Run one store operation; any failure rolls the session back.

    Database errors surface as ``TransportError``, domain errors propagate
    unchanged.
    """
    try:
        yield db.session
    except SchedulingError:
        db.session.rollback()
        raise
    except SQLAlchemyError as ex:
        db.session.rollback()
        log.error("store call failed", extra={"event": "store_error", "action": action}, exc_info=True)
        raise TransportError(f"Could not {action}: the database rejected or failed the request",
                             reason=ex.__class__.__name__)
