"""
Natural-key upserts
BroadcastNote (by date) and ProbabilityCache (by dataHash) keep at most one row per key
"""

from typing import Any, Dict, Tuple

import structlog
from sqlalchemy.orm import Session

from app.models import BroadcastNote, ProbabilityCache

logger = structlog.get_logger(__name__)


def _upsert(session: Session, model, key_attr: str, values: Dict[str, Any]) -> Tuple[Any, bool]:
    """
    Look the natural key up, then update the existing row or add a new one.

    Does not commit; the caller owns the transaction.

    Returns:
        (row, created)
    """
    key_value = values[key_attr]
    existing = session.query(model).filter(getattr(model, key_attr) == key_value).first()

    if existing is not None:
        for attr, value in values.items():
            if attr == "id":
                continue  # identity of the existing row wins
            setattr(existing, attr, value)
        session.flush()
        logger.debug("natural_key_updated", table=model.__tablename__, key=key_value, id=existing.id)
        return existing, False

    row = model(**values)
    session.add(row)
    session.flush()
    logger.debug("natural_key_inserted", table=model.__tablename__, key=key_value, id=row.id)
    return row, True


def upsert_broadcast_note(session: Session, values: Dict[str, Any]) -> Tuple[BroadcastNote, bool]:
    """Upsert a broadcast note by ``date``. ``values`` are projected column kwargs."""
    return _upsert(session, BroadcastNote, "date", values)


def upsert_probability_cache(session: Session, values: Dict[str, Any]) -> Tuple[ProbabilityCache, bool]:
    """Upsert a cache entry by ``data_hash``. ``values`` are projected column kwargs."""
    return _upsert(session, ProbabilityCache, "data_hash", values)
