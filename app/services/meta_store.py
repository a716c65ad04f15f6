"""
Meta Store
Key/value watermarks recording which snapshot the database currently holds
"""

from typing import Optional

import structlog
from sqlalchemy.orm import Session

from app.models import Meta

logger = structlog.get_logger(__name__)

DB_VERSION_KEY = "dbVersion"
DATA_HASH_KEY = "dataHash"
LAST_UPDATE_KEY = "lastUpdateDate"


def get_meta_value(session: Session, key: str) -> Optional[str]:
    meta = session.query(Meta).filter(Meta.key == key).first()
    return meta.value if meta else None


def set_meta_value(session: Session, key: str, value: str) -> Meta:
    """
    Insert or overwrite the value stored under ``key`` and commit.

    Returns:
        The persisted Meta row
    """
    meta = session.query(Meta).filter(Meta.key == key).first()
    if meta is None:
        meta = Meta(key=key, value=value)
        session.add(meta)
    else:
        meta.value = value

    session.commit()
    session.refresh(meta)

    logger.info("meta_value_stored", key=key, value=value)
    return meta


def meta_to_dict(meta: Meta) -> dict:
    return {
        "id": meta.id,
        "key": meta.key,
        "value": meta.value,
        "updatedAt": meta.updated_at.isoformat() if meta.updated_at else None,
    }
