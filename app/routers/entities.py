"""
Entity CRUD API Routers
Single-record list/get/create/update/delete for the six entity tables
"""

from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import structlog

from app.database import get_db
from app.services.field_projection import (
    ENTITY_MODELS,
    ProjectionError,
    project_record,
    serialize_row,
)
from app.services.natural_keys import upsert_broadcast_note, upsert_probability_cache

logger = structlog.get_logger()


def _require_db(db: Optional[Session]) -> Session:
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return db


def build_entity_router(
    entity: str,
    prefix: str,
    order_by: Callable[[Any], Any],
    natural_key: Optional[Tuple[str, str]] = None,
    upsert: Optional[Callable] = None,
) -> APIRouter:
    """
    Build the CRUD router for one entity.

    Args:
        entity: snapshot key (participants, matchingNights, ...)
        prefix: URL prefix, e.g. "/participants"
        order_by: callable returning the ORDER BY clause for the list endpoint
        natural_key: (column attribute, query parameter) to look one row up
            via ``GET prefix?<param>=...``
        upsert: natural-key upsert used by POST instead of a plain insert
    """
    model = ENTITY_MODELS[entity]
    router = APIRouter(prefix=prefix, tags=[entity])

    @router.get("")
    async def list_rows(
        key: Optional[str] = Query(None, alias=natural_key[1] if natural_key else "key"),
        db: Session = Depends(get_db),
    ):
        """List all rows, or return the single row matching the natural key (null if absent)."""
        db = _require_db(db)

        if natural_key and key is not None:
            row = db.query(model).filter(getattr(model, natural_key[0]) == key).first()
            return serialize_row(entity, row) if row else None

        rows = db.query(model).order_by(order_by(model)).all()
        return [serialize_row(entity, row) for row in rows]

    @router.get("/{row_id}")
    async def get_row(row_id: int, db: Session = Depends(get_db)):
        db = _require_db(db)
        row = db.query(model).filter(model.id == row_id).first()
        if not row:
            raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
        return serialize_row(entity, row)

    @router.post("")
    async def create_row(data: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
        """
        Create a row. ``id`` 0 or absent lets the store assign one.

        Entities with a natural key are upserted: posting the same key twice
        leaves one row carrying the latest values.
        """
        db = _require_db(db)
        data = dict(data)
        if not data.get("id"):
            data.pop("id", None)

        try:
            values = project_record(entity, data)
        except ProjectionError as e:
            raise HTTPException(status_code=422, detail=str(e))

        if upsert is not None:
            row, created = upsert(db, values)
        else:
            row, created = model(**values), True
            db.add(row)

        db.commit()
        db.refresh(row)
        logger.info("entity_written", entity=entity, id=row.id, created=created)
        return serialize_row(entity, row)

    @router.put("/{row_id}")
    async def update_row(row_id: int, data: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
        """Partial update; the id in the path wins over any id in the body."""
        db = _require_db(db)
        row = db.query(model).filter(model.id == row_id).first()
        if not row:
            raise HTTPException(status_code=404, detail=f"{model.__name__} not found")

        merged = {**serialize_row(entity, row), **data, "id": row_id}
        try:
            values = project_record(entity, merged)
        except ProjectionError as e:
            raise HTTPException(status_code=422, detail=str(e))

        for attr, value in values.items():
            if attr not in ("id", "created_at", "updated_at"):
                setattr(row, attr, value)
        db.commit()
        db.refresh(row)
        logger.info("entity_updated", entity=entity, id=row_id)
        return serialize_row(entity, row)

    @router.delete("/{row_id}")
    async def delete_row(row_id: int, db: Session = Depends(get_db)):
        db = _require_db(db)
        row = db.query(model).filter(model.id == row_id).first()
        if not row:
            raise HTTPException(status_code=404, detail=f"{model.__name__} not found")

        payload = serialize_row(entity, row)
        db.delete(row)
        db.commit()
        logger.info("entity_deleted", entity=entity, id=row_id)
        return payload

    @router.delete("")
    async def delete_all(db: Session = Depends(get_db)):
        db = _require_db(db)
        count = db.query(model).delete()
        db.commit()
        logger.info("entity_table_cleared", entity=entity, count=count)
        return {"count": count}

    return router


participants_router = build_entity_router(
    "participants", "/participants", lambda m: m.id.asc(),
)
matching_nights_router = build_entity_router(
    "matchingNights", "/matching-nights", lambda m: m.date.asc(),
)
matchboxes_router = build_entity_router(
    "matchboxes", "/matchboxes", lambda m: m.created_at.desc(),
)
penalties_router = build_entity_router(
    "penalties", "/penalties", lambda m: m.date.desc(),
)
broadcast_notes_router = build_entity_router(
    "broadcastNotes", "/broadcast-notes", lambda m: m.date.desc(),
    natural_key=("date", "date"),
    upsert=upsert_broadcast_note,
)
probability_cache_router = build_entity_router(
    "probabilityCache", "/probability-cache", lambda m: m.id.asc(),
    natural_key=("data_hash", "dataHash"),
    upsert=upsert_probability_cache,
)
