"""
Import / Export API Router
Bulk snapshot import, snapshot export, stats probe and reference report
"""

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import structlog

from app.config import settings
from app.database import get_db
from app.middleware.correlation_id import get_correlation_id
from app.models import Matchbox, MatchingNight, Participant, Penalty
from app.services.export_assembler import export_from_store
from app.services.import_engine import ImportEngine, ImportFailedError
from app.services.reference_check import find_dangling_references

logger = structlog.get_logger()

router = APIRouter(tags=["import-export"])


@router.post("/import")
async def import_snapshot(
    document: Union[Dict[str, Any], List[Any]] = Body(...),
    db: Session = Depends(get_db)
):
    """
    Import a snapshot document in one transaction

    Body: {clearBeforeImport?, participants?, matchingNights?, matchboxes?,
    penalties?, broadcastNotes?, probabilityCache?} or a bare participant array.

    Returns:
        200 {"success": true, "stats": {...}} with rows written per category
        500 {"error": "Import failed", "details": message}; nothing was written
    """
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    log = logger.bind(correlation_id=get_correlation_id())
    keys = sorted(document.keys()) if isinstance(document, dict) else ["<array>"]
    log.info("import_request_received", keys=keys)

    engine = ImportEngine(db, auto_fix_sequences=settings.auto_fix_sequences)
    try:
        stats = engine.run(document)
    except ImportFailedError as e:
        log.error("import_request_failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"error": "Import failed", "details": str(e)}
        )

    return {"success": True, "stats": stats.model_dump()}


@router.get("/stats")
async def get_stats(db: Session = Depends(get_db)):
    """
    Row counts, used by clients to detect an empty database
    """
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    return {
        "participants": db.query(Participant).count(),
        "matchingNights": db.query(MatchingNight).count(),
        "matchboxes": db.query(Matchbox).count(),
        "penalties": db.query(Penalty).count(),
    }


@router.get("/export")
async def export_snapshot(db: Session = Depends(get_db)):
    """
    Snapshot of participants, matching nights, matchboxes, penalties and
    broadcast notes, tagged with exportedAt and the configured version
    """
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    return export_from_store(db, version=settings.export_version)


@router.get("/integrity/references")
async def dangling_references(db: Session = Depends(get_db)):
    """
    Matchboxes and penalties naming participants that do not exist
    """
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    dangling = find_dangling_references(db)
    return {"total": len(dangling), "dangling": dangling}
