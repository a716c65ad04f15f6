"""
Meta API Router
Watermark key/value access and the sequence repair trigger
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import structlog

from app.database import get_db
from app.middleware.correlation_id import get_correlation_id
from app.models.snapshot_schemas import MetaWrite
from app.services.meta_store import get_meta_value, meta_to_dict, set_meta_value
from app.services.sequence_reconciler import SequenceReconciler

logger = structlog.get_logger()

router = APIRouter(prefix="/meta", tags=["meta"])


@router.post("/fix-sequences")
async def fix_sequences(db: Session = Depends(get_db)):
    """
    Reset identity sequences to max(id) + 1 for every entity table

    Run after any import that supplied explicit ids without clearing first
    (clear-and-replace imports already do this).

    Returns:
        {"success": true, "message": str, "tables": {table: bool}}
    """
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    try:
        results = SequenceReconciler(db).reconcile()
    except Exception as e:
        logger.error("fix_sequences_failed", error=str(e), correlation_id=get_correlation_id())
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to reset sequences", "details": str(e)}
        )

    failed = [table for table, ok in results.items() if not ok]
    message = "All sequences reset" if not failed else f"Sequences reset, skipped: {', '.join(failed)}"
    return {"success": True, "message": message, "tables": results}


@router.get("/{key}")
async def read_meta(key: str, db: Session = Depends(get_db)):
    """Stored value for ``key``, or null"""
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    return {"value": get_meta_value(db, key)}


@router.post("")
async def write_meta(body: MetaWrite, db: Session = Depends(get_db)):
    """Upsert ``key`` -> ``value``"""
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")

    return meta_to_dict(set_meta_value(db, body.key, body.value))
