"""
Export Assembler
Builds versioned snapshot documents that the Import Engine accepts unchanged
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy.orm import Session

from app.models import BroadcastNote, Matchbox, MatchingNight, Participant, Penalty
from app.services.field_projection import serialize_row

logger = structlog.get_logger(__name__)

# Matchbox fields that round-trip through import; anything else stays local
MATCHBOX_EXPORT_FIELDS = (
    "id",
    "woman",
    "man",
    "matchType",
    "price",
    "buyer",
    "soldDate",
    "ausstrahlungsdatum",
    "ausstrahlungszeit",
    "createdAt",
    "updatedAt",
)


def project_matchbox(matchbox: Dict[str, Any]) -> Dict[str, Any]:
    return {field: matchbox.get(field) for field in MATCHBOX_EXPORT_FIELDS}


def assemble_snapshot(
    participants: List[Dict[str, Any]],
    matching_nights: List[Dict[str, Any]],
    matchboxes: List[Dict[str, Any]],
    penalties: List[Dict[str, Any]],
    broadcast_notes: List[Dict[str, Any]],
    version: str,
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Combine the five entity collections into one snapshot document.

    Collections are expected in wire form (camelCase dicts). The probability
    cache is never part of a snapshot.
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    return {
        "participants": list(participants),
        "matchingNights": list(matching_nights),
        "matchboxes": [project_matchbox(m) for m in matchboxes],
        "penalties": list(penalties),
        "broadcastNotes": list(broadcast_notes),
        "exportedAt": exported_at.isoformat(),
        "version": version,
    }


def export_from_store(session: Session, version: str) -> Dict[str, Any]:
    """Read all five collections from the store and assemble a snapshot."""
    collections = {
        "participants": session.query(Participant).order_by(Participant.id.asc()).all(),
        "matchingNights": session.query(MatchingNight).order_by(MatchingNight.date.asc()).all(),
        "matchboxes": session.query(Matchbox).order_by(Matchbox.id.asc()).all(),
        "penalties": session.query(Penalty).order_by(Penalty.id.asc()).all(),
        "broadcastNotes": session.query(BroadcastNote).order_by(BroadcastNote.date.asc()).all(),
    }
    rendered = {
        key: [serialize_row(key, row) for row in rows]
        for key, rows in collections.items()
    }

    logger.info("snapshot_assembled", version=version, **{k: len(v) for k, v in rendered.items()})

    return assemble_snapshot(
        participants=rendered["participants"],
        matching_nights=rendered["matchingNights"],
        matchboxes=rendered["matchboxes"],
        penalties=rendered["penalties"],
        broadcast_notes=rendered["broadcastNotes"],
        version=version,
    )
