"""
Reference Check
Opt-in report of weak participant-name references that point nowhere
"""

from typing import Any, Dict, List

import structlog
from sqlalchemy.orm import Session

from app.models import Matchbox, Participant, Penalty

logger = structlog.get_logger(__name__)


def find_dangling_references(session: Session) -> List[Dict[str, Any]]:
    """
    List matchbox and penalty rows naming participants that do not exist.

    The store never enforces these references and the import path never
    calls this; it is a read-only report for callers that want integrity.

    Returns:
        list of {"table", "id", "field", "name"}
    """
    known = {name for (name,) in session.query(Participant.name).all()}
    dangling = []

    for box in session.query(Matchbox).order_by(Matchbox.id.asc()).all():
        for field in ("woman", "man"):
            name = getattr(box, field)
            if name not in known:
                dangling.append({"table": "matchboxes", "id": box.id, "field": field, "name": name})

    for penalty in session.query(Penalty).order_by(Penalty.id.asc()).all():
        if penalty.participant_name not in known:
            dangling.append({
                "table": "penalties",
                "id": penalty.id,
                "field": "participantName",
                "name": penalty.participant_name,
            })

    logger.info("reference_check_completed", dangling=len(dangling), participants=len(known))
    return dangling
