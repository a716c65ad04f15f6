"""
Field Projection
Per-entity allow-listing of import records and row serialization for exports
"""

from typing import Any, Dict, List, Type

import structlog
from pydantic import BaseModel, ValidationError

from app.models import (
    BroadcastNote,
    Matchbox,
    MatchingNight,
    Participant,
    Penalty,
    ProbabilityCache,
)
from app.models.snapshot_schemas import (
    BroadcastNoteRecord,
    MatchboxRecord,
    MatchingNightRecord,
    ParticipantRecord,
    PenaltyRecord,
    ProbabilityCacheRecord,
)

logger = structlog.get_logger(__name__)

# Snapshot key -> (declared schema, ORM model)
ENTITY_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "participants": ParticipantRecord,
    "matchingNights": MatchingNightRecord,
    "matchboxes": MatchboxRecord,
    "penalties": PenaltyRecord,
    "broadcastNotes": BroadcastNoteRecord,
    "probabilityCache": ProbabilityCacheRecord,
}

ENTITY_MODELS = {
    "participants": Participant,
    "matchingNights": MatchingNight,
    "matchboxes": Matchbox,
    "penalties": Penalty,
    "broadcastNotes": BroadcastNote,
    "probabilityCache": ProbabilityCache,
}


class ProjectionError(ValueError):
    """Raised when an import record does not fit its entity schema."""

    def __init__(self, entity: str, index: int, errors: List[Dict[str, Any]]):
        self.entity = entity
        self.index = index
        self.errors = errors
        fields = ", ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in errors
        )
        super().__init__(f"Invalid {entity} record at index {index}: {fields}")


def project_record(entity: str, raw: Any, index: int = 0) -> Dict[str, Any]:
    """
    Reduce one raw record to the columns its entity defines.

    Unknown keys are dropped silently, known keys are type-checked. Unset
    optional values are left out so column defaults apply.

    Args:
        entity: snapshot key (participants, matchingNights, ...)
        raw: record as received in the document
        index: position in the source array, used in error messages

    Returns:
        dict of ORM column kwargs (snake_case)

    Raises:
        ProjectionError: record is not an object or fails validation
    """
    schema = ENTITY_SCHEMAS[entity]
    if not isinstance(raw, dict):
        raise ProjectionError(
            entity, index,
            [{"loc": (), "msg": f"expected an object, got {type(raw).__name__}"}],
        )
    try:
        record = schema.model_validate(raw)
    except ValidationError as e:
        raise ProjectionError(entity, index, e.errors()) from e

    return record.model_dump(exclude_none=True)


def project_records(entity: str, rows: List[Any]) -> List[Dict[str, Any]]:
    projected = [project_record(entity, row, index) for index, row in enumerate(rows)]
    logger.debug("records_projected", entity=entity, count=len(projected))
    return projected


def serialize_row(entity: str, row: Any) -> Dict[str, Any]:
    """Render an ORM row in snapshot (camelCase, JSON-safe) form."""
    schema = ENTITY_SCHEMAS[entity]
    columns = {column.key: getattr(row, column.key) for column in row.__table__.columns}
    return schema.model_validate(columns).model_dump(by_alias=True, mode="json")
