"""
Import Engine
Transactional bulk load of snapshot documents with clear-and-replace semantics
"""

from typing import Any, Dict, List, Optional, Union

import structlog
from sqlalchemy.orm import Session

from app.models import (
    BroadcastNote,
    Matchbox,
    MatchingNight,
    Participant,
    Penalty,
    ProbabilityCache,
)
from app.models.snapshot_schemas import ImportStats
from app.services.field_projection import ENTITY_MODELS, project_records
from app.services.natural_keys import upsert_broadcast_note, upsert_probability_cache
from app.services.payload_normalizer import ENTITY_KEYS, normalize_payload, wants_clear
from app.services.sequence_reconciler import SequenceReconciler

logger = structlog.get_logger(__name__)

# Dependents before the entities they (weakly) reference
CLEAR_ORDER = (
    ProbabilityCache,
    BroadcastNote,
    Penalty,
    Matchbox,
    MatchingNight,
    Participant,
)

# Entities inserted as new rows; no identity dedupe
PLAIN_INSERT_KEYS = ("participants", "matchingNights", "matchboxes", "penalties")

NATURAL_KEY_UPSERTS = {
    "broadcastNotes": upsert_broadcast_note,
    "probabilityCache": upsert_probability_cache,
}


class ImportFailedError(Exception):
    """Raised when an import is rejected or rolled back. The store is unchanged."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class ImportEngine:
    """
    All-or-nothing bulk import.

    Flow:
    1. Normalize legacy shapes and project every record onto its entity schema
       (nothing touches the store if a record is invalid)
    2. Optionally delete every row of the six entity tables
    3. Insert participants, matching nights, matchboxes, penalties;
       upsert broadcast notes and probability cache entries by natural key
    4. Commit, or roll back everything on the first store error
    5. After a clear-and-replace import, reset identity sequences (best effort)

    Importing the same snapshot twice with clearBeforeImport yields the same
    end state. Without it, plain entities are appended and duplicate.
    """

    def __init__(self, session: Session, auto_fix_sequences: bool = True):
        """
        Args:
            session: SQLAlchemy session; the engine commits or rolls it back
            auto_fix_sequences: run SequenceReconciler after clear-and-replace
        """
        self.session = session
        self.auto_fix_sequences = auto_fix_sequences
        self.logger = logger.bind(service="import_engine")

    def run(self, document: Union[Dict[str, Any], List[Any]]) -> ImportStats:
        """
        Import one document.

        Args:
            document: snapshot object (or legacy participant array)

        Returns:
            ImportStats with the rows written per category

        Raises:
            ImportFailedError: validation failed or the transaction rolled back
        """
        try:
            payload = normalize_payload(document)
            clear = wants_clear(payload)
            projected = {
                key: project_records(key, payload[key])
                for key in ENTITY_KEYS
                if key in payload
            }
        except ValueError as e:
            self.logger.warning("import_rejected", error=str(e))
            raise ImportFailedError(str(e), cause=e) from e

        self.logger.info(
            "import_started",
            clear_before_import=clear,
            sections={key: len(rows) for key, rows in projected.items()},
        )

        try:
            stats = self._write(projected, clear)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            self.logger.error("import_rolled_back", error=str(e), exc_info=True)
            raise ImportFailedError(str(e), cause=e) from e

        self.logger.info("import_completed", **stats.model_dump())

        if clear and self.auto_fix_sequences:
            SequenceReconciler(self.session).reconcile()

        return stats

    def _write(self, projected: Dict[str, List[Dict[str, Any]]], clear: bool) -> ImportStats:
        stats = ImportStats()

        if clear:
            self._clear_all()

        for key in PLAIN_INSERT_KEYS:
            rows = projected.get(key)
            if not rows:
                continue
            model = ENTITY_MODELS[key]
            for values in rows:
                self.session.add(model(**values))
                # Flush per row so a failing record surfaces here, inside the transaction
                self.session.flush()
            setattr(stats, key, len(rows))
            self.logger.info("import_section_written", section=key, rows=len(rows))

        for key, upsert in NATURAL_KEY_UPSERTS.items():
            rows = projected.get(key)
            if not rows:
                continue
            created = 0
            for values in rows:
                _, inserted = upsert(self.session, values)
                created += int(inserted)
            # Repeated keys update the row created earlier in the batch
            setattr(stats, key, created)
            self.logger.info("import_section_written", section=key, rows=created, records=len(rows))

        return stats

    def _clear_all(self) -> None:
        deleted = {}
        for model in CLEAR_ORDER:
            deleted[model.__tablename__] = self.session.query(model).delete()
        self.logger.info("import_store_cleared", **deleted)
