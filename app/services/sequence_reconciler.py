"""
Sequence Reconciler
Moves auto-increment watermarks past the highest id after imports with explicit ids
"""

from typing import Dict, Optional, Sequence

import structlog
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.models import (
    BroadcastNote,
    Matchbox,
    MatchingNight,
    Participant,
    Penalty,
    ProbabilityCache,
)

logger = structlog.get_logger(__name__)

IDENTITY_TABLES = (
    Participant.__tablename__,
    MatchingNight.__tablename__,
    Matchbox.__tablename__,
    Penalty.__tablename__,
    BroadcastNote.__tablename__,
    ProbabilityCache.__tablename__,
)


class SequenceReconciler:
    """
    Best-effort repair of identity sequences.

    After rows are inserted with caller-supplied ids the store's sequence may
    still point below max(id), and the next insert without an id collides.
    ``reconcile()`` sets the next value of every identity table to
    max(id) + 1 (1 for an empty table).

    Each table is reset in its own short transaction. A failure is logged and
    skipped; it never propagates and never touches data written earlier.
    """

    def __init__(self, session: Session, tables: Optional[Sequence[str]] = None):
        """
        Args:
            session: SQLAlchemy session; must not hold an open unit of work
                the caller still needs, since every table commits separately
            tables: override the table list (defaults to all identity tables)
        """
        self.session = session
        self.tables = tuple(tables) if tables is not None else IDENTITY_TABLES
        self.logger = logger.bind(service="sequence_reconciler")

    def reconcile(self) -> Dict[str, bool]:
        """
        Reset every configured table.

        Returns:
            dict: table name -> True if the reset statement succeeded
        """
        dialect = self.session.get_bind().dialect.name
        self.logger.info("sequence_reset_started", dialect=dialect, tables=list(self.tables))

        results = {}
        for table in self.tables:
            results[table] = self._reset_table(dialect, table)

        self.logger.info(
            "sequence_reset_completed",
            succeeded=sum(1 for ok in results.values() if ok),
            failed=[t for t, ok in results.items() if not ok],
        )
        return results

    def _reset_table(self, dialect: str, table: str) -> bool:
        statement = self._statement_for(dialect, table)
        if statement is None:
            self.logger.warning("sequence_reset_unsupported", dialect=dialect, table=table)
            return False

        try:
            self.session.execute(statement, {"table": table})
            self.session.commit()
            self.logger.info("sequence_reset", table=table)
            return True
        except Exception as e:
            self.session.rollback()
            self.logger.warning("sequence_reset_failed", table=table, error=str(e))
            return False

    def _statement_for(self, dialect: str, table: str):
        quoted = self.session.get_bind().dialect.identifier_preparer.quote(table)

        if dialect == "postgresql":
            return text(
                f"SELECT setval(pg_get_serial_sequence(:table, 'id'), "
                f"coalesce(max(id) + 1, 1), false) FROM {quoted}"
            )

        if dialect == "sqlite":
            # sqlite_sequence stores the last used id, so max(id) yields max(id) + 1 next
            return text(
                f"UPDATE sqlite_sequence SET seq = (SELECT coalesce(max(id), 0) FROM {quoted}) "
                f"WHERE name = :table"
            )

        return None
