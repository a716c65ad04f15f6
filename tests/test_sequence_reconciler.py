"""
Tests for SequenceReconciler
"""

from unittest.mock import Mock

from app.models import Participant, Penalty
from app.services.import_engine import ImportEngine
from app.services.sequence_reconciler import IDENTITY_TABLES, SequenceReconciler


class TestSequenceReconciler:

    def test_next_id_follows_explicit_high_id(self, db_session):
        """Explicit id 500 after ids 1..10: the next generated id is 501."""
        for i in range(10):
            db_session.add(Participant(name=f"P{i}", gender="F"))
        # A removed row leaves the watermark at 900
        db_session.add(Participant(id=900, name="Gone", gender="M"))
        db_session.commit()
        db_session.query(Participant).filter(Participant.id == 900).delete()
        db_session.commit()

        ImportEngine(db_session, auto_fix_sequences=False).run({
            "participants": [{"id": 500, "name": "Anna", "gender": "F"}],
        })
        SequenceReconciler(db_session).reconcile()

        row = Participant(name="Ben", gender="M")
        db_session.add(row)
        db_session.commit()

        assert row.id == 501

    def test_watermark_drops_back_after_rows_removed(self, db_session):
        db_session.add(Participant(id=40, name="Anna", gender="F"))
        db_session.commit()
        db_session.query(Participant).delete()
        db_session.add(Participant(id=3, name="Ben", gender="M"))
        db_session.commit()

        SequenceReconciler(db_session, tables=["participants"]).reconcile()

        row = Participant(name="Clara", gender="F")
        db_session.add(row)
        db_session.commit()
        assert row.id == 4

    def test_reports_every_table(self, db_session):
        db_session.add(Participant(name="Anna", gender="F"))
        db_session.commit()

        results = SequenceReconciler(db_session).reconcile()

        assert set(results) == set(IDENTITY_TABLES)
        assert results["participants"] is True

    def test_failure_is_contained_per_table(self, db_session):
        db_session.add(Penalty(participant_name="Anna", reason="x", amount=10, date="2025-01-01"))
        db_session.commit()

        results = SequenceReconciler(db_session, tables=["penalties", "no_such_table"]).reconcile()

        assert results == {"penalties": True, "no_such_table": False}
        assert db_session.query(Penalty).count() == 1

    def test_unsupported_dialect_is_skipped(self):
        session = Mock()
        session.get_bind.return_value.dialect.name = "mssql"

        results = SequenceReconciler(session, tables=["participants"]).reconcile()

        assert results == {"participants": False}
        session.execute.assert_not_called()

    def test_postgresql_uses_setval(self):
        session = Mock()
        session.get_bind.return_value.dialect.name = "postgresql"
        session.get_bind.return_value.dialect.identifier_preparer.quote.side_effect = lambda name: f'"{name}"'

        results = SequenceReconciler(session, tables=["participants", "penalties"]).reconcile()

        assert results == {"participants": True, "penalties": True}
        statement, params = session.execute.call_args_list[0].args
        assert str(statement) == (
            "SELECT setval(pg_get_serial_sequence(:table, 'id'), "
            'coalesce(max(id) + 1, 1), false) FROM "participants"'
        )
        assert params == {"table": "participants"}
        assert session.execute.call_args_list[1].args[1] == {"table": "penalties"}
        assert session.commit.call_count == 2

    def test_postgresql_failure_rolls_back_that_table_only(self):
        session = Mock()
        session.get_bind.return_value.dialect.name = "postgresql"
        session.execute.side_effect = [RuntimeError("permission denied"), None]

        results = SequenceReconciler(session, tables=["participants", "penalties"]).reconcile()

        assert results == {"participants": False, "penalties": True}
        session.rollback.assert_called_once()
        session.commit.assert_called_once()
