"""
Tests for ImportEngine

Tests cover:
- All-or-nothing writes (validation and store errors)
- clearBeforeImport replace semantics
- Undeclared fields dropped
- Legacy document shapes
- Per-category stats
"""

import pytest

from app.models import BroadcastNote, Matchbox, MatchingNight, Participant, Penalty
from app.services.import_engine import ImportEngine, ImportFailedError


def _counts(session):
    return {
        "participants": session.query(Participant).count(),
        "matchingNights": session.query(MatchingNight).count(),
        "matchboxes": session.query(Matchbox).count(),
        "penalties": session.query(Penalty).count(),
        "broadcastNotes": session.query(BroadcastNote).count(),
    }


class TestImportAtomicity:
    """An invalid record leaves the store exactly as it was."""

    def test_invalid_record_writes_nothing(self, db_session, snapshot):
        ImportEngine(db_session).run(snapshot)
        before = _counts(db_session)

        bad = {
            "participants": [{"name": "Dana", "gender": "F"}],
            "penalties": [{"participantName": "Dana", "reason": "x", "amount": -5, "date": "2025-09-12"}],
        }
        with pytest.raises(ImportFailedError) as exc_info:
            ImportEngine(db_session).run(bad)

        assert "penalties" in str(exc_info.value)
        assert _counts(db_session) == before

    def test_invalid_record_with_clear_keeps_existing_rows(self, db_session, snapshot):
        ImportEngine(db_session).run(snapshot)
        before = _counts(db_session)

        bad = {"clearBeforeImport": True, "participants": [{"name": "Dana"}]}  # gender missing
        with pytest.raises(ImportFailedError):
            ImportEngine(db_session).run(bad)

        assert _counts(db_session) == before

    def test_store_error_rolls_back_clear(self, db_session, snapshot):
        ImportEngine(db_session).run(snapshot)
        before = _counts(db_session)

        duplicate_ids = {
            "clearBeforeImport": True,
            "participants": [
                {"id": 10, "name": "Dana", "gender": "F"},
                {"id": 10, "name": "Emil", "gender": "M"},
            ],
        }
        with pytest.raises(ImportFailedError):
            ImportEngine(db_session).run(duplicate_ids)

        assert _counts(db_session) == before
        names = {p.name for p in db_session.query(Participant).all()}
        assert names == {"Anna", "Ben", "Clara"}

    def test_unrecognized_document_rejected(self, db_session):
        with pytest.raises(ImportFailedError):
            ImportEngine(db_session).run("participants")


class TestClearSemantics:

    def test_clear_replaces_existing_participants(self, db_session):
        ImportEngine(db_session).run({
            "participants": [
                {"name": "B", "gender": "M"},
                {"name": "C", "gender": "F"},
            ]
        })

        ImportEngine(db_session).run({
            "clearBeforeImport": True,
            "participants": [{"name": "A", "gender": "F"}],
        })

        assert [p.name for p in db_session.query(Participant).all()] == ["A"]

    def test_clear_empties_all_entity_tables(self, db_session, snapshot):
        ImportEngine(db_session).run(snapshot)

        ImportEngine(db_session).run({"clearBeforeImport": True})

        assert all(count == 0 for count in _counts(db_session).values())

    def test_import_without_clear_appends(self, db_session):
        payload = {"participants": [{"name": "A", "gender": "F"}]}

        ImportEngine(db_session).run(payload)
        ImportEngine(db_session).run(payload)

        assert db_session.query(Participant).filter(Participant.name == "A").count() == 2

    @pytest.mark.parametrize("flag", ["true", 1, "yes"])
    def test_non_boolean_clear_flag_does_not_purge(self, db_session, flag):
        ImportEngine(db_session).run({"participants": [{"name": "B", "gender": "M"}]})

        ImportEngine(db_session).run({
            "clearBeforeImport": flag,
            "participants": [{"name": "A", "gender": "F"}],
        })

        assert db_session.query(Participant).count() == 2

    def test_clear_import_is_idempotent(self, db_session, snapshot):
        payload = {**snapshot, "clearBeforeImport": True}

        ImportEngine(db_session).run(payload)
        first = _counts(db_session)
        ImportEngine(db_session).run(payload)

        assert _counts(db_session) == first


class TestFieldAllowListing:

    def test_undeclared_field_is_dropped(self, db_session):
        ImportEngine(db_session).run({
            "participants": [{"name": "Anna", "gender": "F", "foo": "bar"}],
        })

        row = db_session.query(Participant).one()
        assert row.name == "Anna"
        assert not hasattr(row, "foo")

    def test_camel_case_fields_map_to_columns(self, db_session):
        ImportEngine(db_session).run({
            "participants": [{
                "name": "Anna",
                "gender": "F",
                "knownFrom": "Temptation Island",
                "photoUrl": "https://example.org/anna.jpg",
                "socialMediaAccount": "@anna",
            }],
        })

        row = db_session.query(Participant).one()
        assert row.known_from == "Temptation Island"
        assert row.photo_url == "https://example.org/anna.jpg"
        assert row.social_media_account == "@anna"


class TestLegacyShapes:

    def test_bare_array_is_participant_list(self, db_session):
        stats = ImportEngine(db_session).run([
            {"name": "Anna", "gender": "weiblich"},
            {"name": "Ben", "gender": "m"},
        ])

        assert stats.participants == 2
        genders = {p.name: p.gender for p in db_session.query(Participant).all()}
        assert genders == {"Anna": "F", "Ben": "M"}

    def test_legacy_matchbox_ids_become_names(self, db_session):
        ImportEngine(db_session).run({
            "matchboxes": [{"womanId": "Anna", "manId": "Ben", "matchType": "perfect"}],
        })

        box = db_session.query(Matchbox).one()
        assert (box.woman, box.man) == ("Anna", "Ben")

    def test_matching_night_date_falls_back_to_broadcast_date(self, db_session):
        ImportEngine(db_session).run({
            "matchingNights": [{"name": "MN 2", "ausstrahlungsdatum": "2025-09-15", "pairs": []}],
        })

        night = db_session.query(MatchingNight).one()
        assert night.date.isoformat() == "2025-09-15"
        assert night.total_lights == 0


class TestImportStats:

    def test_stats_count_rows_per_category(self, db_session, snapshot):
        stats = ImportEngine(db_session).run(snapshot)

        assert stats.participants == 3
        assert stats.matchingNights == 1
        assert stats.matchboxes == 1
        assert stats.penalties == 1
        assert stats.broadcastNotes == 1
        assert stats.probabilityCache == 0

    def test_broadcast_notes_upserted_by_date(self, db_session):
        ImportEngine(db_session).run({"broadcastNotes": [{"date": "2025-01-01", "notes": "old"}]})
        ImportEngine(db_session).run({"broadcastNotes": [{"date": "2025-01-01", "notes": "new"}]})

        notes = db_session.query(BroadcastNote).all()
        assert len(notes) == 1
        assert notes[0].notes == "new"

    def test_repeated_natural_key_counted_once(self, db_session):
        stats = ImportEngine(db_session).run({
            "broadcastNotes": [
                {"date": "2025-01-01", "notes": "a"},
                {"date": "2025-01-01", "notes": "b"},
            ],
            "probabilityCache": [
                {"dataHash": "h1", "results": {}},
                {"dataHash": "h1", "results": {"Anna+Ben": 1.0}},
                {"dataHash": "h2", "results": {}},
            ],
        })

        assert stats.broadcastNotes == db_session.query(BroadcastNote).count() == 1
        assert stats.probabilityCache == 2
        assert db_session.query(BroadcastNote).one().notes == "b"


class TestSequenceRepairAfterClear:
    """Ids left behind by a cleared table must not push the next id up."""

    def _preload_high_id(self, db_session):
        db_session.add(Participant(id=600, name="Old", gender="F"))
        db_session.commit()

    def _next_id(self, db_session):
        row = Participant(name="Ben", gender="M")
        db_session.add(row)
        db_session.commit()
        return row.id

    def test_next_id_follows_imported_max(self, db_session):
        self._preload_high_id(db_session)

        ImportEngine(db_session).run({
            "clearBeforeImport": True,
            "participants": [{"id": 500, "name": "Anna", "gender": "F"}],
        })

        assert self._next_id(db_session) == 501

    def test_without_repair_next_id_follows_cleared_rows(self, db_session):
        self._preload_high_id(db_session)

        ImportEngine(db_session, auto_fix_sequences=False).run({
            "clearBeforeImport": True,
            "participants": [{"id": 500, "name": "Anna", "gender": "F"}],
        })

        assert self._next_id(db_session) == 601
