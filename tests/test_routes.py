"""
API tests for import/export, entity CRUD and meta endpoints
"""

from app.models import BroadcastNote, Participant


class TestImportRoute:

    def test_import_returns_stats(self, client, snapshot):
        response = client.post("/import", json=snapshot)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["stats"]["participants"] == 3
        assert body["stats"]["broadcastNotes"] == 1

    def test_import_failure_body(self, client, db_session):
        response = client.post("/import", json={
            "participants": [{"name": "Anna", "gender": "F"}],
            "penalties": [{"participantName": "Anna", "reason": "x", "amount": 0, "date": "2025-09-12"}],
        })

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Import failed"
        assert "penalties" in body["details"]
        assert db_session.query(Participant).count() == 0

    def test_legacy_array_import(self, client):
        response = client.post("/import", json=[{"name": "Anna", "gender": "F"}])

        assert response.status_code == 200
        assert response.json()["stats"]["participants"] == 1

    def test_stats_counts(self, client, snapshot):
        client.post("/import", json=snapshot)

        response = client.get("/stats")

        assert response.json() == {
            "participants": 3,
            "matchingNights": 1,
            "matchboxes": 1,
            "penalties": 1,
        }

    def test_export_round_trip_over_http(self, client, snapshot):
        client.post("/import", json=snapshot)
        exported = client.get("/export").json()

        response = client.post("/import", json={**exported, "clearBeforeImport": True})

        assert response.status_code == 200
        assert client.get("/export").json()["participants"] == exported["participants"]

    def test_dangling_references_report(self, client):
        client.post("/import", json={
            "participants": [{"name": "Anna", "gender": "F"}],
            "matchboxes": [{"woman": "Anna", "man": "Ghost"}],
            "penalties": [{"participantName": "Nobody", "reason": "x", "amount": 5, "date": "2025-09-12"}],
        })

        body = client.get("/integrity/references").json()

        assert body["total"] == 2
        assert {(d["table"], d["field"], d["name"]) for d in body["dangling"]} == {
            ("matchboxes", "man", "Ghost"),
            ("penalties", "participantName", "Nobody"),
        }


class TestEntityRoutes:

    def test_participant_crud(self, client):
        created = client.post("/participants", json={"id": 0, "name": "Anna", "gender": "F"}).json()
        assert created["id"] > 0
        assert created["status"] == "Aktiv"

        updated = client.put(f"/participants/{created['id']}", json={"age": 28}).json()
        assert updated["age"] == 28
        assert updated["name"] == "Anna"

        assert client.get(f"/participants/{created['id']}").json()["age"] == 28

        client.delete(f"/participants/{created['id']}")
        assert client.get(f"/participants/{created['id']}").status_code == 404

    def test_invalid_record_rejected(self, client):
        response = client.post("/participants", json={"name": "Anna", "gender": "X"})

        assert response.status_code == 422

    def test_matching_nights_ordered_by_date(self, client):
        client.post("/matching-nights", json={"name": "MN 2", "date": "2025-09-15"})
        client.post("/matching-nights", json={"name": "MN 1", "date": "2025-09-08"})

        names = [n["name"] for n in client.get("/matching-nights").json()]

        assert names == ["MN 1", "MN 2"]

    def test_delete_all(self, client):
        client.post("/penalties", json={"participantName": "Ben", "reason": "x", "amount": 5, "date": "2025-09-12"})
        client.post("/penalties", json={"participantName": "Ben", "reason": "y", "amount": 5, "date": "2025-09-13"})

        assert client.delete("/penalties").json() == {"count": 2}
        assert client.get("/penalties").json() == []

    def test_broadcast_note_upsert_by_date(self, client, db_session):
        client.post("/broadcast-notes", json={"date": "2025-01-01", "notes": "first"})
        client.post("/broadcast-notes", json={"date": "2025-01-01", "notes": "second"})

        rows = db_session.query(BroadcastNote).filter(BroadcastNote.date == "2025-01-01").all()
        assert len(rows) == 1
        assert rows[0].notes == "second"

        by_date = client.get("/broadcast-notes", params={"date": "2025-01-01"}).json()
        assert by_date["notes"] == "second"

    def test_probability_cache_lookup_by_hash(self, client):
        client.post("/probability-cache", json={"dataHash": "h1", "results": {"Anna+Ben": 0.25}})

        found = client.get("/probability-cache", params={"dataHash": "h1"}).json()
        missing = client.get("/probability-cache", params={"dataHash": "h2"}).json()

        assert found["results"] == {"Anna+Ben": 0.25}
        assert missing is None


class TestMetaRoutes:

    def test_unset_key_is_null(self, client):
        assert client.get("/meta/dbVersion").json() == {"value": None}

    def test_write_then_read(self, client):
        client.post("/meta", json={"key": "dbVersion", "value": "v1"})
        client.post("/meta", json={"key": "dbVersion", "value": "v2"})

        assert client.get("/meta/dbVersion").json() == {"value": "v2"}

    def test_fix_sequences(self, client):
        client.post("/participants", json={"name": "Anna", "gender": "F"})

        body = client.post("/meta/fix-sequences").json()

        assert body["success"] is True
        assert body["tables"]["participants"] is True
