"""
Tests for the client-side snapshot exporter and file import
"""

import json
from datetime import date
from unittest.mock import AsyncMock, Mock

import pytest

from app.client.exporter import SnapshotExporter, export_file_name, update_export_index
from app.client.file_import import import_json_file


class TestExportIndex:

    def test_keeps_newest_five(self, tmp_path):
        for day in range(1, 8):
            update_export_index(tmp_path, f"ayto-complete-export-2025-09-0{day}.json")

        files = json.loads((tmp_path / "index.json").read_text())

        assert len(files) == 5
        assert files[0] == "ayto-complete-export-2025-09-07.json"
        assert files[-1] == "ayto-complete-export-2025-09-03.json"

    def test_repeated_name_moves_to_front(self, tmp_path):
        update_export_index(tmp_path, "a.json")
        update_export_index(tmp_path, "b.json")

        assert update_export_index(tmp_path, "a.json") == ["a.json", "b.json"]

    def test_corrupt_index_starts_over(self, tmp_path):
        (tmp_path / "index.json").write_text("{not json")

        assert update_export_index(tmp_path, "a.json") == ["a.json"]

    def test_file_name(self):
        assert export_file_name(date(2025, 9, 8)) == "ayto-complete-export-2025-09-08.json"


class TestSnapshotExporter:

    @pytest.mark.asyncio
    async def test_writes_snapshot_and_index(self, tmp_path):
        responses = {
            "/participants": [{"id": 1, "name": "Anna", "gender": "F"}],
            "/matching-nights": [],
            "/matchboxes": [{"id": 1, "woman": "Anna", "man": "Ben", "secret": "x"}],
            "/penalties": [],
            "/broadcast-notes": [],
        }
        api = Mock()
        api.get = AsyncMock(side_effect=lambda endpoint: responses[endpoint])

        result = await SnapshotExporter(api, tmp_path / "exports", version="0.0.1").export()

        assert result.success is True
        written = json.loads(result.path.read_text())
        assert written["version"] == "0.0.1"
        assert "secret" not in written["matchboxes"][0]
        assert "probabilityCache" not in written
        index = json.loads((tmp_path / "exports" / "index.json").read_text())
        assert index == [result.file_name]

    @pytest.mark.asyncio
    async def test_failure_reported(self, tmp_path):
        api = Mock()
        api.get = AsyncMock(side_effect=RuntimeError("backend down"))

        result = await SnapshotExporter(api, tmp_path, version="0.0.1").export()

        assert result.success is False
        assert "backend down" in result.error


class TestImportJsonFile:

    @pytest.mark.asyncio
    async def test_legacy_array_file(self, tmp_path):
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps([{"name": "Anna", "gender": "F"}]))
        api = Mock()
        api.post = AsyncMock(return_value={"success": True, "stats": {"participants": 1}})

        result = await import_json_file(api, path, clear_before_import=True)

        assert result["success"] is True
        api.post.assert_awaited_once_with(
            "/import",
            {"participants": [{"name": "Anna", "gender": "F"}], "clearBeforeImport": True},
        )
