"""
Snapshot Exporter
Client-side export: pulls all collections from the API and writes a snapshot file
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog

from app.client.api_client import ApiClient
from app.services.export_assembler import assemble_snapshot

logger = structlog.get_logger(__name__)

EXPORT_INDEX_FILE = "index.json"
EXPORT_INDEX_LIMIT = 5


@dataclass
class ExportResult:
    success: bool
    file_name: Optional[str] = None
    path: Optional[Path] = None
    error: Optional[str] = None


def export_file_name(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"ayto-complete-export-{day.isoformat()}.json"


def update_export_index(directory: Union[str, Path], file_name: str, limit: int = EXPORT_INDEX_LIMIT) -> List[str]:
    """
    Put ``file_name`` at the head of ``index.json`` and keep the newest ``limit`` entries.

    A missing or unreadable index starts a new list.
    """
    index_path = Path(directory) / EXPORT_INDEX_FILE
    files: List[str] = []

    if index_path.exists():
        try:
            data = json.loads(index_path.read_text(encoding="utf-8"))
            if isinstance(data, list):
                files = [name for name in data if isinstance(name, str)]
        except (OSError, ValueError) as e:
            logger.warning("export_index_unreadable", path=str(index_path), error=str(e))

    if file_name in files:
        files.remove(file_name)
    files.insert(0, file_name)
    files = files[:limit]

    index_path.write_text(json.dumps(files, indent=2), encoding="utf-8")
    return files


class SnapshotExporter:
    """
    Builds a snapshot from the collection endpoints.

    The five collections are requested concurrently; the probability cache is
    never exported.
    """

    def __init__(self, api: ApiClient, export_directory: Union[str, Path], version: str):
        self.api = api
        self.export_directory = Path(export_directory)
        self.version = version

    async def collect(self) -> Dict[str, Any]:
        participants, matching_nights, matchboxes, penalties, broadcast_notes = await asyncio.gather(
            self.api.get("/participants"),
            self.api.get("/matching-nights"),
            self.api.get("/matchboxes"),
            self.api.get("/penalties"),
            self.api.get("/broadcast-notes"),
        )
        return assemble_snapshot(
            participants=participants,
            matching_nights=matching_nights,
            matchboxes=matchboxes,
            penalties=penalties,
            broadcast_notes=broadcast_notes,
            version=self.version,
        )

    async def export(self) -> ExportResult:
        """Collect, write ``ayto-complete-export-<date>.json`` and update the index."""
        try:
            snapshot = await self.collect()

            self.export_directory.mkdir(parents=True, exist_ok=True)
            file_name = export_file_name()
            path = self.export_directory / file_name
            path.write_text(json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8")

            update_export_index(self.export_directory, file_name)
        except Exception as e:
            logger.error("export_failed", error=str(e))
            return ExportResult(success=False, error=str(e))

        logger.info(
            "export_written",
            path=str(path),
            participants=len(snapshot["participants"]),
            matchboxes=len(snapshot["matchboxes"]),
        )
        return ExportResult(success=True, file_name=file_name, path=path)
