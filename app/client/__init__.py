"""
Sync client
Async client side of the update workflow: API access, update checks, export and file import
"""

from app.client.api_client import ApiClient, ApiError
from app.client.update_service import (
    DatabaseUpdateService,
    ManifestError,
    SnapshotUnavailableError,
    UpdateCheck,
    UpdatePhase,
    UpdateResult,
    is_update_available,
)
from app.client.orchestrator import UpdateOrchestrator, build_orchestrator
from app.client.exporter import ExportResult, SnapshotExporter, update_export_index
from app.client.file_import import import_json_file

__all__ = [
    "ApiClient",
    "ApiError",
    "DatabaseUpdateService",
    "ManifestError",
    "SnapshotUnavailableError",
    "UpdateCheck",
    "UpdatePhase",
    "UpdateResult",
    "is_update_available",
    "UpdateOrchestrator",
    "build_orchestrator",
    "ExportResult",
    "SnapshotExporter",
    "update_export_index",
    "import_json_file",
]
