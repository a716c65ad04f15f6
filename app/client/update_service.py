"""
Database Update Service
Manifest-driven check and replace of the backend data with the published snapshot
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import structlog
from pydantic import ValidationError

from app.client.api_client import ApiClient
from app.models.snapshot_schemas import DatabaseManifest
from app.services.meta_store import DATA_HASH_KEY, DB_VERSION_KEY, LAST_UPDATE_KEY

logger = structlog.get_logger(__name__)

UNKNOWN = "unknown"
BASELINE_VERSION = "v0.0.0"  # compared against the manifest when no version was ever stored


class UpdatePhase(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"
    UPDATING = "updating"


class ManifestError(Exception):
    """Raised when the manifest cannot be fetched or lacks version/dataHash/released."""


class SnapshotUnavailableError(Exception):
    """Raised when no snapshot source produced a usable document."""


@dataclass
class UpdateCheck:
    """Outcome of comparing the remote manifest with the local watermarks"""
    is_update_available: bool
    current_version: str
    latest_version: str
    current_data_hash: str
    latest_data_hash: str
    released_date: str
    is_updating: bool = False
    update_error: Optional[str] = None


@dataclass
class UpdateResult:
    success: bool
    new_version: str
    new_data_hash: str
    released_date: str
    error: Optional[str] = None


def is_update_available(local_version: str, local_hash: str, manifest: DatabaseManifest) -> bool:
    """
    Either signal alone is enough: a content change without a version bump,
    or a version bump without a content change, both trigger an update.
    """
    return manifest.version != local_version or manifest.dataHash != local_hash


def _is_snapshot(document: Any) -> bool:
    return isinstance(document, dict) and isinstance(document.get("participants"), list)


async def _gather_or_cancel(*coros) -> List[Any]:
    """
    Run ``coros`` concurrently. If one fails, cancel the others and wait for
    them to finish before re-raising, so no request outlives the call.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class DatabaseUpdateService:
    """
    Client side of the update workflow.

    Reads the manifest and the backend's watermarks, and replaces the backend
    data with the published snapshot when they differ. Import failures leave
    the watermarks untouched, so a failed update is retried on the next check.
    """

    def __init__(self, api: ApiClient, manifest_url: str, snapshot_sources: Sequence[str]):
        """
        Args:
            api: client for the sync API (also used for manifest/snapshot URLs)
            manifest_url: absolute URL of manifest.json
            snapshot_sources: candidate snapshot URLs, tried in order
        """
        self.api = api
        self.manifest_url = manifest_url
        self.snapshot_sources: List[str] = list(snapshot_sources)
        self.phase = UpdatePhase.IDLE
        self.last_error: Optional[str] = None
        self.logger = logger.bind(service="database_update")

    async def fetch_manifest(self) -> DatabaseManifest:
        """
        Raises:
            ManifestError: fetch failed or a required field is missing
        """
        try:
            document = await self.api.fetch_json(self.manifest_url)
        except Exception as e:
            self.logger.error("manifest_fetch_failed", url=self.manifest_url, error=str(e))
            raise ManifestError(f"Manifest could not be loaded: {e}") from e

        if not isinstance(document, dict):
            raise ManifestError("Manifest could not be loaded: invalid manifest format")
        try:
            return DatabaseManifest.model_validate(document)
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            self.logger.error("manifest_invalid", url=self.manifest_url, fields=missing)
            raise ManifestError(
                f"Manifest could not be loaded: invalid manifest format ({', '.join(missing)})"
            ) from e

    async def get_meta_value(self, key: str) -> str:
        """Stored watermark, or "unknown" if unset or unreadable. Never raises."""
        try:
            result = await self.api.get(f"/meta/{key}")
        except Exception as e:
            self.logger.warning("meta_read_failed", key=key, error=str(e))
            return UNKNOWN
        value = result.get("value") if isinstance(result, dict) else None
        return value or UNKNOWN

    async def check_for_update(self) -> UpdateCheck:
        """
        Compare the manifest with the backend watermarks.

        The manifest and both watermarks are fetched concurrently. A manifest
        failure is reported in ``update_error`` with no update available.
        """
        self.phase = UpdatePhase.CHECKING
        try:
            manifest, current_version_raw, current_data_hash = await _gather_or_cancel(
                self.fetch_manifest(),
                self.get_meta_value(DB_VERSION_KEY),
                self.get_meta_value(DATA_HASH_KEY),
            )
        except ManifestError as e:
            self.phase = UpdatePhase.IDLE
            self.last_error = str(e)
            return UpdateCheck(
                is_update_available=False,
                current_version=UNKNOWN,
                latest_version=UNKNOWN,
                current_data_hash=UNKNOWN,
                latest_data_hash=UNKNOWN,
                released_date="",
                update_error=str(e),
            )

        current_version = current_version_raw if current_version_raw != UNKNOWN else BASELINE_VERSION
        available = is_update_available(current_version, current_data_hash, manifest)

        self.phase = UpdatePhase.UPDATE_AVAILABLE if available else UpdatePhase.UP_TO_DATE
        self.last_error = None
        self.logger.info(
            "update_check_completed",
            update_available=available,
            current_version=current_version,
            latest_version=manifest.version,
            current_data_hash=current_data_hash,
            latest_data_hash=manifest.dataHash,
        )

        return UpdateCheck(
            is_update_available=available,
            current_version=current_version,
            latest_version=manifest.version,
            current_data_hash=current_data_hash,
            latest_data_hash=manifest.dataHash,
            released_date=manifest.released,
        )

    async def fetch_snapshot(self) -> Dict[str, Any]:
        """
        First candidate source that answers 2xx with an object holding a
        ``participants`` array.

        Raises:
            SnapshotUnavailableError: every source failed or had the wrong shape
        """
        last_error: Optional[Exception] = None

        for source in self.snapshot_sources:
            try:
                document = await self.api.fetch_json(source)
            except Exception as e:
                last_error = e
                self.logger.warning("snapshot_source_failed", source=source, error=str(e))
                continue

            if _is_snapshot(document):
                self.logger.info("snapshot_loaded", source=source, participants=len(document["participants"]))
                return document

            self.logger.warning("snapshot_source_rejected", source=source, reason="no_participants_array")

        reason = str(last_error) if last_error else "no valid data source found"
        raise SnapshotUnavailableError(f"Data could not be loaded: {reason}")

    async def perform_update(self) -> UpdateResult:
        """
        Replace the backend data with the published snapshot.

        Steps: manifest + snapshot (concurrently) -> POST /import with
        clearBeforeImport -> the three watermarks (concurrently). Watermarks
        are only written after the import succeeded.
        """
        self.phase = UpdatePhase.UPDATING
        self.logger.info("update_started")

        try:
            manifest, snapshot = await _gather_or_cancel(
                self.fetch_manifest(),
                self.fetch_snapshot(),
            )
            self.logger.info("update_data_loaded", version=manifest.version, data_hash=manifest.dataHash)

            result = await self.api.post("/import", {**snapshot, "clearBeforeImport": True})
            self.logger.info("update_imported", stats=result.get("stats") if isinstance(result, dict) else None)

            await asyncio.gather(
                self.api.post("/meta", {"key": DB_VERSION_KEY, "value": manifest.version}),
                self.api.post("/meta", {"key": DATA_HASH_KEY, "value": manifest.dataHash}),
                self.api.post("/meta", {"key": LAST_UPDATE_KEY, "value": manifest.released}),
            )
        except Exception as e:
            self.phase = UpdatePhase.IDLE
            self.last_error = str(e)
            self.logger.error("update_failed", error=str(e))
            return UpdateResult(
                success=False,
                new_version=UNKNOWN,
                new_data_hash=UNKNOWN,
                released_date="",
                error=str(e),
            )

        self.phase = UpdatePhase.IDLE
        self.last_error = None
        self.logger.info("update_completed", version=manifest.version, data_hash=manifest.dataHash)

        return UpdateResult(
            success=True,
            new_version=manifest.version,
            new_data_hash=manifest.dataHash,
            released_date=manifest.released,
        )
