"""
File Import
Posts a local snapshot file (full export or legacy participant array) to the import endpoint
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog

from app.client.api_client import ApiClient
from app.services.payload_normalizer import coerce_document

logger = structlog.get_logger(__name__)


async def import_json_file(
    api: ApiClient,
    path: Union[str, Path],
    clear_before_import: bool = False,
) -> Dict[str, Any]:
    """
    Import a snapshot file through the API.

    Args:
        api: client for the sync API
        path: JSON file, either a snapshot object or an array of participants
        clear_before_import: replace the backend data instead of appending

    Returns:
        the import response ({"success": true, "stats": {...}})

    Raises:
        ApiError: the backend rejected or rolled back the import; the message
            carries the backend's error details
        UnrecognizedPayloadError: the file is neither an object nor an array
    """
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    payload = dict(coerce_document(document))
    if clear_before_import:
        payload["clearBeforeImport"] = True

    logger.info("file_import_started", path=str(path), clear_before_import=clear_before_import)
    result = await api.post("/import", payload)

    stats = result.get("stats", {}) if isinstance(result, dict) else {}
    logger.info("file_import_completed", path=str(path), **stats)
    return result
