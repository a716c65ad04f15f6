"""
Payload Normalizer
Brings legacy and hand-edited import documents into the current snapshot shape
"""

from typing import Any, Dict, List, Optional, Union

import structlog

logger = structlog.get_logger(__name__)

ENTITY_KEYS = (
    "participants",
    "matchingNights",
    "matchboxes",
    "penalties",
    "broadcastNotes",
    "probabilityCache",
)

GENDER_ALIASES = {
    "f": "F",
    "w": "F",
    "weiblich": "F",
    "female": "F",
    "m": "M",
    "männlich": "M",
    "maennlich": "M",
    "male": "M",
}

STATUS_ALIASES = {
    "aktiv": "Aktiv",
    "active": "Aktiv",
    "inaktiv": "Inaktiv",
    "inactive": "Inaktiv",
    "perfekt match": "Perfekt Match",
    "perfect match": "Perfekt Match",
}


class UnrecognizedPayloadError(ValueError):
    """Raised when a document is neither a snapshot object nor a participant list."""


def normalize_gender(value: Any) -> Any:
    if isinstance(value, str):
        return GENDER_ALIASES.get(value.strip().lower(), value)
    return value


def normalize_status(value: Any) -> Any:
    if value is None or value == "":
        return "Aktiv"
    if isinstance(value, str):
        return STATUS_ALIASES.get(value.strip().lower(), value)
    return value


def _normalize_participant(raw: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(raw)
    if "gender" in item:
        item["gender"] = normalize_gender(item["gender"])
    item["status"] = normalize_status(item.get("status"))
    return item


def _normalize_matching_night(raw: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(raw)
    if not item.get("date") and item.get("ausstrahlungsdatum"):
        item["date"] = item["ausstrahlungsdatum"]
    return item


def _normalize_matchbox(raw: Dict[str, Any]) -> Dict[str, Any]:
    item = dict(raw)
    # Legacy exports used womanId/manId for the participant names
    woman_id = item.pop("womanId", None)
    man_id = item.pop("manId", None)
    if not item.get("woman") and woman_id is not None:
        item["woman"] = woman_id
    if not item.get("man") and man_id is not None:
        item["man"] = man_id
    return item


_NORMALIZERS = {
    "participants": _normalize_participant,
    "matchingNights": _normalize_matching_night,
    "matchboxes": _normalize_matchbox,
}


def coerce_document(document: Union[Dict[str, Any], List[Any], None]) -> Dict[str, Any]:
    """
    Accept the two document shapes the tool has ever produced.

    - an object with a ``participants`` array (full export)
    - a bare array (legacy participant list)

    Any other object is passed through as-is so a payload with only e.g.
    ``penalties`` can still be imported.

    Raises:
        UnrecognizedPayloadError: document is neither an object nor an array
    """
    if isinstance(document, list):
        logger.info("legacy_participant_list_detected", count=len(document))
        return {"participants": document}
    if isinstance(document, dict):
        return document
    raise UnrecognizedPayloadError(
        "Unrecognized import document: expected an array of participants or an "
        "object with participants, matchboxes, matchingNights, ..."
    )


def normalize_payload(document: Union[Dict[str, Any], List[Any], None]) -> Dict[str, Any]:
    """
    Normalize an import document.

    Returns a new dict; entity arrays that are absent or not lists are left
    out, every other top-level key (clearBeforeImport, exportedAt, version)
    is copied unchanged.
    """
    payload = coerce_document(document)
    normalized: Dict[str, Any] = {
        key: value for key, value in payload.items() if key not in ENTITY_KEYS
    }

    for key in ENTITY_KEYS:
        rows = payload.get(key)
        if rows is None:
            continue
        if not isinstance(rows, list):
            logger.warning("import_section_ignored", section=key, reason="not_a_list")
            continue
        normalizer = _NORMALIZERS.get(key)
        normalized[key] = [
            normalizer(row) if normalizer and isinstance(row, dict) else row
            for row in rows
        ]

    return normalized


def wants_clear(payload: Dict[str, Any]) -> bool:
    """A missing or non-boolean clearBeforeImport never purges."""
    flag: Optional[Any] = payload.get("clearBeforeImport")
    return flag is True
