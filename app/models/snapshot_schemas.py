"""
Pydantic schemas for snapshot documents, import payloads and the update manifest
"""

from datetime import date as date_type, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _date_part(value: Any) -> Any:
    """Cut ISO date-time strings ("2025-09-08T00:00:00.000Z") down to the date."""
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class SnapshotRecord(BaseModel):
    """
    Base for all entity records.

    Wire format is camelCase, attributes are snake_case. Keys not declared on
    the concrete schema are dropped during validation.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[int] = None


class ParticipantRecord(SnapshotRecord):
    name: str
    gender: Literal["F", "M"]
    status: Literal["Aktiv", "Inaktiv", "Perfekt Match"] = "Aktiv"
    active: bool = True
    known_from: Optional[str] = None
    age: Optional[int] = None
    photo_url: Optional[str] = None
    source: Optional[str] = None
    bio: Optional[str] = None
    social_media_account: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MatchingNightRecord(SnapshotRecord):
    name: str
    date: date_type
    pairs: List[Any] = Field(default_factory=list)
    total_lights: Optional[int] = None
    ausstrahlungsdatum: Optional[str] = None
    ausstrahlungszeit: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def strip_time(cls, value):
        return _date_part(value)


class MatchboxRecord(SnapshotRecord):
    woman: str
    man: str
    match_type: Optional[str] = None
    price: Optional[float] = None
    buyer: Optional[str] = None
    sold_date: Optional[datetime] = None
    ausstrahlungsdatum: Optional[str] = None
    ausstrahlungszeit: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PenaltyRecord(SnapshotRecord):
    participant_name: str
    reason: str
    amount: float = Field(..., gt=0)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def strip_time(cls, value):
        return _date_part(value)


class BroadcastNoteRecord(SnapshotRecord):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def strip_time(cls, value):
        return _date_part(value)


class ProbabilityCacheRecord(SnapshotRecord):
    data_hash: str
    results: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImportStats(BaseModel):
    """Rows written per category by one import"""
    participants: int = 0
    matchingNights: int = 0
    matchboxes: int = 0
    penalties: int = 0
    broadcastNotes: int = 0
    probabilityCache: int = 0


class ImportResponse(BaseModel):
    success: bool
    stats: ImportStats


class MetaWrite(BaseModel):
    """Request body for POST /meta"""
    key: str
    value: str


class DatabaseManifest(BaseModel):
    """
    Remote descriptor of the currently published snapshot.

    ``version``, ``dataHash`` and ``released`` are required; a manifest
    missing any of them is rejected.
    """
    version: str = Field(..., min_length=1)
    dataHash: str = Field(..., min_length=1)
    released: str = Field(..., min_length=1)
    description: Optional[str] = None
