"""Pydantic models for the account records and the comparison window.

These models define the schema of the records read back from the store, the
account catalog entries and the half-open reporting window used to select
one fiscal exercise.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UINT32_MAX = 0xFFFFFFFF

# code -> value for one company and one exercise
AccountValues = Dict[int, float]
# code -> mean value across the peer group
SectorAverage = Dict[int, float]
# canonical company names, in candidate order
PeerGroup = List[str]


class ExerciseOrder(str, Enum):
    """Position of an exercise among the ones published in a filing."""
    LAST = "ÚLTIMO"
    PENULTIMATE = "PENÚLTIMO"

    @property
    def pattern(self) -> str:
        """Anchored regex matching the tag even when `Ú` was mis-encoded."""
        return "^PEN.LTIMO$" if self is ExerciseOrder.PENULTIMATE else "^.LTIMO$"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AccountItem(BaseModel):
    """One reportable line item, e.g. `1.01 Ativo Circulante`.

    Attributes:
        code: Numeric account key, unique per company catalog.
        short_label: Hierarchical account code as published (`1.01`).
        description: Account description.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    code: int = Field(..., ge=0, le=UINT32_MAX)
    short_label: str
    description: str


class AccountRecord(BaseModel):
    """Schema for one stored account value."""
    model_config = ConfigDict(extra="ignore")
    code: int = Field(..., ge=0, le=UINT32_MAX)
    short_label: str = ""
    description: str = ""
    company_name: str
    period_tag: str
    reported_at: datetime
    value: float

    @field_validator("reported_at")
    @classmethod
    def _reported_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class TimeWindow(BaseModel):
    """Half-open interval `[start, end)` of absolute instants (UTC)."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    start: datetime
    end: datetime

    @model_validator(mode="before")
    @classmethod
    def _ordered(cls, data: Any) -> Any:
        if isinstance(data, dict):
            start, end = data.get("start"), data.get("end")
            if isinstance(start, datetime) and isinstance(end, datetime):
                start, end = _as_utc(start), _as_utc(end)
                if start > end:
                    start, end = end, start
                data = {**data, "start": start, "end": end}
        return data

    def contains(self, instant: datetime) -> bool:
        """Return True when `instant` falls inside the window."""
        return self.start <= _as_utc(instant) < self.end
