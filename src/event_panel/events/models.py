"""Typed models for raw backend events and their display-ready enrichment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SortKey = Literal["priority", "age-dsc", "age-asc"]


def parse_severity(value: str | None) -> int | None:
    """Parse a severity tag value; integral floats such as ``"3.0"`` count as 3."""
    if value is None:
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if not number.is_integer():
        return None
    return int(number)


class EventTag(BaseModel):
    """One key/value annotation attached to an event."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    tag: str
    value: str = ""


class Acknowledgment(BaseModel):
    """Acknowledgment record as returned by the monitoring backend."""

    model_config = ConfigDict(extra="allow")

    clock: int
    alias: str = ""
    name: str = ""
    surname: str = ""
    message: str | None = None


class FormattedAcknowledgment(BaseModel):
    """Acknowledgment with display-ready time and user strings.

    Backend keys beyond the typed fields (acknowledgeid, userid, ...) are kept.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    clock: int
    alias: str
    name: str
    surname: str
    message: str | None = None
    time: str
    user: str


class LastEventRef(BaseModel):
    """Reference from a trigger to its most recent event."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    eventid: str


class RawTrigger(BaseModel):
    """Monitored condition definition as returned by the backend."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    triggerid: str
    description: str = ""
    last_event: LastEventRef | None = Field(default=None, alias="lastEvent")
    color: str | None = None
    value: str | None = None


class RawEvent(BaseModel):
    """Event occurrence with loosely structured tags."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    eventid: str
    clock: int
    r_eventid: str = "0"
    value: str | None = None
    tags: list[EventTag] = Field(default_factory=list)
    acknowledges: list[Acknowledgment] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def keep_raw_payload(cls, data: Any) -> Any:
        """Retain the untouched backend payload alongside the parsed fields."""
        if isinstance(data, dict) and "raw" not in data:
            return {**data, "raw": dict(data)}
        return data


class SeverityLevel(BaseModel):
    """One palette entry; events index this table 1-based by severity."""

    priority: int
    severity: str
    color: str
    show: bool = True


class EnrichedEvent(BaseModel):
    """Display-ready event record produced once per refresh."""

    model_config = ConfigDict(frozen=True)

    eventid: str
    triggerid: str
    clock: int
    r_eventid: str
    value: str | None = None
    time: datetime
    tags: list[EventTag] = Field(default_factory=list)
    tag_values: list[str] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)

    host: str | None = None
    severity: str | None = None
    status: str | None = None
    problem: str | None = None
    module: str | None = None
    error_code: str | None = None
    resource_id: str | None = None

    resolved_status: str | None = None
    color: str
    elapsed_seconds: float
    age: str
    acknowledges: list[FormattedAcknowledgment] = Field(default_factory=list)

    @property
    def priority(self) -> int:
        """Numeric severity used for priority sorting; 0 when untagged."""
        return parse_severity(self.severity) or 0

    @property
    def acknowledged(self) -> bool:
        return bool(self.acknowledges)


class Classification(BaseModel):
    """Resolution state of one event mapped to presentation attributes."""

    state: Literal["cleared", "recovered", "problem"]
    resolved_status: str | None = None
    color: str
    problem: str | None = None


@dataclass(frozen=True, slots=True)
class Keep:
    """Enrichment result that survives into the output list."""

    event: EnrichedEvent
    trigger_color: str | None = None


@dataclass(frozen=True, slots=True)
class Drop:
    """Enrichment result that is suppressed before filtering."""

    reason: str


EnrichmentResult = Keep | Drop


@dataclass(slots=True)
class EventCollection:
    """Ordered, bounded events plus trigger colors marked during enrichment."""

    events: list[EnrichedEvent] = field(default_factory=list)
    trigger_colors: dict[str, str] = field(default_factory=dict)
    fetched_count: int = 0
    dropped_count: int = 0
