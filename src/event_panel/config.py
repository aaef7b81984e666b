"""Typed settings loader for the event panel."""

from __future__ import annotations

from datetime import UTC, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .events.filters import build_regex, is_regex
from .events.models import SeverityLevel, SortKey
from .exceptions import ConfigError

EVENT_STATUS_MAP: dict[str, str] = {
    "0": "OK",
    "1": "Problem",
}

EVENT_SEVERITY_MAP: dict[str, str] = {
    "0": "NA",
    "1": "Cleared",
    "2": "Indeterminate",
    "3": "Critical",
    "4": "Major",
    "5": "Minor",
    "6": "Warning",
}

DEFAULT_TIME_FORMAT = "%d %b %Y %H:%M:%S"
LOCAL_TIMEZONE = "local"


def default_severity_palette() -> list[SeverityLevel]:
    """Return a fresh copy of the default palette so callers never share it."""
    return [
        SeverityLevel(priority=1, severity="Cleared", color="#82B5D8"),
        SeverityLevel(priority=2, severity="Indeterminate", color="#B7DBAB"),
        SeverityLevel(priority=3, severity="Critical", color="#890F02"),
        SeverityLevel(priority=4, severity="Major", color="#BF1B00"),
        SeverityLevel(priority=5, severity="Minor", color="#C15C17"),
        SeverityLevel(priority=6, severity="Warning", color="#E5AC0E"),
    ]


def resolve_timezone(name: str) -> tzinfo | None:
    """Map ``UTC``, ``local`` or an IANA zone name to a tzinfo; ``local`` gives None."""
    name = name.strip()
    if name.upper() == "UTC":
        return UTC
    if name.lower() == LOCAL_TIMEZONE:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"Unknown timezone {name!r}.") from exc


class PanelSettings(BaseSettings):
    """Panel options loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    group_filter: str = Field(default="", alias="EVENT_PANEL_GROUP_FILTER")
    host_filter: str = Field(default="", alias="EVENT_PANEL_HOST_FILTER")
    application_filter: str = Field(default="", alias="EVENT_PANEL_APPLICATION_FILTER")
    trigger_filter: str = Field(default="", alias="EVENT_PANEL_TRIGGER_FILTER")

    before_days: int = Field(default=2, alias="EVENT_PANEL_BEFORE_DAYS")
    limit: int = Field(default=50, alias="EVENT_PANEL_LIMIT")
    show_events: str = Field(default="1", alias="EVENT_PANEL_SHOW_EVENTS")
    sort_events_by: SortKey = Field(default="age-asc", alias="EVENT_PANEL_SORT_EVENTS_BY")
    show_unresolved_only: bool = Field(default=False, alias="EVENT_PANEL_SHOW_UNRESOLVED_ONLY")

    mark_ack_events: bool = Field(default=False, alias="EVENT_PANEL_MARK_ACK_EVENTS")
    custom_last_change_format: bool = Field(
        default=False,
        alias="EVENT_PANEL_CUSTOM_LAST_CHANGE_FORMAT",
    )
    last_change_format: str = Field(
        default=DEFAULT_TIME_FORMAT,
        alias="EVENT_PANEL_LAST_CHANGE_FORMAT",
    )
    display_timezone: str = Field(default="UTC", alias="EVENT_PANEL_DISPLAY_TIMEZONE")

    event_severity: list[SeverityLevel] = Field(
        default_factory=default_severity_palette,
        alias="EVENT_PANEL_EVENT_SEVERITY",
    )
    ok_event_color: str = Field(
        default="rgba(0, 245, 153, 0.45)",
        alias="EVENT_PANEL_OK_EVENT_COLOR",
    )
    ack_event_color: str = Field(default="rgba(0, 0, 0, 0)", alias="EVENT_PANEL_ACK_EVENT_COLOR")

    expected_tag_count: int = Field(default=8, alias="EVENT_PANEL_EXPECTED_TAG_COUNT")
    clearance_status: str = Field(
        default="Status Cleared Alarm Events",
        alias="EVENT_PANEL_CLEARANCE_STATUS",
    )
    ack_source: str = Field(default="Grafana", alias="EVENT_PANEL_ACK_SOURCE")

    @field_validator(
        "group_filter",
        "host_filter",
        "application_filter",
        "trigger_filter",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        """Treat missing filter values as match-everything empty strings."""
        if value is None:
            return ""
        return value

    @field_validator("display_timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value

    @model_validator(mode="after")
    def validate_options(self) -> PanelSettings:
        """Validate numeric bounds and palette ordering."""
        if self.before_days <= 0:
            raise ValueError("EVENT_PANEL_BEFORE_DAYS must be > 0.")
        if self.limit < 0:
            raise ValueError("EVENT_PANEL_LIMIT must be >= 0.")
        if self.expected_tag_count <= 0:
            raise ValueError("EVENT_PANEL_EXPECTED_TAG_COUNT must be > 0.")
        if not self.event_severity:
            raise ValueError("EVENT_PANEL_EVENT_SEVERITY must define at least one level.")
        priorities = [level.priority for level in self.event_severity]
        if any(b <= a for a, b in zip(priorities, priorities[1:])):
            raise ValueError("EVENT_PANEL_EVENT_SEVERITY priorities must be strictly ascending.")
        if not self.last_change_format.strip():
            raise ValueError("EVENT_PANEL_LAST_CHANGE_FORMAT must not be empty.")
        for name in ("group_filter", "host_filter", "application_filter", "trigger_filter"):
            value = getattr(self, name)
            if is_regex(value):
                try:
                    build_regex(value)
                except ConfigError as exc:
                    raise ValueError(f"EVENT_PANEL_{name.upper()}: {exc}") from exc
        return self

    @property
    def time_format(self) -> str:
        """Acknowledgment timestamp pattern in effect."""
        if self.custom_last_change_format:
            return self.last_change_format
        return DEFAULT_TIME_FORMAT

    @property
    def display_tzinfo(self) -> tzinfo | None:
        """Zone for acknowledgment times; None means the host's local zone."""
        return resolve_timezone(self.display_timezone)

    def safe_summary(self) -> dict[str, Any]:
        """Return a flat option summary suitable for logging."""
        return {
            "group_filter": self.group_filter,
            "host_filter": self.host_filter,
            "application_filter": self.application_filter,
            "trigger_filter": self.trigger_filter,
            "before_days": self.before_days,
            "limit": self.limit,
            "show_events": self.show_events,
            "sort_events_by": self.sort_events_by,
            "show_unresolved_only": self.show_unresolved_only,
            "mark_ack_events": self.mark_ack_events,
            "time_format": self.time_format,
            "display_timezone": self.display_timezone,
            "severity_levels": len(self.event_severity),
            "expected_tag_count": self.expected_tag_count,
        }


def load_settings(**overrides: Any) -> PanelSettings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return PanelSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
