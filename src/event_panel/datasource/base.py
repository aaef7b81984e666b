"""Backend-agnostic data source interface consumed by the event pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class EventDataSource(ABC):
    """Base contract for monitoring backends that serve triggers and events.

    Implementations return backend payloads (dicts or already-validated
    models) and raise ``DataSourceError`` on failure.
    """

    @abstractmethod
    async def get_triggers(
        self,
        group_filter: str,
        host_filter: str,
        app_filter: str,
        status_filter: str,
    ) -> list[Any]:
        """Fetch triggers matching the group/host/application filters."""

    @abstractmethod
    async def get_events(
        self,
        triggerid: str,
        time_from: int,
        time_to: int,
        status_filter: str,
    ) -> list[Any]:
        """Fetch one trigger's events within ``[time_from, time_to]``."""

    @abstractmethod
    async def acknowledge_event(self, eventid: str, message: str) -> None:
        """Record an acknowledgment against an event."""

    @abstractmethod
    def replace_template_vars(self, target: str) -> str:
        """Substitute dashboard template variables in a filter string."""
