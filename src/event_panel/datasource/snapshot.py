"""Data source backed by a captured JSON snapshot of triggers and events."""

from __future__ import annotations

import copy
import json
import logging
import re
import time
from pathlib import Path
from typing import Any

from ..events.filters import build_regex, is_regex
from ..exceptions import DataSourceError
from .base import EventDataSource

_TEMPLATE_VAR_RE = re.compile(r"\$(?:\{(\w+)\}|(\w+))")


def _names(entries: Any) -> list[str]:
    """Normalize ``[{"name": ...}, ...]`` or ``[str, ...]`` into names."""
    if not isinstance(entries, list):
        return []
    names: list[str] = []
    for entry in entries:
        if isinstance(entry, dict) and isinstance(entry.get("name"), str):
            names.append(entry["name"])
        elif isinstance(entry, str):
            names.append(entry)
    return names


def _matches(filter_text: str, candidates: list[str]) -> bool:
    if not filter_text:
        return True
    if is_regex(filter_text):
        regex = build_regex(filter_text)
        return any(regex.search(name) for name in candidates)
    return filter_text in candidates


class SnapshotDataSource(EventDataSource):
    """Serve triggers and events from an in-memory snapshot document.

    Document shape::

        {
          "triggers": [{"triggerid": "1", "description": "...", "hosts": [...]}],
          "events": {"1": [{"eventid": "10", "clock": "1700000000", ...}]},
          "variables": {"host": "web-01"}
        }
    """

    def __init__(
        self,
        document: dict[str, Any],
        *,
        variables: dict[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        triggers = document.get("triggers", [])
        events = document.get("events", {})
        if not isinstance(triggers, list):
            raise DataSourceError("Snapshot 'triggers' must be a list.")
        if not isinstance(events, dict):
            raise DataSourceError("Snapshot 'events' must be an object keyed by triggerid.")
        self._triggers: list[dict[str, Any]] = triggers
        self._events: dict[str, list[dict[str, Any]]] = {
            str(triggerid): items for triggerid, items in events.items()
        }
        self.variables: dict[str, str] = {
            **document.get("variables", {}),
            **(variables or {}),
        }
        self.acknowledgments: list[dict[str, Any]] = []
        self.logger = logger or logging.getLogger("event_panel.datasource.snapshot")

    @classmethod
    def from_file(cls, path: Path, **kwargs: Any) -> SnapshotDataSource:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise DataSourceError(f"Failed reading snapshot {path}: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"Snapshot {path} is not valid JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise DataSourceError(f"Snapshot {path} must contain a JSON object.")
        return cls(document, **kwargs)

    def replace_template_vars(self, target: str) -> str:
        """Substitute ``$name`` / ``${name}``; unknown variables are left as written."""

        def _sub(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2)
            return self.variables.get(name, match.group(0))

        return _TEMPLATE_VAR_RE.sub(_sub, target)

    async def get_triggers(
        self,
        group_filter: str,
        host_filter: str,
        app_filter: str,
        status_filter: str,
    ) -> list[dict[str, Any]]:
        selected: list[dict[str, Any]] = []
        for trigger in self._triggers:
            if not _matches(group_filter, _names(trigger.get("groups"))):
                continue
            if not _matches(host_filter, _names(trigger.get("hosts"))):
                continue
            if not _matches(app_filter, _names(trigger.get("applications"))):
                continue
            if status_filter and "value" in trigger and str(trigger["value"]) != status_filter:
                continue
            selected.append(copy.deepcopy(trigger))
        self.logger.debug("Snapshot served %d of %d triggers.", len(selected), len(self._triggers))
        return selected

    async def get_events(
        self,
        triggerid: str,
        time_from: int,
        time_to: int,
        status_filter: str,
    ) -> list[dict[str, Any]]:
        selected: list[dict[str, Any]] = []
        for event in self._events.get(str(triggerid), []):
            try:
                clock = int(event.get("clock", 0))
            except (TypeError, ValueError) as exc:
                raise DataSourceError(
                    f"Snapshot event {event.get('eventid')} has invalid clock."
                ) from exc
            if not time_from <= clock <= time_to:
                continue
            if status_filter and "value" in event and str(event["value"]) != status_filter:
                continue
            selected.append(copy.deepcopy(event))
        return selected

    async def acknowledge_event(self, eventid: str, message: str) -> None:
        known = any(
            str(event.get("eventid")) == str(eventid)
            for events in self._events.values()
            for event in events
        )
        if not known:
            raise DataSourceError(f"Unknown event {eventid}; acknowledgment rejected.")
        self.acknowledgments.append(
            {"eventid": str(eventid), "message": message, "clock": int(time.time())}
        )
