"""Tests for panel refresh ordering, error retention and acknowledgments."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from event_panel.config import PanelSettings
from event_panel.datasource.base import EventDataSource
from event_panel.events.commands import acknowledge, compose_ack_message
from event_panel.events.models import RawTrigger
from event_panel.exceptions import DataSourceError
from event_panel.panel import EventPanel

NOW = 1_700_100_000


def _event(eventid: str, acknowledged: bool = False) -> dict[str, Any]:
    tags = [{"tag": "Host", "value": "h1"}, {"tag": "Severity", "value": "4"}]
    tags += [{"tag": f"Extra{i}", "value": "x"} for i in range(6)]
    acks = [{"clock": NOW - 5, "alias": "ops", "name": "On", "surname": "Call"}]
    return {
        "eventid": eventid,
        "clock": NOW - 120,
        "r_eventid": "0",
        "tags": tags,
        "acknowledges": acks if acknowledged else [],
    }


class ScriptedDataSource(EventDataSource):
    """Each get_triggers call consumes one script step: a gate, an error, or None."""

    def __init__(
        self,
        script: list[asyncio.Event | Exception | None],
        events: dict[str, list[dict[str, Any]]],
    ) -> None:
        self.script = script
        self.events = events
        self.calls = 0
        self.acks: list[tuple[str, str]] = []
        self.ack_error: Exception | None = None

    def replace_template_vars(self, target: str) -> str:
        return target

    async def get_triggers(
        self, group_filter: str, host_filter: str, app_filter: str, status_filter: str
    ) -> list[dict[str, Any]]:
        call = self.calls
        self.calls += 1
        step = self.script[call] if call < len(self.script) else None
        if isinstance(step, asyncio.Event):
            await step.wait()
        elif isinstance(step, Exception):
            raise step
        return [{"triggerid": f"v{call}", "description": "Trigger"}]

    async def get_events(
        self, triggerid: str, time_from: int, time_to: int, status_filter: str
    ) -> list[dict[str, Any]]:
        return self.events.get(triggerid, [])

    async def acknowledge_event(self, eventid: str, message: str) -> None:
        if self.ack_error is not None:
            raise self.ack_error
        self.acks.append((eventid, message))


def _panel(datasource: EventDataSource, **overrides: Any) -> EventPanel:
    return EventPanel(
        PanelSettings(**overrides),
        datasource,
        logger=logging.getLogger("test_event_panel"),
    )


def test_refresh_populates_event_list() -> None:
    datasource = ScriptedDataSource([None], {"v0": [_event("a")]})
    panel = _panel(datasource)
    assert asyncio.run(panel.refresh(now=NOW)) is True
    assert [event.eventid for event in panel.event_list] == ["a"]
    assert panel.loading is False
    assert panel.error is None
    assert panel.last_refresh_at is not None


def test_stale_refresh_never_overwrites_newer_result() -> None:
    async def scenario() -> tuple[bool, bool, EventPanel]:
        gate = asyncio.Event()
        datasource = ScriptedDataSource(
            [gate, None],
            {"v0": [_event("old")], "v1": [_event("new")]},
        )
        panel = _panel(datasource)
        slow = asyncio.create_task(panel.refresh(now=NOW))
        await asyncio.sleep(0)
        fast_applied = await panel.refresh(now=NOW)
        gate.set()
        slow_applied = await slow
        return fast_applied, slow_applied, panel

    fast_applied, slow_applied, panel = asyncio.run(scenario())
    assert fast_applied is True
    assert slow_applied is False
    assert [event.eventid for event in panel.event_list] == ["new"]
    assert panel.generation == 2


def test_failed_refresh_keeps_prior_events_and_records_error() -> None:
    datasource = ScriptedDataSource(
        [None, DataSourceError("backend down")],
        {"v0": [_event("a")]},
    )
    panel = _panel(datasource)
    asyncio.run(panel.refresh(now=NOW))
    with pytest.raises(DataSourceError):
        asyncio.run(panel.refresh(now=NOW))
    assert [event.eventid for event in panel.event_list] == ["a"]
    assert panel.error == "backend down"
    assert panel.loading is False


def test_trigger_color_reflects_acknowledgment_marking() -> None:
    datasource = ScriptedDataSource([None], {"v0": [_event("a", acknowledged=True)]})
    panel = _panel(datasource, mark_ack_events=True, ack_event_color="#ABCDEF")
    asyncio.run(panel.refresh(now=NOW))
    marked = RawTrigger(triggerid="v0", color="#FF0000")
    untouched = RawTrigger(triggerid="v9", color="#FF0000")
    assert panel.trigger_color(marked) == "#ABCDEF"
    assert panel.trigger_color(untouched) == "#FF0000"
    assert marked.color == "#FF0000"


def test_acknowledge_trigger_sends_composed_message_then_refreshes() -> None:
    datasource = ScriptedDataSource([None], {"v0": [_event("a")]})
    panel = _panel(datasource)
    trigger = {"triggerid": "13", "lastEvent": {"eventid": "55"}}
    asyncio.run(panel.acknowledge_trigger(trigger, "on it", "alice"))
    assert datasource.acks == [("55", "alice (Grafana): on it")]
    assert panel.generation == 1
    assert [event.eventid for event in panel.event_list] == ["a"]


def test_acknowledge_failure_propagates_without_refresh() -> None:
    datasource = ScriptedDataSource([None], {})
    datasource.ack_error = DataSourceError("ack rejected")
    panel = _panel(datasource)
    trigger = RawTrigger.model_validate({"triggerid": "13", "lastEvent": {"eventid": "55"}})
    with pytest.raises(DataSourceError, match="ack rejected"):
        asyncio.run(panel.acknowledge_trigger(trigger, "on it", "alice"))
    assert panel.generation == 0
    assert datasource.calls == 0


def test_acknowledge_trigger_without_last_event_is_rejected() -> None:
    panel = _panel(ScriptedDataSource([], {}))
    with pytest.raises(ValueError):
        asyncio.run(panel.acknowledge_trigger({"triggerid": "13"}, "on it", "alice"))


def test_acknowledge_command_invokes_success_callback() -> None:
    datasource = ScriptedDataSource([], {})
    refreshed: list[bool] = []

    async def on_success() -> None:
        refreshed.append(True)

    asyncio.run(acknowledge("77", "restarting", "bob", datasource, on_success=on_success))
    assert datasource.acks == [("77", "bob (Grafana): restarting")]
    assert refreshed == [True]


def test_compose_ack_message_uses_source_label() -> None:
    assert compose_ack_message("carol", "done", "Ops") == "carol (Ops): done"
