"""Tests for acknowledgment display formatting."""

from __future__ import annotations

from datetime import timedelta, timezone

from event_panel.config import DEFAULT_TIME_FORMAT
from event_panel.events.acknowledgments import (
    acknowledged_trigger_color,
    format_acknowledgment,
    format_acknowledgments,
)
from event_panel.events.models import Acknowledgment


def _ack(**overrides: object) -> Acknowledgment:
    payload: dict[str, object] = {
        "clock": 1_700_000_000,
        "alias": "jdoe",
        "name": "Jane",
        "surname": "Doe",
        "message": "looking into it",
    }
    payload.update(overrides)
    return Acknowledgment.model_validate(payload)


def test_default_format_renders_utc_timestamp_and_user() -> None:
    formatted = format_acknowledgment(_ack(), DEFAULT_TIME_FORMAT)
    assert formatted.time == "14 Nov 2023 22:13:20"
    assert formatted.user == "jdoe (Jane Doe)"
    assert formatted.clock == 1_700_000_000
    assert formatted.alias == "jdoe"
    assert formatted.message == "looking into it"


def test_custom_format_is_honoured() -> None:
    formatted = format_acknowledgment(_ack(), "%Y-%m-%d %H:%M")
    assert formatted.time == "2023-11-14 22:13"


def test_formatting_does_not_mutate_source_records() -> None:
    acks = [_ack(), _ack(alias="ops", clock="1700000060")]
    before = [ack.model_dump() for ack in acks]
    formatted = format_acknowledgments(acks, DEFAULT_TIME_FORMAT)
    assert [ack.model_dump() for ack in acks] == before
    assert [item.user for item in formatted] == ["jdoe (Jane Doe)", "ops (Jane Doe)"]


def test_trigger_color_only_marked_when_enabled_and_acknowledged() -> None:
    acks = [_ack()]
    assert (
        acknowledged_trigger_color(acks, mark_ack_events=True, ack_event_color="#000000")
        == "#000000"
    )
    assert (
        acknowledged_trigger_color(acks, mark_ack_events=False, ack_event_color="#000000")
        is None
    )
    assert acknowledged_trigger_color([], mark_ack_events=True, ack_event_color="#000000") is None


def test_backend_fields_beyond_typed_ones_survive_formatting() -> None:
    formatted = format_acknowledgment(
        _ack(acknowledgeid="99", userid="7", eventid="9001"), DEFAULT_TIME_FORMAT
    )
    dumped = formatted.model_dump()
    assert dumped["acknowledgeid"] == "99"
    assert dumped["userid"] == "7"
    assert dumped["eventid"] == "9001"
    assert dumped["user"] == "jdoe (Jane Doe)"


def test_display_zone_shifts_rendered_time() -> None:
    plus_two = timezone(timedelta(hours=2))
    formatted = format_acknowledgment(_ack(), DEFAULT_TIME_FORMAT, plus_two)
    assert formatted.time == "15 Nov 2023 00:13:20"
    assert formatted.clock == 1_700_000_000
