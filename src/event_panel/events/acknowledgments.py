"""Display formatting for event acknowledgments."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, tzinfo

from .models import Acknowledgment, FormattedAcknowledgment


def format_user(ack: Acknowledgment) -> str:
    return f"{ack.alias} ({ack.name} {ack.surname})"


def format_acknowledgment(
    ack: Acknowledgment,
    time_format: str,
    tz: tzinfo | None = UTC,
) -> FormattedAcknowledgment:
    """Return a formatted copy carrying every backend field of ``ack``.

    ``tz=None`` renders the time in the host's local zone. The input record is
    left untouched.
    """
    timestamp = datetime.fromtimestamp(ack.clock, tz=tz)
    return FormattedAcknowledgment.model_validate(
        {
            **ack.model_dump(),
            "time": timestamp.strftime(time_format),
            "user": format_user(ack),
        }
    )


def format_acknowledgments(
    acks: Sequence[Acknowledgment],
    time_format: str,
    tz: tzinfo | None = UTC,
) -> list[FormattedAcknowledgment]:
    return [format_acknowledgment(ack, time_format, tz) for ack in acks]


def acknowledged_trigger_color(
    acks: Sequence[Acknowledgment],
    *,
    mark_ack_events: bool,
    ack_event_color: str,
) -> str | None:
    """Color the owning trigger should take, or None to leave it unchanged."""
    if mark_ack_events and acks:
        return ack_event_color
    return None
