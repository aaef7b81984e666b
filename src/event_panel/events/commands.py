"""Acknowledgment command issued from the panel."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..datasource.base import EventDataSource

DEFAULT_ACK_SOURCE = "Grafana"

logger = logging.getLogger("event_panel.events.commands")


def compose_ack_message(user_name: str, message: str, source: str = DEFAULT_ACK_SOURCE) -> str:
    return f"{user_name} ({source}): {message}"


async def acknowledge(
    eventid: str,
    message: str,
    user_name: str,
    datasource: EventDataSource,
    *,
    on_success: Callable[[], Awaitable[Any]] | None = None,
    source: str = DEFAULT_ACK_SOURCE,
) -> None:
    """Acknowledge ``eventid`` and then await ``on_success`` (typically a refresh).

    Data source failures propagate unchanged and ``on_success`` is not called.
    """
    await datasource.acknowledge_event(eventid, compose_ack_message(user_name, message, source))
    logger.info("Acknowledged event %s as %s.", eventid, user_name)
    if on_success is not None:
        await on_success()
