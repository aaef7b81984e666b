"""Caller-side refresh coordination for one event panel instance."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from .config import PanelSettings
from .datasource.base import EventDataSource
from .events.commands import acknowledge
from .events.models import EnrichedEvent, RawTrigger
from .events.pipeline import EventPipeline


class EventPanel:
    """Hold the displayed event list and apply refresh results in order.

    Each refresh takes a generation number; a result is applied only if no
    newer refresh has started since, so the newest refresh always wins. A
    failed refresh keeps the previously displayed events and records the
    error instead.
    """

    def __init__(
        self,
        settings: PanelSettings,
        datasource: EventDataSource,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.datasource = datasource
        self.logger = logger or logging.getLogger("event_panel.panel")
        self.pipeline = EventPipeline(settings, logger=self.logger)
        self.event_list: list[EnrichedEvent] = []
        self.trigger_colors: dict[str, str] = {}
        self.loading = False
        self.error: str | None = None
        self.last_refresh_at: datetime | None = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def refresh(self, *, now: int | None = None) -> bool:
        """Run the pipeline once; return True if the result was applied."""
        self._generation += 1
        generation = self._generation
        self.error = None
        self.loading = True
        try:
            collection = await self.pipeline.collect(self.datasource, now=now)
        except Exception as exc:
            if generation != self._generation:
                self.logger.info(
                    "Discarding failure from superseded refresh %d.",
                    generation,
                    extra={"generation": generation},
                )
                return False
            self.loading = False
            self.error = str(exc) or type(exc).__name__
            self.logger.error(
                "Refresh %d failed: %s", generation, self.error, extra={"generation": generation}
            )
            raise

        if generation != self._generation:
            self.logger.info(
                "Discarding stale refresh %d (current %d).",
                generation,
                self._generation,
                extra={"generation": generation},
            )
            return False

        self.event_list = collection.events
        self.trigger_colors = collection.trigger_colors
        self.last_refresh_at = datetime.now(UTC)
        self.loading = False
        return True

    def trigger_color(self, trigger: RawTrigger) -> str | None:
        """Display color for ``trigger`` after acknowledgment marking."""
        return self.trigger_colors.get(trigger.triggerid, trigger.color)

    async def acknowledge_trigger(
        self,
        trigger: RawTrigger | dict[str, Any],
        message: str,
        user_name: str,
    ) -> None:
        """Acknowledge the trigger's last event, then refresh the panel."""
        if not isinstance(trigger, RawTrigger):
            trigger = RawTrigger.model_validate(trigger)
        if trigger.last_event is None:
            raise ValueError(f"Trigger {trigger.triggerid} has no last event to acknowledge.")
        await acknowledge(
            trigger.last_event.eventid,
            message,
            user_name,
            self.datasource,
            on_success=self.refresh,
            source=self.settings.ack_source,
        )
