"""Collection pipeline: fetch, enrich, filter, sort and bound panel events."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..datasource.base import EventDataSource
from ..exceptions import DataSourceError, MalformedEventError
from .age import SECONDS_PER_DAY
from .enricher import EventEnricher
from .filters import filter_triggers
from .models import Drop, EnrichedEvent, EventCollection, RawEvent, RawTrigger, SortKey

if TYPE_CHECKING:
    from ..config import PanelSettings


def current_time() -> int:
    """Wall clock in whole seconds, rounded up."""
    return math.ceil(time.time())


def sort_events(events: Sequence[EnrichedEvent], sort_key: SortKey) -> list[EnrichedEvent]:
    """Stable sort; events with equal keys keep their fetch order."""
    if sort_key == "priority":
        return sorted(events, key=lambda event: event.priority, reverse=True)
    if sort_key == "age-dsc":
        return sorted(events, key=lambda event: event.elapsed_seconds, reverse=True)
    if sort_key == "age-asc":
        return sorted(events, key=lambda event: event.elapsed_seconds)
    raise ValueError(f"Unsupported sort key: {sort_key!r}")


class EventPipeline:
    """Build the ordered, bounded event list for one panel refresh."""

    def __init__(self, settings: PanelSettings, logger: logging.Logger | None = None) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger("event_panel.events.pipeline")
        self.enricher = EventEnricher(settings)

    async def collect(
        self,
        datasource: EventDataSource,
        *,
        now: int | None = None,
    ) -> EventCollection:
        """Run one refresh against ``datasource``.

        All per-trigger event fetches run concurrently and must all succeed;
        any data source failure propagates and no partial list is returned.
        """
        now = current_time() if now is None else now
        triggers = await self._fetch_triggers(datasource)

        time_to = now
        time_from = now - self.settings.before_days * SECONDS_PER_DAY
        event_lists = await asyncio.gather(
            *(
                datasource.get_events(
                    trigger.triggerid,
                    time_from,
                    time_to,
                    self.settings.show_events,
                )
                for trigger in triggers
            )
        )

        collection = EventCollection()
        enriched: list[EnrichedEvent] = []
        for trigger, raw_events in zip(triggers, event_lists):
            for payload in raw_events:
                collection.fetched_count += 1
                event, trigger_color = self._enrich_one(payload, trigger, now=now)
                if trigger_color is not None:
                    collection.trigger_colors[trigger.triggerid] = trigger_color
                if event is None:
                    collection.dropped_count += 1
                    continue
                enriched.append(event)

        ordered = sort_events(enriched, self.settings.sort_events_by)
        collection.events = ordered[: self.settings.limit]
        self.logger.info(
            "Collected %d events from %d triggers (%d fetched, %d dropped, limit %d).",
            len(collection.events),
            len(triggers),
            collection.fetched_count,
            collection.dropped_count,
            self.settings.limit,
        )
        return collection

    async def build_event_list(
        self,
        datasource: EventDataSource,
        *,
        now: int | None = None,
    ) -> list[EnrichedEvent]:
        collection = await self.collect(datasource, now=now)
        return collection.events

    async def _fetch_triggers(self, datasource: EventDataSource) -> list[RawTrigger]:
        group_filter = datasource.replace_template_vars(self.settings.group_filter)
        host_filter = datasource.replace_template_vars(self.settings.host_filter)
        app_filter = datasource.replace_template_vars(self.settings.application_filter)
        trigger_filter = datasource.replace_template_vars(self.settings.trigger_filter)

        payloads = await datasource.get_triggers(
            group_filter,
            host_filter,
            app_filter,
            self.settings.show_events,
        )
        try:
            triggers = [_as_model(RawTrigger, payload) for payload in payloads]
        except ValidationError as exc:
            raise DataSourceError(f"Malformed trigger payload: {exc}") from exc
        return filter_triggers(triggers, trigger_filter)

    def _enrich_one(
        self,
        payload: Any,
        trigger: RawTrigger,
        *,
        now: int,
    ) -> tuple[EnrichedEvent | None, str | None]:
        """Enrich one payload; also return the trigger mark color it implies.

        The mark color is derived from every parsed event, including events
        dropped afterwards by the tag-count check or classification.
        """
        try:
            event = _as_model(RawEvent, payload)
        except ValidationError as exc:
            self.logger.warning(
                "Skipping unparseable event for trigger %s: %s",
                trigger.triggerid,
                exc,
                extra={"triggerid": trigger.triggerid},
            )
            return None, None

        trigger_color = self.enricher.trigger_color(event)

        # Incompletely tagged records are a known lossy filter; not reported.
        if len(event.tags) != self.settings.expected_tag_count:
            self.logger.debug(
                "Dropping event %s with %d tags (expected %d).",
                event.eventid,
                len(event.tags),
                self.settings.expected_tag_count,
                extra={"eventid": event.eventid, "triggerid": trigger.triggerid},
            )
            return None, trigger_color

        try:
            result = self.enricher.enrich(event, trigger, now=now)
        except MalformedEventError as exc:
            self.logger.warning(
                "Skipping malformed event %s: %s",
                exc.eventid,
                exc,
                extra={"eventid": exc.eventid, "triggerid": trigger.triggerid},
            )
            return None, trigger_color
        if isinstance(result, Drop):
            return None, trigger_color
        return result.event, trigger_color


async def build_event_list(
    datasource: EventDataSource,
    settings: PanelSettings,
    *,
    now: int | None = None,
    logger: logging.Logger | None = None,
) -> list[EnrichedEvent]:
    """Convenience wrapper around :meth:`EventPipeline.build_event_list`."""
    return await EventPipeline(settings, logger=logger).build_event_list(datasource, now=now)


def _as_model(model: type[Any], payload: Any) -> Any:
    if isinstance(payload, model):
        return payload
    return model.model_validate(payload)
