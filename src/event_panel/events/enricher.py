"""Per-event enrichment into display-ready records."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .acknowledgments import acknowledged_trigger_color, format_acknowledgments
from .age import compute_age
from .classifier import classify
from .models import Drop, EnrichedEvent, EnrichmentResult, Keep, RawEvent, RawTrigger
from .tags import TagIndex

if TYPE_CHECKING:
    from ..config import PanelSettings


class EventEnricher:
    """Apply tag lookup, classification, age and ack formatting to one event."""

    def __init__(self, settings: PanelSettings) -> None:
        self.settings = settings

    def enrich(self, event: RawEvent, trigger: RawTrigger, *, now: float) -> EnrichmentResult:
        """Build an EnrichedEvent for ``event`` as seen at ``now``.

        Returns ``Drop`` for recovered events in unresolved-only mode. The
        ``Keep`` result carries the color the owning trigger should take when
        acknowledgment marking applies; the trigger itself is not modified.

        Raises:
            MalformedEventError: if an active problem has an unusable severity.
        """
        tags = TagIndex.from_event(event)
        classification = classify(
            event,
            self.settings.event_severity,
            self.settings.ok_event_color,
            clearance_status=self.settings.clearance_status,
            show_unresolved_only=self.settings.show_unresolved_only,
            tags=tags,
        )
        if isinstance(classification, Drop):
            return classification

        age = compute_age(event.clock, now)
        fields = tags.resolve()
        enriched = EnrichedEvent(
            eventid=event.eventid,
            triggerid=trigger.triggerid,
            clock=event.clock,
            r_eventid=event.r_eventid,
            value=event.value,
            time=datetime.fromtimestamp(event.clock, tz=UTC),
            tags=[tag.model_copy() for tag in event.tags],
            tag_values=[tag.value for tag in event.tags],
            raw=dict(event.raw),
            host=fields["host"],
            severity=fields["severity"],
            status=fields["status"],
            problem=classification.problem,
            module=fields["module"],
            error_code=fields["error_code"],
            resource_id=fields["resource_id"],
            resolved_status=classification.resolved_status,
            color=classification.color,
            elapsed_seconds=age.elapsed_seconds,
            age=age.label,
            acknowledges=format_acknowledgments(
                event.acknowledges,
                self.settings.time_format,
                self.settings.display_tzinfo,
            ),
        )
        return Keep(event=enriched, trigger_color=self.trigger_color(event))

    def trigger_color(self, event: RawEvent) -> str | None:
        """Color the owning trigger takes because of this event's acknowledgments.

        Applies to every fetched event, including ones later dropped.
        """
        return acknowledged_trigger_color(
            event.acknowledges,
            mark_ack_events=self.settings.mark_ack_events,
            ack_event_color=self.settings.ack_event_color,
        )
