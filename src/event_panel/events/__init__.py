"""Event enrichment and presentation pipeline."""

from .age import EventAge, compute_age, format_age
from .classifier import classify, severity_color
from .commands import acknowledge, compose_ack_message
from .enricher import EventEnricher
from .filters import filter_triggers
from .models import (
    Acknowledgment,
    Drop,
    EnrichedEvent,
    EventCollection,
    EventTag,
    FormattedAcknowledgment,
    Keep,
    RawEvent,
    RawTrigger,
    SeverityLevel,
)
from .pipeline import EventPipeline, build_event_list, sort_events
from .tags import SEMANTIC_TAGS, TagIndex, get_tag_value

__all__ = [
    "SEMANTIC_TAGS",
    "Acknowledgment",
    "Drop",
    "EnrichedEvent",
    "EventAge",
    "EventCollection",
    "EventEnricher",
    "EventPipeline",
    "EventTag",
    "FormattedAcknowledgment",
    "Keep",
    "RawEvent",
    "RawTrigger",
    "SeverityLevel",
    "TagIndex",
    "acknowledge",
    "build_event_list",
    "classify",
    "compose_ack_message",
    "compute_age",
    "filter_triggers",
    "format_age",
    "get_tag_value",
    "severity_color",
    "sort_events",
]
