"""Resolution-state classification for tagged events."""

from __future__ import annotations

from collections.abc import Sequence

from ..exceptions import MalformedEventError
from .models import Classification, Drop, RawEvent, SeverityLevel, parse_severity
from .tags import PROBLEM_TAG, SEVERITY_TAG, STATUS_TAG, TagIndex

NO_RECOVERY_EVENT = "0"


def severity_color(
    severity: str | None,
    palette: Sequence[SeverityLevel],
    *,
    eventid: str | None = None,
) -> str:
    """Look up the palette color for a 1-based severity string.

    Raises:
        MalformedEventError: if the severity is missing, not an integral
            number, or outside ``1..len(palette)``.
    """
    if severity is None:
        raise MalformedEventError(
            f"Event {eventid} has no {SEVERITY_TAG} tag.", eventid=eventid
        )
    index = parse_severity(severity)
    if index is None:
        raise MalformedEventError(
            f"Event {eventid} has non-numeric severity {severity!r}.", eventid=eventid
        )
    if not 1 <= index <= len(palette):
        raise MalformedEventError(
            f"Event {eventid} severity {index} outside palette range 1..{len(palette)}.",
            eventid=eventid,
        )
    return palette[index - 1].color


def classify(
    event: RawEvent,
    palette: Sequence[SeverityLevel],
    ok_color: str,
    *,
    clearance_status: str,
    show_unresolved_only: bool = False,
    tags: TagIndex | None = None,
) -> Classification | Drop:
    """Classify an event as cleared, recovered or an active problem.

    Branches are checked in that order and exactly one applies. Recovered
    events become ``Drop`` when ``show_unresolved_only`` is set.
    """
    if tags is None:
        tags = TagIndex.from_event(event)
    status = tags.get(STATUS_TAG)
    problem = tags.get(PROBLEM_TAG) if status is not None else None

    if status == clearance_status:
        return Classification(state="cleared", color=ok_color, problem=problem)

    if event.r_eventid != NO_RECOVERY_EVENT:
        if show_unresolved_only:
            return Drop(reason="resolved")
        return Classification(
            state="recovered",
            resolved_status=f"Yes by {event.r_eventid}",
            color=ok_color,
            problem=problem,
        )

    return Classification(
        state="problem",
        resolved_status="No",
        color=severity_color(tags.get(SEVERITY_TAG), palette, eventid=event.eventid),
        problem=problem,
    )
