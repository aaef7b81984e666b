"""Tag-keyed field lookup for loosely structured events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .models import EventTag, RawEvent

HOST_TAG = "Host"
SEVERITY_TAG = "Severity"
STATUS_TAG = "StatusEvent"
PROBLEM_TAG = "Problem"
MODULE_TAG = "Module"
ERROR_CODE_TAG = "ErrorCode"
RESOURCE_ID_TAG = "ResourceId"

# Enriched field name -> tag key it is read from.
SEMANTIC_TAGS: Mapping[str, str] = MappingProxyType(
    {
        "host": HOST_TAG,
        "severity": SEVERITY_TAG,
        "status": STATUS_TAG,
        "module": MODULE_TAG,
        "error_code": ERROR_CODE_TAG,
        "resource_id": RESOURCE_ID_TAG,
    }
)


def get_tag_value(event: RawEvent, tag_key: str) -> str | None:
    """Return the value of the first tag named ``tag_key`` (exact match), else None."""
    for tag in event.tags:
        if tag.tag == tag_key:
            return tag.value
    return None


class TagIndex:
    """First-occurrence index over an event's tags.

    Built once per event so each semantic field is a dict lookup rather than
    another scan. Duplicate keys resolve to the earliest tag, matching
    :func:`get_tag_value`.
    """

    __slots__ = ("_values", "size")

    def __init__(self, tags: Iterable[EventTag]) -> None:
        values: dict[str, str] = {}
        size = 0
        for tag in tags:
            size += 1
            values.setdefault(tag.tag, tag.value)
        self._values = values
        self.size = size

    @classmethod
    def from_event(cls, event: RawEvent) -> TagIndex:
        return cls(event.tags)

    def get(self, tag_key: str) -> str | None:
        return self._values.get(tag_key)

    def __contains__(self, tag_key: object) -> bool:
        return tag_key in self._values

    def resolve(self, fields: Mapping[str, str] = SEMANTIC_TAGS) -> dict[str, str | None]:
        """Resolve every named field through its tag key."""
        return {name: self._values.get(key) for name, key in fields.items()}
