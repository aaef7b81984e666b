"""Trigger description filtering with optional /regex/flags syntax."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..exceptions import ConfigError
from .models import RawTrigger

_REGEX_FILTER_RE = re.compile(r"^/(.*)/([gimsuy]*)$", re.DOTALL)
_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def is_regex(filter_text: str) -> bool:
    return bool(_REGEX_FILTER_RE.match(filter_text))


def build_regex(filter_text: str) -> re.Pattern[str]:
    """Compile a ``/pattern/flags`` filter; flags without a Python meaning are ignored.

    Raises:
        ValueError: if ``filter_text`` is not written as ``/pattern/flags``.
        ConfigError: if the pattern does not compile.
    """
    match = _REGEX_FILTER_RE.match(filter_text)
    if match is None:
        raise ValueError(f"Not a /pattern/flags filter: {filter_text!r}")
    pattern, flag_text = match.groups()
    flags = 0
    for flag in flag_text:
        flags |= _FLAG_MAP.get(flag, 0)
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ConfigError(f"Invalid regex filter {filter_text!r}: {exc}") from exc


def filter_triggers(triggers: Iterable[RawTrigger], trigger_filter: str) -> list[RawTrigger]:
    """Keep triggers whose description matches the filter; empty filter keeps all."""
    if not trigger_filter:
        return list(triggers)
    if is_regex(trigger_filter):
        regex = build_regex(trigger_filter)
        return [trigger for trigger in triggers if regex.search(trigger.description)]
    return [trigger for trigger in triggers if trigger.description == trigger_filter]
