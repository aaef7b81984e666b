"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class DataSourceError(Exception):
    """Raised when the monitoring backend fails to return triggers/events or an ack."""


class MalformedEventError(Exception):
    """Raised when an event cannot be enriched because a required tag is unusable."""

    def __init__(self, message: str, *, eventid: str | None = None) -> None:
        super().__init__(message)
        self.eventid = eventid
