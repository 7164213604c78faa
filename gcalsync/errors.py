"""Errors raised by the sync pipeline.

Every failure in the core is fatal to the run. Functions raise these and
the entry point decides how to abort.
"""


class GcalSyncError(Exception):
    """Base class for schedule sync failures."""


class MalformedTimestamp(GcalSyncError, ValueError):
    """An event's start or end time could not be parsed."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Unable to parse {field} {value!r}")


class TemplateExecutionFailure(GcalSyncError):
    """A template could not be loaded or rendered."""


class PublishFailure(GcalSyncError):
    """An artifact could not be written or moved into place."""
