"""Input checks applied to a new event before it reaches storage."""

from __future__ import annotations

from datetime import datetime

from event_store.errors import ClientError

TITLE_MAX_LENGTH = 100


class EventValidationError(ClientError):
    """A create request failed one of the event input rules."""


def validate_event_input(title: str, start_time: datetime, end_time: datetime) -> None:
    """Raise ``EventValidationError`` on the first failing rule.

    Rules are checked in order: title present, title length, time ordering.
    """
    if not title:
        raise EventValidationError("title required")
    if len(title) > TITLE_MAX_LENGTH:
        raise EventValidationError("title too long")
    if start_time > end_time:
        raise EventValidationError("start before end")
