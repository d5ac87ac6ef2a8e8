"""ORM models; importing this package registers every table with ``Base``."""

from event_store.models.event import Event

__all__ = ["Event"]
