"""Persistence helpers for the events API."""

from event_store.services.events import create_event, get_event, list_events

__all__ = ["create_event", "get_event", "list_events"]
