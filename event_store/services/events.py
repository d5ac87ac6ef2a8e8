"""Mapping between ``Event`` rows and the events API.

Every storage failure is logged and re-raised as ``StorageError``; a missing
row on lookup is ``NotFound``. Nothing here retries.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_store.errors import NotFound, StorageError
from event_store.models.event import Event

_LOGGER = logging.getLogger(__name__)

# asyncpg surfaces dropped or refused connections as bare OSErrors that
# SQLAlchemy does not wrap.
_STORAGE_ERRORS = (SQLAlchemyError, OSError)


async def create_event(
    db: AsyncSession,
    *,
    title: str,
    description: str,
    start_time: datetime,
    end_time: datetime,
) -> Event:
    """Insert a single event and return it as stored."""

    event = Event(
        id=uuid.uuid4(),
        title=title,
        description=description,
        start_time=start_time,
        end_time=end_time,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(event)
        await db.commit()
    except _STORAGE_ERRORS as exc:
        _LOGGER.error("Error inserting event %s", event.id, exc_info=True)
        try:
            await db.rollback()
        except _STORAGE_ERRORS:
            _LOGGER.warning("Rollback after failed insert of %s also failed", event.id, exc_info=True)
        raise StorageError("Error inserting event") from exc

    # The row is committed at this point; a failed re-read must not be
    # reported as a failed insert.
    try:
        await db.refresh(event)
    except _STORAGE_ERRORS as exc:
        _LOGGER.error("Error reading inserted event %s", event.id, exc_info=True)
        raise StorageError("Error reading inserted event") from exc
    return event


async def list_events(db: AsyncSession) -> Sequence[Event]:
    """All events, earliest ``start_time`` first."""

    try:
        result = await db.execute(select(Event).order_by(Event.start_time.asc()))
        return result.scalars().all()
    except _STORAGE_ERRORS as exc:
        _LOGGER.error("Error fetching events", exc_info=True)
        raise StorageError("Error fetching events") from exc


async def get_event(db: AsyncSession, event_id: uuid.UUID) -> Event:
    try:
        result = await db.execute(select(Event).where(Event.id == event_id))
        event = result.scalar_one_or_none()
    except _STORAGE_ERRORS as exc:
        _LOGGER.error("Error fetching event %s", event_id, exc_info=True)
        raise StorageError("Error fetching event") from exc
    if event is None:
        raise NotFound("Event not found")
    return event
