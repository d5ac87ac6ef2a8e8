import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from event_store.errors import NotFound
from event_store.models.event import Event
from event_store.services import events as event_service

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.anyio
async def test_create_then_fetch_round_trips_through_storage(database):
    await database.connect()
    try:
        before = datetime.now(timezone.utc)
        async with database.session() as session:
            created = await event_service.create_event(
                session,
                title="Planning",
                description="quarterly",
                start_time=START,
                end_time=START + timedelta(hours=1),
            )
        event_id = created.id
        assert isinstance(event_id, uuid.UUID)
        assert created.created_at >= before

        async with database.session() as verify_session:
            stored = (await verify_session.execute(select(Event).where(Event.id == event_id))).scalar_one()
            assert stored.title == "Planning"
            assert stored.start_time == START
            assert stored.start_time.tzinfo is not None

            fetched = await event_service.get_event(verify_session, event_id)
            assert fetched.description == "quarterly"
    finally:
        await database.dispose()


@pytest.mark.anyio
async def test_list_events_sorts_by_start_time(database):
    await database.connect()
    try:
        async with database.session() as session:
            for offset in (3, 1, 2):
                await event_service.create_event(
                    session,
                    title=f"T{offset}",
                    description="",
                    start_time=START + timedelta(hours=offset),
                    end_time=START + timedelta(hours=offset + 1),
                )
            events = await event_service.list_events(session)
        assert [e.title for e in events] == ["T1", "T2", "T3"]
    finally:
        await database.dispose()


@pytest.mark.anyio
async def test_get_event_raises_not_found_for_unknown_id(database):
    await database.connect()
    try:
        async with database.session() as session:
            with pytest.raises(NotFound):
                await event_service.get_event(session, uuid.uuid4())
    finally:
        await database.dispose()
