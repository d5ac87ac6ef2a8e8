import logging
import re
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from event_store.database import get_db
from event_store.errors import ClientError
from event_store.schemas import EventCreate, EventOut
from event_store.services import events as event_service
from event_store.validation import EventValidationError, validate_event_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

# 8-4-4-4-12 hyphenated or 32 bare hex digits; uuid.UUID alone tolerates
# hyphens anywhere.
_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}|[0-9a-f]{32}",
    re.IGNORECASE,
)


def parse_event_id(value: str) -> uuid.UUID:
    """Parse an event id, also accepting ``{...}`` and ``urn:uuid:`` wrapped forms."""
    candidate = value
    if candidate[:9].lower() == "urn:uuid:":
        candidate = candidate[9:]
    elif candidate.startswith("{") and candidate.endswith("}"):
        candidate = candidate[1:-1]
    if not _UUID_RE.fullmatch(candidate):
        raise ClientError("Invalid event ID")
    return uuid.UUID(candidate)


@router.get("", response_model=List[EventOut])
async def list_events(db: AsyncSession = Depends(get_db)):
    return await event_service.list_events(db)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, db: AsyncSession = Depends(get_db)):
    try:
        validate_event_input(payload.title, payload.start_time, payload.end_time)
    except EventValidationError as exc:
        logger.info("Rejected event: %s", exc.message)
        raise

    return await event_service.create_event(
        db,
        title=payload.title,
        description=payload.description,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )


@router.get("/", include_in_schema=False)
async def get_event_without_id():
    # "/events/" is the by-id route with an empty id, not a redirect to the list.
    raise ClientError("Invalid event ID")


@router.get("/{event_id}", response_model=EventOut)
async def get_event(event_id: str, db: AsyncSession = Depends(get_db)):
    # Parsed here so a malformed id is a 400 rather than FastAPI's 422.
    parsed_id = parse_event_id(event_id)
    return await event_service.get_event(db, parsed_id)
