# event_store/schemas.py
# ------------------------------------------------------------
# Pydantic v2 request/response schemas for events
# ------------------------------------------------------------
from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, field_validator


class EventCreate(BaseModel):
    # title/description fall back to "" so an absent title reaches the
    # validator and fails as "title required" rather than as a decode error.
    title: str = ""
    description: str = ""
    start_time: AwareDatetime
    end_time: AwareDatetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Standup",
                "description": "",
                "start_time": "2024-01-01T09:00:00Z",
                "end_time": "2024-01-01T09:15:00Z",
            }
        }
    )

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value):
        return "" if value is None else value


class EventOut(BaseModel):
    id: UUID
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
