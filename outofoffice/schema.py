from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DelegateSchema(BaseModel):
    username: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class OutOfOfficeEntrySchema(BaseModel):
    id: int
    uuid: str
    start: datetime
    end: datetime
    to_user_id: Optional[int] = None
    to_user: Optional[DelegateSchema] = None
    model_config = ConfigDict(from_attributes=True)

    @field_validator("start", "end")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values; they are stored as UTC
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


# PUBLIC payload (what clients send).
# Dates are optional here so a missing date is reported as a business error.
class OutOfOfficeCreatePayload(BaseModel):
    start_date: Optional[date] = Field(None, description="First day away")
    end_date: Optional[date] = Field(None, description="Last day away (inclusive)")
    to_team_user_id: Optional[int] = Field(None, description="Delegate who receives redirected bookings")
    model_config = ConfigDict(extra="forbid")


# Notifier payload
class BookingRedirectNotification(BaseModel):
    language: str
    from_email: str
    to_email: str
    to_name: str
    dates: str
