"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from eventhub.models.event import EventStatus
from eventhub.schemas.registration import RegistrationOut
from eventhub.storage import ALLOWED_IMAGE_TYPES

# Largest value a Numeric(10, 2) price column holds.
MAX_PRICE = 99999999.99


class EventInput(BaseModel):
    """Editable fields shared by create and update."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    event_date: datetime
    location: str = Field(..., min_length=1, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90, allow_inf_nan=False)
    longitude: Optional[float] = Field(None, ge=-180, le=180, allow_inf_nan=False)
    capacity: int = Field(..., ge=1)
    is_paid: bool
    price: Optional[float] = Field(None, ge=0, le=MAX_PRICE, allow_inf_nan=False, validate_default=True)

    @field_validator("event_date")
    @classmethod
    def naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("price")
    @classmethod
    def price_only_when_paid(cls, v: Optional[float], info: ValidationInfo) -> Optional[float]:
        if not info.data.get("is_paid"):
            return None
        if v is None:
            raise ValueError("The price field is required when is_paid is true.")
        return v


class EventCreate(EventInput):
    """Create payload. Any submitted status is ignored; new events are drafts."""


class EventUpdate(EventInput):
    status: EventStatus


class EventFilters(BaseModel):
    """Listing filters. ``None`` means the filter was not supplied."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    location: Optional[str] = None
    status: Optional[EventStatus] = None
    min_price: Optional[float] = Field(None, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, allow_inf_nan=False)

    @field_validator("date_from", "date_to", "status", "min_price", "max_price", mode="before")
    @classmethod
    def blank_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class EventOut(BaseModel):
    event_id: str
    organizer_id: str
    title: str
    description: str
    event_date: datetime
    location: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    capacity: int
    status: EventStatus
    is_paid: bool
    price: Optional[float] = None
    image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventWithRegistrationsOut(EventOut):
    registrations: list[RegistrationOut] = []
    registered_count: int = 0
    registration_summary: str = ""

    @classmethod
    def from_aggregate(cls, aggregate) -> EventWithRegistrationsOut:
        """Build from an event plus its already-loaded registrations."""
        return cls(
            **EventOut.model_validate(aggregate.event).model_dump(),
            registrations=[RegistrationOut.model_validate(r) for r in aggregate.registrations],
            registered_count=aggregate.registered_count,
            registration_summary=aggregate.registration_summary,
        )


class EventListOut(BaseModel):
    events: list[EventWithRegistrationsOut]
    filters: dict[str, Optional[str]]


class EventMutationResult(BaseModel):
    success: bool = True
    message: str
    redirect_to: str
    event: Optional[EventOut] = None


class EventFormOut(BaseModel):
    """Defaults and choices a client needs to render the create/edit form."""

    event: Optional[EventOut] = None
    defaults: dict[str, Any] = {}
    statuses: list[str] = [s.value for s in EventStatus]
    image_types: list[str] = list(ALLOWED_IMAGE_TYPES)
    image_max_kilobytes: int


class DashboardOut(BaseModel):
    events: list[EventWithRegistrationsOut]
    total_events: int
    active_events: int
    total_registrations: int
