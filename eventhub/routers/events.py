"""Organizer event routes — delegates to event_service for ownership and validation."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.config import settings
from eventhub.database import get_db
from eventhub.models.event import EventStatus
from eventhub.models.user import User
from eventhub.schemas.event import (
    EventFormOut, EventListOut, EventMutationResult, EventOut, EventWithRegistrationsOut,
)
from eventhub.services import event_service
from eventhub.storage import ImageStorage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()


def event_form(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    event_date: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    capacity: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    is_paid: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
) -> dict[str, str]:
    """Collect the submitted event form; values are trimmed and blanks dropped."""
    submitted = {
        "title": title,
        "description": description,
        "event_date": event_date,
        "location": location,
        "city": city,
        "state": state,
        "latitude": latitude,
        "longitude": longitude,
        "capacity": capacity,
        "status": status,
        "is_paid": is_paid,
        "price": price,
    }
    return {name: value.strip() for name, value in submitted.items() if value is not None and value.strip()}


@router.get("/", response_model=EventListOut)
def list_events(
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    min_price: Optional[str] = Query(None),
    max_price: Optional[str] = Query(None),
    principal: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the principal's events with optional filters, soonest first."""
    submitted = {
        "date_from": date_from,
        "date_to": date_to,
        "location": location,
        "status": status,
        "min_price": min_price,
        "max_price": max_price,
    }
    filters = event_service.parse_filters(submitted)
    aggregates = event_service.list_events(db, principal, filters)
    return EventListOut(
        events=[EventWithRegistrationsOut.from_aggregate(a) for a in aggregates],
        filters=submitted,
    )


@router.get("/create", response_model=EventFormOut)
def create_form(principal: User = Depends(get_current_user)):
    """Blank form for a new event."""
    return EventFormOut(
        defaults={"status": EventStatus.draft.value, "is_paid": False, "price": None, "capacity": 1},
        image_max_kilobytes=settings.IMAGE_MAX_KILOBYTES,
    )


@router.post("/", response_model=EventMutationResult, status_code=status.HTTP_201_CREATED)
def create_event(
    submitted: dict = Depends(event_form),
    image: Optional[UploadFile] = File(None),
    principal: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    """Create a draft event owned by the principal."""
    event = event_service.create_event(db, principal, submitted, image, storage)
    return EventMutationResult(
        message="Event created successfully.",
        redirect_to="/dashboard",
        event=EventOut.model_validate(event),
    )


@router.get("/{event_id}", response_model=EventOut)
def show_event(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Fetch a single owned event."""
    return event_service.get_owned_event(db, event_id, principal)


@router.get("/{event_id}/edit", response_model=EventFormOut)
def edit_form(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Owned event prepared for the edit form."""
    event = event_service.get_owned_event(db, event_id, principal)
    return EventFormOut(
        event=EventOut.model_validate(event),
        image_max_kilobytes=settings.IMAGE_MAX_KILOBYTES,
    )


@router.api_route("/{event_id}", methods=["PUT", "PATCH"], response_model=EventMutationResult)
def update_event(
    event_id: str,
    submitted: dict = Depends(event_form),
    image: Optional[UploadFile] = File(None),
    principal: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    """Replace the editable fields of an owned event (organizer only)."""
    event = event_service.update_event(db, event_id, principal, submitted, image, storage)
    return EventMutationResult(
        message="Event updated successfully.",
        redirect_to=f"/events/{event.event_id}",
        event=EventOut.model_validate(event),
    )


@router.delete("/{event_id}", response_model=EventMutationResult)
def delete_event(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete an owned event (organizer only)."""
    event_service.delete_event(db, event_id, principal)
    return EventMutationResult(message="Event deleted successfully.", redirect_to="/events")


@router.get("/{event_id}/registrations", response_model=EventWithRegistrationsOut)
def show_registrations(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Owned event with its registered attendees."""
    aggregate = event_service.event_registrations(db, event_id, principal)
    return EventWithRegistrationsOut.from_aggregate(aggregate)
