"""Organizer event service.

Responsibilities:
- Ownership gate: every per-event operation checks ``organizer_id`` against
  the principal before doing anything else
- Listing query: AND of the supplied filters, scoped to the principal
- Batched loading of ``registered`` registrations and their users
- Validated create / update (status forced to draft on create, price cleared
  for free events, image reference kept unless a new image is uploaded)
- Hard delete
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from eventhub.config import settings
from eventhub.models.event import Event, EventStatus
from eventhub.models.registration import Registration, RegistrationStatus
from eventhub.models.user import User
from eventhub.schemas.event import EventCreate, EventFilters, EventUpdate
from eventhub.storage import ImageStorage, read_image_upload
from eventhub.validation import validate_input

logger = logging.getLogger(__name__)


@dataclass
class EventAggregate:
    """An event with its active registrations (each with its user loaded)."""

    event: Event
    registrations: list[Registration] = field(default_factory=list)

    @property
    def registered_count(self) -> int:
        return len(self.registrations)

    @property
    def registration_summary(self) -> str:
        return "%d / %d" % (self.registered_count, self.event.capacity)


def _check_ownership(event: Event, principal: User) -> None:
    """Only the organizer may see or touch an event through these operations."""
    if event.organizer_id != principal.user_id:
        logger.warning("User %s refused access to event %s", principal.user_id, event.event_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def get_owned_event(db: Session, event_id: str, principal: User, for_update: bool = False) -> Event:
    """Fetch an event and enforce the ownership gate.

    With ``for_update`` the row is locked for the rest of the transaction so
    the check and the following write see the same row.
    """
    query = db.query(Event).filter(Event.event_id == event_id)
    if for_update:
        query = query.with_for_update()
    event = query.first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    _check_ownership(event, principal)
    return event


def parse_filters(submitted: dict[str, Optional[str]]) -> EventFilters:
    """Validate raw query parameters; absent parameters are dropped first."""
    present = {name: value for name, value in submitted.items() if value is not None}
    return validate_input(EventFilters, present)


def build_event_query(db: Session, organizer_id: str, filters: EventFilters) -> Query:
    """The principal's events matching every supplied filter."""
    query = db.query(Event).filter(Event.organizer_id == organizer_id)

    if filters.date_from is not None:
        query = query.filter(Event.event_date >= datetime.combine(filters.date_from, time.min))
    if filters.date_to is not None:
        query = query.filter(Event.event_date < datetime.combine(filters.date_to + timedelta(days=1), time.min))

    # An empty location is still applied and matches every row.
    if filters.location is not None:
        query = query.filter(or_(
            Event.location.icontains(filters.location, autoescape=True),
            Event.city.icontains(filters.location, autoescape=True),
            Event.state.icontains(filters.location, autoescape=True),
        ))

    if filters.status is not None:
        query = query.filter(Event.status == filters.status)

    if filters.min_price is not None:
        query = query.filter(Event.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Event.price <= filters.max_price)

    return query


def load_registrations(db: Session, events: list[Event]) -> list[EventAggregate]:
    """Attach registered registrations + users with one query for all events."""
    if not events:
        return []
    event_ids = [ev.event_id for ev in events]
    registrations = (
        db.query(Registration)
        .options(joinedload(Registration.user))
        .filter(
            Registration.event_id.in_(event_ids),
            Registration.status == RegistrationStatus.registered,
        )
        .order_by(Registration.registered_at)
        .all()
    )
    by_event: dict[str, list[Registration]] = {eid: [] for eid in event_ids}
    for reg in registrations:
        by_event[reg.event_id].append(reg)
    return [EventAggregate(event=ev, registrations=by_event[ev.event_id]) for ev in events]


def list_events(db: Session, principal: User, filters: EventFilters) -> list[EventAggregate]:
    """Listing view — filtered, soonest event first."""
    events = build_event_query(db, principal.user_id, filters).order_by(Event.event_date.asc()).all()
    logger.info("Listed %d events for organizer %s", len(events), principal.user_id)
    return load_registrations(db, events)


def dashboard_events(db: Session, principal: User) -> list[EventAggregate]:
    """Dashboard view — all of the principal's events, newest first."""
    events = (
        db.query(Event)
        .filter(Event.organizer_id == principal.user_id)
        .order_by(Event.created_at.desc())
        .all()
    )
    return load_registrations(db, events)


def event_registrations(db: Session, event_id: str, principal: User) -> EventAggregate:
    event = get_owned_event(db, event_id, principal)
    return load_registrations(db, [event])[0]


def _mutation_failed(message: str, exc: Exception, submitted: dict[str, Any]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "message": message,
            "errors": {"error": "%s %s" % (message, exc.__class__.__name__)},
            "input": submitted,
        },
    )


def create_event(
    db: Session,
    principal: User,
    submitted: dict[str, Any],
    upload: Optional[UploadFile],
    storage: ImageStorage,
) -> Event:
    """Validate the submitted form and insert a draft event owned by the principal."""
    image, image_error = read_image_upload(upload, settings.IMAGE_MAX_KILOBYTES)
    payload = validate_input(EventCreate, submitted, {"image": image_error} if image_error else None)

    reference = None
    try:
        if image:
            logger.info("Image upload attempted")
            reference = storage.store(image)
        event = Event(
            organizer_id=principal.user_id,
            status=EventStatus.draft,
            image=reference,
            **payload.model_dump(),
        )
        db.add(event)
        db.commit()
        db.refresh(event)
    except (SQLAlchemyError, OSError) as exc:
        db.rollback()
        storage.delete(reference)
        logger.exception("Failed to create event for organizer %s", principal.user_id)
        raise _mutation_failed("Failed to create event.", exc, submitted)

    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.event_id, principal.user_id)
    return event


def update_event(
    db: Session,
    event_id: str,
    principal: User,
    submitted: dict[str, Any],
    upload: Optional[UploadFile],
    storage: ImageStorage,
) -> Event:
    """Replace every editable field of an owned event.

    The stored image reference changes only when a new image is uploaded.
    """
    event = get_owned_event(db, event_id, principal, for_update=True)

    image, image_error = read_image_upload(upload, settings.IMAGE_MAX_KILOBYTES)
    payload = validate_input(EventUpdate, submitted, {"image": image_error} if image_error else None)

    reference = None
    try:
        if image:
            logger.info("Image upload attempted")
            reference = storage.store(image)
        for name, value in payload.model_dump().items():
            setattr(event, name, value)
        if reference:
            event.image = reference
        db.commit()
        db.refresh(event)
    except (SQLAlchemyError, OSError) as exc:
        db.rollback()
        storage.delete(reference)
        logger.exception("Failed to update event %s", event_id)
        raise _mutation_failed("Failed to update event.", exc, submitted)

    logger.info("Updated event %s by organizer %s", event_id, principal.user_id)
    return event


def delete_event(db: Session, event_id: str, principal: User) -> None:
    """Hard-delete an owned event together with its registrations."""
    event = get_owned_event(db, event_id, principal, for_update=True)
    try:
        db.delete(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete event %s", event_id)
        raise _mutation_failed("Failed to delete event.", exc, {})
    logger.info("Deleted event %s by organizer %s", event_id, principal.user_id)
