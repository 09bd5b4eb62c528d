"""Attendee registration service."""
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from eventhub.models.event import Event, EventStatus
from eventhub.models.registration import Registration, RegistrationStatus
from eventhub.models.user import User

logger = logging.getLogger(__name__)


def _active_registration(db: Session, event_id: str, user_id: str):
    return (
        db.query(Registration)
        .filter(
            Registration.event_id == event_id,
            Registration.user_id == user_id,
            Registration.status == RegistrationStatus.registered,
        )
        .first()
    )


def register(db: Session, event_id: str, principal: User) -> Registration:
    """Register the principal for an active event with seats left."""
    # Lock the event row so concurrent sign-ups cannot overfill it.
    event = db.query(Event).filter(Event.event_id == event_id).with_for_update().first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.status != EventStatus.active:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Registration is closed for this event")
    if _active_registration(db, event_id, principal.user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already registered for this event")

    taken = (
        db.query(Registration)
        .filter(Registration.event_id == event_id, Registration.status == RegistrationStatus.registered)
        .count()
    )
    if taken >= event.capacity:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event is at full capacity")

    registration = Registration(
        event_id=event_id,
        user_id=principal.user_id,
        status=RegistrationStatus.registered,
    )
    db.add(registration)
    db.commit()
    db.refresh(registration)
    logger.info("User %s registered for event %s (%d/%d)", principal.user_id, event_id, taken + 1, event.capacity)
    return registration


def cancel(db: Session, event_id: str, principal: User) -> Registration:
    """Cancel the principal's active registration."""
    registration = _active_registration(db, event_id, principal.user_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    registration.status = RegistrationStatus.cancelled
    registration.cancelled_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(registration)
    logger.info("User %s cancelled registration for event %s", principal.user_id, event_id)
    return registration
