"""Attendee registration routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.database import get_db
from eventhub.models.user import User
from eventhub.schemas.registration import RegistrationOut
from eventhub.services import registration_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/registrations", response_model=RegistrationOut, status_code=status.HTTP_201_CREATED)
def register_for_event(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Register the current user for an active event."""
    return registration_service.register(db, event_id, principal)


@router.delete("/{event_id}/registrations/me", response_model=RegistrationOut)
def cancel_registration(event_id: str, principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Cancel the current user's registration."""
    return registration_service.cancel(db, event_id, principal)
