"""Organizer dashboard route."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.auth import get_current_user
from eventhub.database import get_db
from eventhub.models.event import EventStatus
from eventhub.models.user import User
from eventhub.schemas.event import DashboardOut, EventWithRegistrationsOut
from eventhub.services import event_service

router = APIRouter()


@router.get("/", response_model=DashboardOut)
def dashboard(principal: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The principal's events, newest first, with registration totals."""
    aggregates = event_service.dashboard_events(db, principal)
    return DashboardOut(
        events=[EventWithRegistrationsOut.from_aggregate(a) for a in aggregates],
        total_events=len(aggregates),
        active_events=sum(1 for a in aggregates if a.event.status == EventStatus.active),
        total_registrations=sum(a.registered_count for a in aggregates),
    )
