"""Pydantic schemas for Registrations."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from eventhub.models.registration import RegistrationStatus
from eventhub.schemas.user import UserSummary


class RegistrationOut(BaseModel):
    registration_id: str
    event_id: str
    user_id: str
    status: RegistrationStatus
    registered_at: datetime
    cancelled_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}
