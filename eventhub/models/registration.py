"""Registration ORM model — a user's seat at an event."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventhub.database import Base


class RegistrationStatus(str, enum.Enum):
    registered = "registered"
    cancelled = "cancelled"


class Registration(Base):
    __tablename__ = "registrations"

    registration_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(
        String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False, index=True,
    )
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    status = Column(SAEnum(RegistrationStatus), nullable=False, default=RegistrationStatus.registered)
    registered_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    event = relationship("Event", back_populates="registrations")
    user = relationship("User")
