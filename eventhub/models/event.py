"""Event ORM model."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import (
    CheckConstraint, Column, String, Text, DateTime, Integer, Float, Boolean, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from eventhub.database import Base


class EventStatus(str, enum.Enum):
    draft = "draft"
    active = "active"
    inactive = "inactive"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_events_capacity_positive"),
        CheckConstraint("is_paid OR price IS NULL", name="ck_events_price_only_when_paid"),
    )

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=False)
    city = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    capacity = Column(Integer, nullable=False)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.draft)
    is_paid = Column(Boolean, nullable=False, default=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    image = Column(String(255), nullable=True)
    # Python-side defaults keep sub-second ordering for the dashboard.
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")
