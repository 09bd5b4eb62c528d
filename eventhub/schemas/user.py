"""Pydantic schemas for Users."""
from datetime import datetime
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class UserSummary(BaseModel):
    user_id: str
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserOut(UserSummary):
    created_at: datetime
