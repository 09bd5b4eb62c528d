"""Principal provider.

Session and credential handling live in front of this service; requests
reach it with the authenticated user's id in the ``X-User-Id`` header.
Routes depend on ``get_current_user`` and hand the resulting ``User`` to the
service layer explicitly.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.models.user import User


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the request's principal or fail with 401."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
    if not x_user_id:
        raise credentials_exception
    user = db.query(User).filter(User.user_id == x_user_id).first()
    if user is None:
        raise credentials_exception
    return user
