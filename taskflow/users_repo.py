"""User repository functions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select

from .db import get_session
from .errors import NotFoundError, ValidationError
from .models import Role, User

logger = logging.getLogger(__name__)


def get_all_users() -> List[Dict[str, Any]]:
    with get_session() as s:
        rows = s.execute(select(User).order_by(User.created_at.desc())).scalars().all()
        return [u.to_dict() for u in rows]


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    with get_session() as s:
        user = s.get(User, user_id)
        return user.to_dict() if user else None


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    email = (email or "").strip().lower()
    if not email:
        return None
    with get_session() as s:
        user = s.execute(select(User).where(User.email == email)).scalars().first()
        return user.to_dict() if user else None


def invite_user(email: str, full_name: Optional[str] = None) -> Dict[str, Any]:
    """Create a ``user``-role account for an email address.

    Inviting an address that already has an account returns that account.
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("Email is required")

    with get_session() as s:
        existing = s.execute(select(User).where(User.email == email)).scalars().first()
        if existing is not None:
            return existing.to_dict()
        user = User(email=email, full_name=(full_name or "").strip() or None, role=Role.USER.value)
        s.add(user)
        s.commit()
        logger.info("Invited user %s", email)
        return user.to_dict()


def update_user_role(user_id: str, role: Union[Role, str]) -> None:
    try:
        role = Role(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role!r}") from None

    with get_session() as s:
        user = s.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        user.role = role.value
        s.commit()
    logger.info("User %s role -> %s", user_id, role.value)


def check_user_role(user_id: Optional[str]) -> Optional[Role]:
    """Role of a user, or None when there is no such user."""
    if not user_id:
        return None
    with get_session() as s:
        user = s.get(User, user_id)
        if user is None:
            return None
        try:
            return Role(user.role)
        except ValueError:
            return None
