"""Display helpers shared by the pages."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Union

import pandas as pd

from .board.models import Assignee

DateLike = Union[date, datetime, str, None]


def _to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.to_datetime(value).date()


def format_due_date(value: DateLike) -> str:
    """``Mar 5`` style label for a card, or ``No due date``."""
    due = _to_date(value)
    if due is None:
        return "No due date"
    return f"{due.strftime('%b')} {due.day}"


def format_long_date(value: DateLike) -> str:
    due = _to_date(value)
    if due is None:
        return "No due date"
    return f"{due.strftime('%B')} {due.day}, {due.year}"


def is_overdue(value: DateLike, today: Optional[date] = None) -> bool:
    due = _to_date(value)
    if due is None:
        return False
    return due < (today or date.today())


def assignee_name(assignees: Sequence[Assignee]) -> str:
    if not assignees:
        return "Unassigned"
    if len(assignees) > 1:
        return "Multiple"
    return assignees[0].display_name


def assignee_initials(assignees: Sequence[Assignee]) -> str:
    name = assignee_name(assignees)
    if name in ("Unassigned", "Multiple"):
        return "U"
    return "".join(part[0] for part in name.split() if part).upper() or "U"


def format_last_updated(value: DateLike, now: Optional[datetime] = None) -> str:
    """Relative age of a timestamp: ``Just now``, ``5 hours ago``, ``3 days ago``.

    A week or older falls back to the plain date.
    """
    if value is None or value == "":
        return ""
    stamp = value if isinstance(value, datetime) else pd.to_datetime(value).to_pydatetime()
    now = now or datetime.utcnow()
    hours = int((now - stamp).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours} hours ago"
    days = hours // 24
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    return stamp.date().isoformat()
