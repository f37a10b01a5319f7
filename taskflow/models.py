"""Taskflow database models.

Users, tasks and comments. Enum-like columns are stored as their string
literal so the rows stay readable from any SQL client.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


class TaskStatus(str, enum.Enum):
    NEW = "New"
    PROCESSING = "Processing"
    DONE = "Done"
    ARCHIVED = "Archived"


class Priority(str, enum.Enum):
    NORMAL = "Normal"
    FAST = "Fast"
    URGENT = "Urgent"


class Role(str, enum.Enum):
    USER = "user"
    MAINTAINER = "maintainer"


def _generate_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.utcnow()


def _iso(value: Any) -> Any:
    return value.isoformat() if value is not None else None


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_generate_id)
    email = Column(String(320), nullable=False, unique=True, index=True)
    full_name = Column(String(256), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    role = Column(String(32), default=Role.USER.value, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email.split("@")[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "role": self.role,
            "created_at": _iso(self.created_at),
        }


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_generate_id)
    title = Column(String(512), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), default=TaskStatus.NEW.value, nullable=False, index=True)
    priority = Column(String(32), default=Priority.NORMAL.value, nullable=False)
    due_date = Column(Date, nullable=True)
    created_date = Column(DateTime, default=_utcnow, nullable=False, index=True)
    assignee_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    assignee = relationship("User", lazy="joined")
    comments = relationship(
        "Comment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Comment.created_date",
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "status": self.status,
            "priority": self.priority,
            "due_date": _iso(self.due_date),
            "created_date": _iso(self.created_date),
            "assignee": self.assignee.to_dict() if self.assignee else None,
        }


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=_generate_id)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    content = Column(Text, nullable=False)
    created_date = Column(DateTime, default=_utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")
    user = relationship("User", lazy="joined")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "content": self.content,
            "created_date": _iso(self.created_date),
            "user": self.user.to_dict() if self.user else None,
        }
