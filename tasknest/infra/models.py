from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Integer, String, Text

from .db import Base


def now() -> datetime:
    return datetime.now()


def new_id() -> str:
    return uuid.uuid4().hex


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    is_temp = Column(Boolean, nullable=False, default=True)
    tag_id = Column(String(64), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    est_time = Column(Integer, nullable=True)
    energy = Column(String(10), nullable=True)
    deadline = Column(Date, nullable=True)
    note = Column(Text, nullable=True)
    subtasks = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=now, index=True)
    completed_at = Column(DateTime, nullable=True)
    reflection = Column(Text, nullable=True)
    actual_time = Column(Integer, nullable=True)


class TagModel(Base):
    __tablename__ = "tags"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    color = Column(String(20), nullable=False, default="stone")
    created_at = Column(DateTime, nullable=False, default=now, index=True)


class QuoteModel(Base):
    __tablename__ = "quotes"

    id = Column(String(32), primary_key=True, default=new_id)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now, index=True)
