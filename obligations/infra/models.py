from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from .db import Base


def utcnow() -> datetime:
    return datetime.utcnow()


class BusinessProfileModel(Base):
    __tablename__ = "business_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, unique=True)
    business_type = Column(String(30), nullable=False)
    vat_status = Column(String(20), nullable=False)
    industry = Column(String(40), nullable=True)
    municipality = Column(String(120), nullable=True)
    employee_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TaskTemplateModel(Base):
    __tablename__ = "task_templates"

    id = Column(Integer, primary_key=True)
    template_code = Column(String(60), nullable=False, unique=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(30), nullable=False, index=True)
    default_priority = Column(String(10), nullable=False, default="medium")
    recurrence_rule = Column(String(120), nullable=False)
    lead_time_days = Column(Integer, nullable=False, default=0)
    reminder_days = Column(Text, nullable=False, default="")
    applies_to_vat_status = Column(Text, nullable=False, default="")
    applies_to_business_types = Column(Text, nullable=False, default="")
    # NULL means every industry; an empty string is treated the same way.
    applies_to_industries = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TaskModel(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        UniqueConstraint("user_id", "template_id", "due_date", name="uq_tasks_generation_key"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    template_id = Column(
        Integer, ForeignKey("task_templates.id", ondelete="SET NULL"), nullable=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(30), nullable=False, default="other")
    priority = Column(String(10), nullable=False, default="medium")
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
