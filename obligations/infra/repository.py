from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from obligations.domain.entities import (
    BusinessProfile,
    GenerationKey,
    ObligationTemplate,
    TaskInstance,
)
from obligations.domain.enums import (
    BusinessType,
    Industry,
    TaskCategory,
    TaskPriority,
    VatStatus,
)

from .db import SessionLocal
from .models import BusinessProfileModel, TaskModel, TaskTemplateModel

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _split(raw: str | None, enum_type: type[E]) -> frozenset[E]:
    if not raw:
        return frozenset()
    return frozenset(enum_type(item.strip()) for item in raw.split(",") if item.strip())


def join_values(values: Iterable[object]) -> str:
    return ",".join(sorted(str(value) for value in values))


def _profile_to_entity(model: BusinessProfileModel) -> BusinessProfile:
    return BusinessProfile(
        user_id=model.user_id,
        business_type=BusinessType(model.business_type),
        vat_status=VatStatus(model.vat_status),
        industry=Industry(model.industry) if model.industry else None,
        municipality=model.municipality,
        employee_count=model.employee_count,
    )


def _template_to_entity(model: TaskTemplateModel) -> ObligationTemplate:
    industries = _split(model.applies_to_industries, Industry)
    return ObligationTemplate(
        id=model.id,
        template_code=model.template_code,
        title=model.title,
        description=model.description,
        category=TaskCategory(model.category),
        default_priority=TaskPriority(model.default_priority),
        recurrence_rule=model.recurrence_rule,
        applies_to_vat_status=_split(model.applies_to_vat_status, VatStatus),
        applies_to_business_types=_split(model.applies_to_business_types, BusinessType),
        applies_to_industries=industries or None,
        lead_time_days=model.lead_time_days,
        reminder_days=tuple(int(day) for day in model.reminder_days.split(",") if day.strip()),
        is_active=model.is_active,
    )


def _task_to_entity(model: TaskModel) -> TaskInstance:
    return TaskInstance(
        id=model.id,
        template_id=model.template_id,
        title=model.title,
        description=model.description,
        category=TaskCategory(model.category),
        priority=TaskPriority(model.priority),
        due_date=model.due_date,
        completed_at=model.completed_at,
    )


def _task_to_model(user_id: str, task: TaskInstance) -> TaskModel:
    return TaskModel(
        user_id=user_id,
        template_id=task.template_id,
        title=task.title,
        description=task.description,
        category=task.category.value,
        priority=task.priority.value,
        due_date=task.due_date,
        completed_at=task.completed_at,
    )


class ComplianceRepository:
    """SQLAlchemy-backed collaborator for the generation and scoring services."""

    def __init__(self, session_factory=SessionLocal) -> None:
        self._session_factory = session_factory

    def get_profile(self, user_id: str) -> Optional[BusinessProfile]:
        with self._session_factory() as session:
            model = session.scalar(
                select(BusinessProfileModel).where(BusinessProfileModel.user_id == user_id)
            )
            return _profile_to_entity(model) if model else None

    def list_active_templates(self) -> list[ObligationTemplate]:
        with self._session_factory() as session:
            stmt = (
                select(TaskTemplateModel)
                .where(TaskTemplateModel.is_active.is_(True))
                .order_by(TaskTemplateModel.id.asc())
            )
            return [_template_to_entity(model) for model in session.scalars(stmt)]

    def list_generation_keys(
        self, user_id: str, template_id: Optional[int] = None
    ) -> set[GenerationKey]:
        with self._session_factory() as session:
            stmt = select(TaskModel.template_id, TaskModel.due_date).where(
                TaskModel.user_id == user_id,
                TaskModel.template_id.is_not(None),
                TaskModel.due_date.is_not(None),
            )
            if template_id is not None:
                stmt = stmt.where(TaskModel.template_id == template_id)
            return {GenerationKey(row.template_id, row.due_date) for row in session.execute(stmt)}

    def insert_tasks(self, user_id: str, tasks: list[TaskInstance]) -> list[TaskInstance]:
        if not tasks:
            return []
        with self._session_factory() as session:
            models = [_task_to_model(user_id, task) for task in tasks]
            session.add_all(models)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.warning(
                    "Batch insert for user %s hit the generation key constraint, retrying row by row",
                    user_id,
                )
            else:
                for model in models:
                    session.refresh(model)
                return [_task_to_entity(model) for model in models]

        return [inserted for task in tasks if (inserted := self._insert_one(user_id, task))]

    def _insert_one(self, user_id: str, task: TaskInstance) -> Optional[TaskInstance]:
        with self._session_factory() as session:
            model = _task_to_model(user_id, task)
            session.add(model)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.warning(
                    "Skipping duplicate task for user %s: %s", user_id, task.generation_key
                )
                return None
            session.refresh(model)
            return _task_to_entity(model)

    def list_tasks(self, user_id: str) -> list[TaskInstance]:
        with self._session_factory() as session:
            stmt = (
                select(TaskModel)
                .where(TaskModel.user_id == user_id)
                .order_by(TaskModel.due_date.is_(None), TaskModel.due_date.asc(), TaskModel.id.asc())
            )
            return [_task_to_entity(model) for model in session.scalars(stmt)]

    def mark_completed(
        self, user_id: str, task_id: int, completed_at: Optional[datetime] = None
    ) -> Optional[TaskInstance]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task or task.user_id != user_id:
                return None
            task.completed_at = completed_at or datetime.utcnow()
            session.commit()
            session.refresh(task)
            return _task_to_entity(task)
