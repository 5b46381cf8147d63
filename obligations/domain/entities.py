from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import NamedTuple, Optional

from .enums import BusinessType, Industry, TaskCategory, TaskPriority, VatStatus


class GenerationKey(NamedTuple):
    template_id: int
    due_date: date


@dataclass(frozen=True)
class BusinessProfile:
    user_id: str
    business_type: BusinessType
    vat_status: VatStatus
    industry: Optional[Industry] = None
    municipality: str | None = None
    employee_count: int = 0


@dataclass(frozen=True)
class ObligationTemplate:
    id: int
    template_code: str
    title: str
    description: str
    category: TaskCategory
    default_priority: TaskPriority
    recurrence_rule: str
    applies_to_vat_status: frozenset[VatStatus] = frozenset()
    applies_to_business_types: frozenset[BusinessType] = frozenset()
    applies_to_industries: Optional[frozenset[Industry]] = None
    lead_time_days: int = 0
    reminder_days: tuple[int, ...] = ()
    is_active: bool = True


@dataclass(frozen=True)
class TaskInstance:
    id: int | None
    template_id: int | None
    title: str
    description: str
    category: TaskCategory
    priority: TaskPriority
    due_date: Optional[date]
    completed_at: Optional[datetime] = None

    @property
    def generation_key(self) -> GenerationKey | None:
        if self.template_id is None or self.due_date is None:
            return None
        return GenerationKey(self.template_id, self.due_date)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def completed_on_time(self) -> bool:
        if self.completed_at is None:
            return False
        if self.due_date is None:
            return True
        return self.completed_at.date() <= self.due_date

    def is_overdue(self, as_of: date) -> bool:
        return self.completed_at is None and self.due_date is not None and self.due_date < as_of


@dataclass(frozen=True)
class TaskStatistics:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    completed_on_time: int = 0
    completed_late: int = 0
    completion_rate: float = 0.0
    on_time_rate: float = 100.0


@dataclass(frozen=True)
class ComplianceScore:
    value: float
    grade: str
    description: str

    @property
    def display(self) -> float:
        return round(self.value, 1)


@dataclass(frozen=True)
class CategoryBreakdown:
    category: TaskCategory
    total: int
    completed: int
    overdue: int
    completion_rate: float


@dataclass(frozen=True)
class RecentActivity:
    recent_completions: int = 0
    upcoming_this_week: int = 0
    upcoming_this_month: int = 0


@dataclass(frozen=True)
class Streak:
    current: int = 0
    longest: int = 0


@dataclass(frozen=True)
class ComplianceReport:
    as_of: date
    score: ComplianceScore
    statistics: TaskStatistics
    lifetime_statistics: TaskStatistics
    category_breakdown: list[CategoryBreakdown] = field(default_factory=list)
    recent_activity: RecentActivity = field(default_factory=RecentActivity)
    streak: Streak = field(default_factory=Streak)
