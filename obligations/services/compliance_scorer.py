from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

from obligations.domain.entities import (
    CategoryBreakdown,
    ComplianceReport,
    ComplianceScore,
    RecentActivity,
    Streak,
    TaskInstance,
    TaskStatistics,
)
from obligations.domain.enums import TaskCategory

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 365
DEFAULT_RECENT_DAYS = 30
UPCOMING_WEEK_DAYS = 7
UPCOMING_MONTH_DAYS = 30

# Inclusive lower bounds, highest first.
GRADE_TABLE: list[tuple[float, str, str]] = [
    (97, "A+", "Excellent! Perfect compliance record."),
    (93, "A", "Excellent compliance. Keep up the great work!"),
    (90, "A-", "Great compliance. Very few issues."),
    (87, "B+", "Good compliance with minor delays."),
    (83, "B", "Good compliance. Some room for improvement."),
    (80, "B-", "Satisfactory compliance with occasional delays."),
    (77, "C+", "Fair compliance. Several tasks need attention."),
    (73, "C", "Fair compliance. Improvement needed."),
    (70, "C-", "Below average compliance. Action required."),
    (60, "D", "Poor compliance. Immediate attention needed."),
]
FAILING_GRADE = ("F", "Critical compliance issues. Urgent action required!")


def grade_for(score: float) -> tuple[str, str]:
    for lower_bound, grade, description in GRADE_TABLE:
        if score >= lower_bound:
            return grade, description
    return FAILING_GRADE


class ComplianceScorer:
    """Scores a user's task history into a read-only ``ComplianceReport``.

    Only tasks due within the trailing scoring window participate in the
    score, windowed statistics and category breakdown. Lifetime statistics,
    recent activity and streaks look at the whole history.
    """

    def __init__(
        self,
        today: Callable[[], date] = date.today,
        window_days: int = DEFAULT_WINDOW_DAYS,
        recent_days: int = DEFAULT_RECENT_DAYS,
    ) -> None:
        self._today = today
        self._window = timedelta(days=window_days)
        self._recent = timedelta(days=recent_days)

    def score(self, tasks: Iterable[TaskInstance], as_of: Optional[date] = None) -> ComplianceReport:
        as_of = as_of or self._today()
        history = list(tasks)
        cutoff = as_of - self._window
        in_window = [task for task in history if task.due_date is None or task.due_date >= cutoff]

        statistics = compute_statistics(in_window, as_of)
        report = ComplianceReport(
            as_of=as_of,
            score=self._score(in_window),
            statistics=statistics,
            lifetime_statistics=compute_statistics(history, as_of),
            category_breakdown=compute_category_breakdown(in_window, as_of),
            recent_activity=self._recent_activity(history, as_of),
            streak=compute_streak(history, as_of),
        )
        logger.debug(
            "Scored %d task(s) (%d in window) as of %s: %.1f %s",
            len(history),
            len(in_window),
            as_of,
            report.score.value,
            report.score.grade,
        )
        return report

    @staticmethod
    def _score(in_window: list[TaskInstance]) -> ComplianceScore:
        if not in_window:
            value = 100.0
        else:
            completed = [task for task in in_window if task.is_completed]
            on_time = sum(1 for task in completed if task.completed_on_time)
            value = _rate(on_time, len(completed), empty=100.0)
        value = min(100.0, max(0.0, value))
        grade, description = grade_for(value)
        return ComplianceScore(value=value, grade=grade, description=description)

    def _recent_activity(self, tasks: list[TaskInstance], as_of: date) -> RecentActivity:
        recent_from = as_of - self._recent
        week_end = as_of + timedelta(days=UPCOMING_WEEK_DAYS)
        month_end = as_of + timedelta(days=UPCOMING_MONTH_DAYS)

        recent_completions = sum(
            1
            for task in tasks
            if task.completed_at is not None and recent_from <= task.completed_at.date() <= as_of
        )
        pending_due = [
            task.due_date for task in tasks if task.completed_at is None and task.due_date is not None
        ]
        return RecentActivity(
            recent_completions=recent_completions,
            upcoming_this_week=sum(1 for due in pending_due if as_of <= due <= week_end),
            upcoming_this_month=sum(1 for due in pending_due if as_of <= due <= month_end),
        )


def compute_statistics(tasks: list[TaskInstance], as_of: date) -> TaskStatistics:
    total = len(tasks)
    completed = [task for task in tasks if task.is_completed]
    on_time = sum(1 for task in completed if task.completed_on_time)
    return TaskStatistics(
        total=total,
        completed=len(completed),
        pending=total - len(completed),
        overdue=sum(1 for task in tasks if task.is_overdue(as_of)),
        completed_on_time=on_time,
        completed_late=len(completed) - on_time,
        completion_rate=round(_rate(len(completed), total, empty=0.0), 2),
        on_time_rate=round(_rate(on_time, len(completed), empty=100.0), 2),
    )


def compute_category_breakdown(tasks: list[TaskInstance], as_of: date) -> list[CategoryBreakdown]:
    groups: dict[TaskCategory, list[TaskInstance]] = {}
    for task in tasks:
        groups.setdefault(task.category, []).append(task)

    rows = []
    for category, members in groups.items():
        completed = sum(1 for task in members if task.is_completed)
        rows.append(
            CategoryBreakdown(
                category=category,
                total=len(members),
                completed=completed,
                overdue=sum(1 for task in members if task.is_overdue(as_of)),
                completion_rate=round(_rate(completed, len(members), empty=0.0), 2),
            )
        )
    rows.sort(key=lambda row: (-row.total, row.category.sort_order))
    return rows


def compute_streak(tasks: list[TaskInstance], as_of: date) -> Streak:
    """Count consecutive days, ending at ``as_of``, with nothing overdue.

    A task is overdue on day ``d`` when it was due before ``d`` and had not
    been completed by the end of ``d``. The history starts at the earliest
    due date; days without any due task never break a run.
    """
    dated = [task for task in tasks if task.due_date is not None]
    if not dated:
        return Streak()

    start = min(min(task.due_date for task in dated), as_of)
    span = (as_of - start).days + 1
    # +1 on the first overdue day, -1 on the day after the last one.
    delta = [0] * (span + 1)
    for task in dated:
        first = task.due_date + timedelta(days=1)
        last = as_of if task.completed_at is None else task.completed_at.date() - timedelta(days=1)
        last = min(last, as_of)
        if first > last:
            continue
        delta[(first - start).days] += 1
        delta[(last - start).days + 1] -= 1

    overdue_now = 0
    run = longest = 0
    for offset in range(span):
        overdue_now += delta[offset]
        if overdue_now:
            run = 0
        else:
            run += 1
            longest = max(longest, run)
    return Streak(current=run, longest=longest)


def _rate(part: int, whole: int, empty: float) -> float:
    if whole == 0:
        return empty
    return part / whole * 100
