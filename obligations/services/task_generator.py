from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Collection, Iterable, Optional

from obligations.domain.applicability import filter_applicable
from obligations.domain.entities import (
    BusinessProfile,
    GenerationKey,
    ObligationTemplate,
    TaskInstance,
)
from obligations.domain.errors import InvalidDateRange, TemplateNotFound, UnsupportedRecurrenceRule
from obligations.domain.recurrence import expand

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 365


@dataclass(frozen=True)
class GenerationFailure:
    template_id: int
    template_code: str
    reason: str


@dataclass(frozen=True)
class GenerationResult:
    window_start: date
    window_end: date
    created: list[TaskInstance] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.created)


class TaskGenerator:
    """Turns applicable templates into dated task instances for a window.

    Occurrences whose generation key is already in ``existing_keys`` are
    skipped, so repeated calls over overlapping windows never duplicate a
    task. A template with an unsupported recurrence rule is reported in
    ``GenerationResult.failures`` and the rest of the catalog still
    generates, unless the generator is ``strict``.
    """

    def __init__(
        self,
        today: Callable[[], date] = date.today,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        strict: bool = False,
    ) -> None:
        self._today = today
        self._horizon = timedelta(days=horizon_days)
        self._strict = strict

    def resolve_window(
        self, window_start: Optional[date] = None, window_end: Optional[date] = None
    ) -> tuple[date, date]:
        start = window_start or self._today()
        end = window_end or start + self._horizon
        if start > end:
            raise InvalidDateRange(start, end)
        return start, end

    def generate(
        self,
        profile: BusinessProfile,
        templates: Iterable[ObligationTemplate],
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        existing_keys: Collection[GenerationKey] = frozenset(),
        target_template_id: Optional[int] = None,
    ) -> GenerationResult:
        start, end = self.resolve_window(window_start, window_end)
        selected = self._select_templates(templates, target_template_id)
        candidates = filter_applicable(selected, profile)
        logger.debug(
            "%d of %d template(s) apply to user %s", len(candidates), len(selected), profile.user_id
        )

        seen = set(existing_keys)
        created: list[TaskInstance] = []
        failures: list[GenerationFailure] = []

        for template in candidates:
            try:
                due_dates = expand(template.recurrence_rule, start, end)
            except UnsupportedRecurrenceRule as exc:
                if self._strict:
                    raise UnsupportedRecurrenceRule(exc.rule, exc.reason, template.id) from exc
                logger.warning(
                    "Skipping template %s (%s): %s", template.id, template.template_code, exc.reason
                )
                failures.append(GenerationFailure(template.id, template.template_code, exc.reason))
                continue

            for due_date in due_dates:
                key = GenerationKey(template.id, due_date)
                if key in seen:
                    continue
                seen.add(key)
                created.append(_instantiate(template, due_date))

        created.sort(key=lambda task: (task.due_date, task.template_id))
        logger.info(
            "Generated %d task(s) for user %s between %s and %s (%d template failure(s))",
            len(created),
            profile.user_id,
            start,
            end,
            len(failures),
        )
        return GenerationResult(window_start=start, window_end=end, created=created, failures=failures)

    @staticmethod
    def _select_templates(
        templates: Iterable[ObligationTemplate], target_template_id: Optional[int]
    ) -> list[ObligationTemplate]:
        active = [template for template in templates if template.is_active]
        if target_template_id is None:
            return active
        matching = [template for template in active if template.id == target_template_id]
        if not matching:
            raise TemplateNotFound(target_template_id)
        return matching[:1]


def _instantiate(template: ObligationTemplate, due_date: date) -> TaskInstance:
    return TaskInstance(
        id=None,
        template_id=template.id,
        title=template.title,
        description=template.description,
        category=template.category,
        priority=template.default_priority,
        due_date=due_date,
        completed_at=None,
    )
