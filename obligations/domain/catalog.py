from __future__ import annotations

from typing import Iterable, Optional

from .applicability import filter_applicable
from .entities import BusinessProfile, ObligationTemplate
from .enums import TaskCategory


def sort_templates(templates: Iterable[ObligationTemplate]) -> list[ObligationTemplate]:
    return sorted(
        templates,
        key=lambda t: (t.category.sort_order, t.default_priority.sort_order, t.title),
    )


def filter_templates(
    templates: Iterable[ObligationTemplate],
    profile: Optional[BusinessProfile] = None,
    category: Optional[TaskCategory] = None,
) -> list[ObligationTemplate]:
    selected = [
        template
        for template in templates
        if template.is_active and (category is None or template.category == category)
    ]
    if profile is not None:
        selected = filter_applicable(selected, profile)
    return sort_templates(selected)


def group_by_category(
    templates: Iterable[ObligationTemplate],
) -> dict[TaskCategory, list[ObligationTemplate]]:
    grouped: dict[TaskCategory, list[ObligationTemplate]] = {}
    for template in templates:
        grouped.setdefault(template.category, []).append(template)
    return grouped
