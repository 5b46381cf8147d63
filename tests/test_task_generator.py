from __future__ import annotations

from datetime import date

import pytest

from obligations.domain.entities import BusinessProfile, GenerationKey, ObligationTemplate
from obligations.domain.enums import BusinessType, TaskCategory, TaskPriority, VatStatus
from obligations.domain.errors import InvalidDateRange, TemplateNotFound, UnsupportedRecurrenceRule
from obligations.services.task_generator import TaskGenerator

TODAY = date(2026, 1, 10)
PROFILE = BusinessProfile(
    user_id="user-1",
    business_type=BusinessType.SOLE_PROPRIETOR,
    vat_status=VatStatus.REGISTERED,
)


def _template(template_id: int = 1, **overrides) -> ObligationTemplate:
    data = {
        "id": template_id,
        "template_code": f"T{template_id}",
        "title": f"Template {template_id}",
        "description": "Report and pay",
        "category": TaskCategory.VAT,
        "default_priority": TaskPriority.HIGH,
        "recurrence_rule": "FREQ=MONTHLY;BYMONTHDAY=15",
    }
    data.update(overrides)
    return ObligationTemplate(**data)


@pytest.fixture
def generator() -> TaskGenerator:
    return TaskGenerator(today=lambda: TODAY)


def test_generates_one_task_per_occurrence(generator: TaskGenerator) -> None:
    result = generator.generate(PROFILE, [_template()], date(2026, 1, 1), date(2026, 3, 31))

    assert result.count == 3
    assert [task.due_date for task in result.created] == [
        date(2026, 1, 15),
        date(2026, 2, 15),
        date(2026, 3, 15),
    ]
    task = result.created[0]
    assert task.id is None
    assert task.template_id == 1
    assert task.title == "Template 1"
    assert task.description == "Report and pay"
    assert task.category == TaskCategory.VAT
    assert task.priority == TaskPriority.HIGH
    assert task.completed_at is None


def test_second_run_with_updated_keys_creates_nothing(generator: TaskGenerator) -> None:
    templates = [_template(1), _template(2, recurrence_rule="FREQ=YEARLY;BYMONTH=4;BYMONTHDAY=30")]
    first = generator.generate(PROFILE, templates, date(2026, 1, 1), date(2026, 12, 31))
    keys = {task.generation_key for task in first.created}

    second = generator.generate(
        PROFILE, templates, date(2026, 1, 1), date(2026, 12, 31), existing_keys=keys
    )

    assert first.count == 13
    assert second.created == []


def test_overlapping_window_only_adds_new_occurrences(generator: TaskGenerator) -> None:
    first = generator.generate(PROFILE, [_template()], date(2026, 1, 1), date(2026, 3, 31))
    keys = {task.generation_key for task in first.created}

    second = generator.generate(
        PROFILE, [_template()], date(2026, 2, 1), date(2026, 4, 30), existing_keys=keys
    )

    assert [task.due_date for task in second.created] == [date(2026, 4, 15)]


def test_vat_restricted_template_never_generates_for_exempt_business(generator: TaskGenerator) -> None:
    template = _template(applies_to_vat_status=frozenset({VatStatus.REGISTERED}))
    exempt = BusinessProfile(
        user_id="user-2",
        business_type=BusinessType.SOLE_PROPRIETOR,
        vat_status=VatStatus.EXEMPT,
    )

    result = generator.generate(exempt, [template], date(2026, 1, 1), date(2026, 12, 31))

    assert result.created == []
    assert result.failures == []


def test_inactive_templates_are_ignored(generator: TaskGenerator) -> None:
    result = generator.generate(
        PROFILE, [_template(is_active=False)], date(2026, 1, 1), date(2026, 12, 31)
    )

    assert result.created == []


def test_target_template_restricts_generation(generator: TaskGenerator) -> None:
    templates = [_template(1), _template(2, category=TaskCategory.LICENSE)]

    result = generator.generate(
        PROFILE, templates, date(2026, 1, 1), date(2026, 1, 31), target_template_id=2
    )

    assert [task.template_id for task in result.created] == [2]


@pytest.mark.parametrize("templates", [[_template(1)], [_template(1), _template(2, is_active=False)]])
def test_unknown_or_inactive_target_template_is_not_found(
    generator: TaskGenerator, templates: list[ObligationTemplate]
) -> None:
    with pytest.raises(TemplateNotFound) as excinfo:
        generator.generate(PROFILE, templates, date(2026, 1, 1), date(2026, 1, 31), target_template_id=2)

    assert excinfo.value.template_id == 2


def test_target_template_that_does_not_apply_creates_nothing(generator: TaskGenerator) -> None:
    templates = [_template(1), _template(2, applies_to_vat_status=frozenset({VatStatus.EXEMPT}))]

    result = generator.generate(
        PROFILE, templates, date(2026, 1, 1), date(2026, 12, 31), target_template_id=2
    )

    assert result.created == []
    assert result.failures == []


@pytest.mark.parametrize("templates", [[], [_template()]])
def test_reversed_window_is_rejected_regardless_of_catalog(
    generator: TaskGenerator, templates: list[ObligationTemplate]
) -> None:
    with pytest.raises(InvalidDateRange):
        generator.generate(PROFILE, templates, date(2026, 3, 1), date(2026, 1, 1))


def test_unsupported_rule_is_reported_and_others_still_generate(generator: TaskGenerator) -> None:
    templates = [
        _template(1, recurrence_rule="FREQ=WEEKLY;BYDAY=MO", template_code="WEEKLY_BAD"),
        _template(2),
    ]

    result = generator.generate(PROFILE, templates, date(2026, 1, 1), date(2026, 2, 28))

    assert [task.template_id for task in result.created] == [2, 2]
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.template_id == 1
    assert failure.template_code == "WEEKLY_BAD"
    assert "BYDAY" in failure.reason


def test_strict_generator_aborts_on_unsupported_rule() -> None:
    generator = TaskGenerator(today=lambda: TODAY, strict=True)
    templates = [_template(1, recurrence_rule="FREQ=DAILY"), _template(2)]

    with pytest.raises(UnsupportedRecurrenceRule) as excinfo:
        generator.generate(PROFILE, templates, date(2026, 1, 1), date(2026, 2, 28))

    assert excinfo.value.template_id == 1


def test_default_window_covers_one_year_from_today(generator: TaskGenerator) -> None:
    result = generator.generate(PROFILE, [_template(recurrence_rule="FREQ=MONTHLY;BYMONTHDAY=10")])

    assert result.window_start == TODAY
    assert result.window_end == date(2027, 1, 10)
    assert result.count == 13
    assert result.created[0].due_date == TODAY


def test_only_window_end_given_starts_today(generator: TaskGenerator) -> None:
    assert generator.resolve_window(window_end=date(2026, 2, 1)) == (TODAY, date(2026, 2, 1))


def test_created_tasks_are_ordered_by_due_date(generator: TaskGenerator) -> None:
    templates = [_template(1, recurrence_rule="FREQ=MONTHLY;BYMONTHDAY=20"), _template(2)]

    result = generator.generate(PROFILE, templates, date(2026, 1, 1), date(2026, 2, 28))

    assert [(t.due_date.day, t.template_id) for t in result.created] == [(15, 2), (20, 1), (15, 2), (20, 1)]


def test_duplicate_catalog_entries_do_not_duplicate_tasks(generator: TaskGenerator) -> None:
    result = generator.generate(
        PROFILE, [_template(1), _template(1)], date(2026, 1, 1), date(2026, 1, 31)
    )

    assert [task.generation_key for task in result.created] == [GenerationKey(1, date(2026, 1, 15))]
