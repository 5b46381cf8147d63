from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Optional

from obligations.domain.catalog import filter_templates
from obligations.domain.entities import ComplianceReport, ObligationTemplate
from obligations.domain.enums import TaskCategory
from obligations.domain.errors import ProfileNotFound
from obligations.infra.repository import ComplianceRepository

from .compliance_scorer import ComplianceScorer
from .task_generator import GenerationResult, TaskGenerator


@dataclass(frozen=True)
class TemplateListing:
    templates: list[ObligationTemplate]
    personalized: bool = False


class ComplianceService:
    def __init__(
        self,
        repo: ComplianceRepository,
        generator: TaskGenerator | None = None,
        scorer: ComplianceScorer | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._repo = repo
        self._generator = generator or TaskGenerator(today=today)
        self._scorer = scorer or ComplianceScorer(today=today)

    def generate_tasks(
        self,
        user_id: str,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        template_id: Optional[int] = None,
    ) -> GenerationResult:
        # Reject a bad window before touching storage.
        start, end = self._generator.resolve_window(window_start, window_end)
        profile = self._repo.get_profile(user_id)
        if profile is None:
            raise ProfileNotFound(user_id)

        result = self._generator.generate(
            profile,
            self._repo.list_active_templates(),
            window_start=start,
            window_end=end,
            existing_keys=self._repo.list_generation_keys(user_id, template_id),
            target_template_id=template_id,
        )
        if not result.created:
            return result
        return replace(result, created=self._repo.insert_tasks(user_id, result.created))

    def get_compliance_report(self, user_id: str, as_of: Optional[date] = None) -> ComplianceReport:
        return self._scorer.score(self._repo.list_tasks(user_id), as_of=as_of)

    def list_templates(
        self,
        user_id: Optional[str] = None,
        category: Optional[TaskCategory] = None,
        personalized: bool = False,
    ) -> TemplateListing:
        profile = None
        if personalized and user_id is not None:
            profile = self._repo.get_profile(user_id)
        templates = filter_templates(self._repo.list_active_templates(), profile=profile, category=category)
        return TemplateListing(templates=templates, personalized=profile is not None)
