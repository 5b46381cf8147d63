from __future__ import annotations

from datetime import date


class ComplianceError(Exception):
    """Base class for errors raised by the obligation engine."""


class InvalidDateRange(ComplianceError):
    def __init__(self, start: date, end: date) -> None:
        super().__init__(f"window start {start.isoformat()} is after window end {end.isoformat()}")
        self.start = start
        self.end = end


class TemplateNotFound(ComplianceError):
    def __init__(self, template_id: int) -> None:
        super().__init__(f"template {template_id} not found or inactive")
        self.template_id = template_id


class ProfileNotFound(ComplianceError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"no business profile for user {user_id}")
        self.user_id = user_id


class UnsupportedRecurrenceRule(ComplianceError):
    def __init__(self, rule: str, reason: str, template_id: int | None = None) -> None:
        super().__init__(f"unsupported recurrence rule {rule!r}: {reason}")
        self.rule = rule
        self.reason = reason
        self.template_id = template_id
