from __future__ import annotations

from enum import StrEnum


class BusinessType(StrEnum):
    SOLE_PROPRIETOR = "sole_proprietor"
    PARTNERSHIP = "partnership"
    COMPANY = "company"
    NONPROFIT = "nonprofit"
    COOPERATIVE = "cooperative"


class VatStatus(StrEnum):
    EXEMPT = "exempt"
    REGISTERED = "registered"
    PENDING = "pending"


class Industry(StrEnum):
    RETAIL = "retail"
    FOOD_SERVICE = "food_service"
    CONSTRUCTION = "construction"
    TECHNOLOGY = "technology"
    CONSULTING = "consulting"
    HEALTHCARE = "healthcare"
    MANUFACTURING = "manufacturing"
    TRANSPORTATION = "transportation"
    OTHER = "other"


class TaskCategory(StrEnum):
    VAT = "vat"
    INCOME_TAX = "income_tax"
    SOCIAL_SECURITY = "social_security"
    LICENSE = "license"
    FINANCIAL_REPORTS = "financial_reports"
    LABOR_LAW = "labor_law"
    MUNICIPALITY = "municipality"
    INSURANCE = "insurance"
    OTHER = "other"

    @property
    def sort_order(self) -> int:
        return _CATEGORY_ORDER.index(self)


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def sort_order(self) -> int:
        return _PRIORITY_ORDER.index(self)


class Frequency(StrEnum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


_CATEGORY_ORDER = list(TaskCategory)
_PRIORITY_ORDER = [
    TaskPriority.URGENT,
    TaskPriority.HIGH,
    TaskPriority.MEDIUM,
    TaskPriority.LOW,
]
