from __future__ import annotations

from typing import Iterable

from .entities import BusinessProfile, ObligationTemplate


def applies(template: ObligationTemplate, profile: BusinessProfile) -> bool:
    """True when the profile passes every restriction the template declares.

    An empty or missing constraint set means "no restriction". A profile
    without an industry never matches an industry-restricted template.
    """
    if template.applies_to_vat_status and profile.vat_status not in template.applies_to_vat_status:
        return False
    if (
        template.applies_to_business_types
        and profile.business_type not in template.applies_to_business_types
    ):
        return False
    if template.applies_to_industries:
        if profile.industry is None or profile.industry not in template.applies_to_industries:
            return False
    return True


def filter_applicable(
    templates: Iterable[ObligationTemplate], profile: BusinessProfile
) -> list[ObligationTemplate]:
    return [template for template in templates if template.is_active and applies(template, profile)]
