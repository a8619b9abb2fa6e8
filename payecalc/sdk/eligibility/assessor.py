"""Eligibility assessment: run every relief rule and summarize."""

import logging
from datetime import date
from typing import Iterable, List, Optional

from ..money import ZERO, round_money
from ..schemas import (
    AppliedReliefs,
    ComputationWarning,
    EligibilityResult,
    EligibilitySummary,
    EmployeeTaxProfile,
    Recommendation,
)
from ..taxes.schemas import TaxConfig
from . import rules

logger = logging.getLogger(__name__)


def assess_eligibility(
    profile: EmployeeTaxProfile,
    config: TaxConfig,
    as_of: Optional[date] = None,
    profile_warnings: Iterable[ComputationWarning] = (),
) -> EligibilityResult:
    """Evaluate reliefs, exemptions and optimizations for one employee.

    Args:
        profile: Employee snapshot
        config: Validated tax configuration
        as_of: Date ages are computed on (default: today). Pass it
            explicitly for reproducible results.
        profile_warnings: Warnings recorded while reading the profile
            (parse_profile). They lead the result's warnings and count
            toward the compliance status.

    Returns:
        A new EligibilityResult. Nothing is cached between calls.
    """
    if as_of is None:
        as_of = date.today()
    age = profile.age_on(as_of)

    rent = rules.rent_relief(profile, config)
    nhf = rules.nhf_exemption(profile, config, age)
    pension = rules.voluntary_pension(profile, config)
    disability = rules.disability_relief(profile, config)
    life = rules.life_assurance_relief(profile, config)
    aged = rules.age_relief(profile, config, age)

    outcomes = (rent, nhf, pension, disability, life, aged)
    recommendations: List[Recommendation] = [o.recommendation for o in outcomes if o.recommendation]
    warnings: List[ComputationWarning] = list(profile_warnings)
    warnings.extend(w for o in outcomes for w in o.warnings)

    savings = sum((r.estimated_annual_benefit for r in recommendations), ZERO)
    summary = EligibilitySummary(
        total_exemptions=sum(1 for r in recommendations if r.category == "exemption"),
        total_optimizations=sum(1 for r in recommendations if r.category == "optimization"),
        total_warnings=len(warnings),
        estimated_annual_savings=round_money(savings),
        compliance_status="COMPLIANT" if not warnings else "NEEDS_REVIEW",
    )

    logger.debug(
        f"eligibility {profile.employee_id or profile.name or '?'}: "
        f"{[r.type for r in recommendations]} savings={summary.estimated_annual_savings} "
        f"warnings={len(warnings)}"
    )

    return EligibilityResult(
        summary=summary,
        recommendations=tuple(recommendations),
        warnings=tuple(warnings),
        applied_reliefs=AppliedReliefs(
            rent=rent.relief,
            disability=disability.relief,
            age=aged.relief,
            life_assurance=life.relief,
        ),
    )
