"""eligibility - Relief, exemption and optimization assessment.

Scope:
- One pure rule per relief category (rules.py)
- Combining rule outcomes into an EligibilityResult (assessor.py)

Constraints:
- Reads an EmployeeTaxProfile and TaxConfig, returns a new result
- Caps exceeded and missing evidence become warnings, never exceptions
- Benefits are numeric; display text is derived from them, never parsed

Usage:
    from payecalc.sdk.eligibility import assess_eligibility

    result = assess_eligibility(profile, config, as_of=date(2026, 1, 31))
    result.summary.estimated_annual_savings
"""

from .assessor import assess_eligibility
from .rules import (
    NHF_EXEMPT_AGE,
    RuleOutcome,
    age_relief,
    disability_relief,
    life_assurance_relief,
    nhf_exemption,
    rent_relief,
    voluntary_pension,
)

__all__ = [
    # Assessment
    "assess_eligibility",
    # Rules
    "RuleOutcome",
    "rent_relief",
    "nhf_exemption",
    "voluntary_pension",
    "disability_relief",
    "life_assurance_relief",
    "age_relief",
    "NHF_EXEMPT_AGE",
]
