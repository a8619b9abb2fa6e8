"""Relief and exemption rules.

Each rule looks at one aspect of an employee profile and returns a
RuleOutcome: at most one recommendation, any warnings, and the annual
relief it contributes to taxable income. Rules are independent and pure;
the assessor runs them in a fixed order and combines the outcomes.

Amounts on profiles are monthly except annual_rent and
life_assurance_premium. Every amount returned here is annual.
"""

import logging
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple

from ..money import ZERO, annualize, format_naira, format_percent, round_money
from ..schemas import (
    NHF_EXEMPTION_REASONS,
    ComputationWarning,
    EmployeeTaxProfile,
    Recommendation,
)
from ..taxes.schemas import TaxConfig

logger = logging.getLogger(__name__)

NHF_EXEMPT_AGE = 60

# Evidence to keep on file per NHF exemption reason
NHF_DOCUMENTATION = {
    "age_60_plus": ("Birth certificate or international passport",),
    "non_nigerian": ("Passport and residence permit",),
    "casual_worker": ("Engagement letter showing service under 6 months",),
    "contract_staff": ("Signed contract of engagement",),
    "other": ("Written justification approved by HR",),
}


class RuleOutcome(NamedTuple):
    recommendation: Optional[Recommendation] = None
    warnings: Tuple[ComputationWarning, ...] = ()
    relief: Decimal = ZERO  # annual


NOTHING = RuleOutcome()


def _warning(code: str, message: str, field: Optional[str] = None) -> ComputationWarning:
    logger.warning(f"{code}: {message}")
    return ComputationWarning(code=code, message=message, field=field)


# =============================================================================
# Rent
# =============================================================================


def rent_relief(profile: EmployeeTaxProfile, config: TaxConfig) -> RuleOutcome:
    """Rent relief for renting employees: min(rent x rate, cap)."""
    if profile.housing_situation != "renting":
        return NOTHING

    if profile.annual_rent <= 0:
        return RuleOutcome(warnings=(_warning(
            "RENT_NOT_DECLARED",
            "Employee is renting but no annual rent is declared; rent relief not applied",
            "annualRent",
        ),))

    reliefs = config.reliefs
    raw = profile.annual_rent * reliefs.rent_relief
    relief = round_money(min(raw, reliefs.rent_relief_cap))

    warnings = ()
    if raw > reliefs.rent_relief_cap:
        warnings = (_warning(
            "RENT_RELIEF_CAPPED",
            f"Rent relief of {format_naira(raw)} exceeds the cap; "
            f"limited to {format_naira(reliefs.rent_relief_cap)}",
            "annualRent",
        ),)

    if profile.has_tenancy_agreement:
        action = "Rent relief applied; keep tenancy agreement on file"
    else:
        action = "Collect tenancy agreement to support rent relief claim"

    return RuleOutcome(
        recommendation=Recommendation(
            type="RENT_RELIEF",
            category="exemption",
            priority="HIGH",
            estimated_annual_benefit=relief,
            benefit=f"{format_naira(relief)} annual rent relief",
            action=action,
            documentation=("Tenancy agreement", "Rent payment receipts"),
        ),
        warnings=warnings,
        relief=relief,
    )


# =============================================================================
# NHF
# =============================================================================


def nhf_exemption(profile: EmployeeTaxProfile, config: TaxConfig, age: Optional[int]) -> RuleOutcome:
    """NHF exemption for exempt employees, or a suggestion for those 60+.

    The saving is basic salary x NHF rate x 12. The exemption itself
    does not reduce taxable income.
    """
    saving = round_money(annualize(profile.basic_salary * config.statutory_rates.nhf))

    if not profile.exempt_from_nhf:
        if age is None or age < NHF_EXEMPT_AGE:
            return NOTHING
        return RuleOutcome(recommendation=Recommendation(
            type="NHF_EXEMPTION",
            category="optimization",
            priority="HIGH",
            estimated_annual_benefit=saving,
            benefit=f"{format_naira(saving)} annual NHF contribution saved",
            action=f"Employee is {age}; mark as NHF exempt (age_60_plus)",
            documentation=NHF_DOCUMENTATION["age_60_plus"],
        ))

    reason = profile.nhf_exemption_reason
    warnings = []
    if reason not in NHF_EXEMPTION_REASONS:
        warnings.append(_warning(
            "NHF_EXEMPTION_REASON_MISSING",
            f"NHF exemption needs a reason from: {', '.join(NHF_EXEMPTION_REASONS)}"
            + (f" (got {reason!r})" if reason else ""),
            "nhfExemptionReason",
        ))
    elif reason == "age_60_plus" and age is not None and age < NHF_EXEMPT_AGE:
        warnings.append(_warning(
            "NHF_EXEMPTION_REASON_INCONSISTENT",
            f"NHF exemption reason is age_60_plus but employee is {age}",
            "nhfExemptionReason",
        ))

    return RuleOutcome(
        recommendation=Recommendation(
            type="NHF_EXEMPTION",
            category="exemption",
            priority="HIGH",
            estimated_annual_benefit=saving,
            benefit=f"{format_naira(saving)} annual NHF contribution saved",
            action="NHF exemption applied; keep exemption evidence on file",
            documentation=NHF_DOCUMENTATION.get(reason, ()),
        ),
        warnings=tuple(warnings),
    )


# =============================================================================
# Pension
# =============================================================================


def voluntary_pension(profile: EmployeeTaxProfile, config: TaxConfig) -> RuleOutcome:
    """Tax saved by a voluntary pension top-up at the lowest non-zero rate.

    The top-up is part of the pension deduction and so already reduces
    taxable income; no separate relief is returned.
    """
    if profile.additional_pension <= 0:
        return NOTHING

    rate = config.lowest_nonzero_rate()
    saving = round_money(annualize(profile.additional_pension * rate))

    warnings = ()
    cap = profile.pensionable_emoluments * config.reliefs.voluntary_pension_cap
    if profile.additional_pension > cap:
        warnings = (_warning(
            "VOLUNTARY_PENSION_CAP_EXCEEDED",
            f"Voluntary pension of {format_naira(profile.additional_pension)}/month exceeds "
            f"{format_percent(config.reliefs.voluntary_pension_cap)} of pensionable emoluments "
            f"({format_naira(cap)})",
            "additionalPension",
        ),)

    return RuleOutcome(
        recommendation=Recommendation(
            type="VOLUNTARY_PENSION",
            category="optimization",
            priority="MEDIUM",
            estimated_annual_benefit=saving,
            benefit=f"{format_naira(saving)} annual tax saved at {format_percent(rate)}",
            action="Confirm voluntary contribution mandate with the PFA",
            documentation=("Voluntary contribution mandate form",),
        ),
        warnings=warnings,
    )


# =============================================================================
# Personal reliefs
# =============================================================================


def disability_relief(profile: EmployeeTaxProfile, config: TaxConfig) -> RuleOutcome:
    """Fixed monthly relief x 12, independent of salary."""
    if not profile.has_disability:
        return NOTHING

    relief = round_money(annualize(config.reliefs.disability_relief_monthly))
    return RuleOutcome(
        recommendation=Recommendation(
            type="DISABILITY_RELIEF",
            category="exemption",
            priority="HIGH",
            estimated_annual_benefit=relief,
            benefit=f"{format_naira(relief)} annual disability relief",
            action="Apply disability relief",
            documentation=("Medical certificate of disability",),
        ),
        relief=relief,
    )


def life_assurance_relief(profile: EmployeeTaxProfile, config: TaxConfig) -> RuleOutcome:
    """Premium paid, up to a fraction of annual gross income."""
    if not profile.has_life_assurance:
        return NOTHING

    premium = profile.life_assurance_premium
    if premium <= 0:
        return RuleOutcome(warnings=(_warning(
            "LIFE_ASSURANCE_PREMIUM_MISSING",
            "Employee has life assurance but no premium is declared; relief not applied",
            "lifeAssurancePremium",
        ),))

    cap = annualize(profile.gross_salary) * config.reliefs.life_assurance_income_cap
    relief = round_money(min(premium, cap))

    warnings = ()
    if premium > cap:
        warnings = (_warning(
            "LIFE_ASSURANCE_RELIEF_CAPPED",
            f"Life assurance premium of {format_naira(premium)} exceeds "
            f"{format_percent(config.reliefs.life_assurance_income_cap)} of annual gross; "
            f"relief limited to {format_naira(relief)}",
            "lifeAssurancePremium",
        ),)

    return RuleOutcome(
        recommendation=Recommendation(
            type="LIFE_ASSURANCE",
            category="exemption",
            priority="MEDIUM",
            estimated_annual_benefit=relief,
            benefit=f"{format_naira(relief)} annual life assurance relief",
            action="Apply life assurance relief",
            documentation=("Policy document", "Premium payment receipt"),
        ),
        warnings=warnings,
        relief=relief,
    )


def age_relief(profile: EmployeeTaxProfile, config: TaxConfig, age: Optional[int]) -> RuleOutcome:
    """Flat percentage of annual gross for employees at or above the age threshold."""
    if age is None or age < config.reliefs.age_relief_min_age:
        return NOTHING

    relief = round_money(annualize(profile.gross_salary) * config.reliefs.age_relief_rate)
    return RuleOutcome(
        recommendation=Recommendation(
            type="AGE_RELIEF",
            category="informational",
            priority="LOW",
            estimated_annual_benefit=relief,
            benefit=f"{format_naira(relief)} annual age relief",
            action=f"Employee is {age}; age relief applied",
            documentation=("Proof of age",),
        ),
        relief=relief,
    )
