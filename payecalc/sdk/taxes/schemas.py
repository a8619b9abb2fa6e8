"""Pydantic schemas for tax configuration and tax computation results.

These schemas validate tax-rules/*.yaml files (and the JSON-shaped settings
a settings store hands over) and give typed access to brackets, statutory
rates and reliefs.

Only structure is enforced here. Business-rule bounds (rate ranges,
bracket contiguity, unbounded top bracket) are checked by
validate_config() so every problem can be reported at once instead of
stopping at the first.
"""

import math
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..money import Money

UNBOUNDED_MARKERS = ("inf", "infinity", "unbounded", "∞")


class TaxBracket(BaseModel):
    """Single PAYE bracket: income in [min, max] taxed at rate.

    max=None marks the unbounded top bracket. Bounds are inclusive and
    contiguous tables satisfy bracket[i].max + 1 == bracket[i+1].min.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    min: Money = Field(..., description="Lower bound (inclusive)")
    max: Optional[Money] = Field(default=None, description="Upper bound (inclusive), None if unbounded")
    rate: Money = Field(..., description="Marginal rate as decimal")
    description: str = Field(default="", description="Display label")

    @field_validator("max", mode="before")
    @classmethod
    def normalize_unbounded(cls, v):
        """Map YAML .inf, float('inf') and 'Infinity' to None."""
        if isinstance(v, float) and math.isinf(v) and v > 0:
            return None
        if isinstance(v, str) and v.strip().lower() in UNBOUNDED_MARKERS:
            return None
        return v

    @property
    def is_unbounded(self) -> bool:
        return self.max is None

    def label(self) -> str:
        upper = "∞" if self.max is None else f"{self.max:,}"
        return f"{self.min:,} - {upper}"


class StatutoryRates(BaseModel):
    """Statutory contribution rates (fractions of pensionable emoluments)."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    employee_pension: Money = Field(..., alias="employeePension")
    employer_pension: Money = Field(..., alias="employerPension")
    nhf: Money = Field(..., description="National Housing Fund (employee)")
    nhis: Money = Field(..., description="National Health Insurance Scheme (employee)")
    nsitf: Money = Field(..., description="Nigeria Social Insurance Trust Fund (employer)")
    itf: Money = Field(..., description="Industrial Training Fund (employer)")


class Reliefs(BaseModel):
    """Relief parameters.

    rent_relief/rent_relief_cap come from the settings store; the rest are
    policy constants with statutory defaults that a rules file may override.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    rent_relief: Money = Field(..., alias="rentRelief", description="Fraction of annual rent")
    rent_relief_cap: Money = Field(..., alias="rentReliefCap", description="Annual cap")
    disability_relief_monthly: Money = Field(default=Decimal("20000"), alias="disabilityReliefMonthly")
    age_relief_rate: Money = Field(default=Decimal("0.05"), alias="ageReliefRate")
    age_relief_min_age: int = Field(default=65, alias="ageReliefMinAge")
    life_assurance_income_cap: Money = Field(
        default=Decimal("0.20"), alias="lifeAssuranceIncomeCap",
        description="Deductible premium capped at this fraction of annual gross",
    )
    voluntary_pension_cap: Money = Field(
        default=Decimal("0.15"), alias="voluntaryPensionCap",
        description="Voluntary pension cap as fraction of pensionable emoluments",
    )
    default_marginal_relief_rate: Money = Field(
        default=Decimal("0.20"), alias="defaultMarginalReliefRate",
        description="Used when the bracket table has no non-zero rate",
    )


class TaxConfig(BaseModel):
    """Complete tax configuration for one payroll cycle.

    Immutable. Settings updates go through config.revise_config(), which
    returns a new TaxConfig with version + 1.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    tax_year: int = Field(..., alias="taxYear")
    version: int = Field(default=1, ge=1)
    effective_date: Optional[date] = Field(default=None, alias="effectiveDate")
    tax_brackets: Tuple[TaxBracket, ...] = Field(..., alias="taxBrackets")
    statutory_rates: StatutoryRates = Field(..., alias="statutoryRates")
    reliefs: Reliefs

    def lowest_nonzero_rate(self) -> Decimal:
        """Lowest non-zero bracket rate, or the configured default."""
        rates = [b.rate for b in self.tax_brackets if b.rate > 0]
        return min(rates) if rates else self.reliefs.default_marginal_relief_rate


class ConfigValidationResult(BaseModel):
    """Outcome of validate_config(). Never raised, always returned."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    is_valid: bool
    errors: Tuple[str, ...] = ()


# =============================================================================
# Computation results
# =============================================================================


class BracketLine(BaseModel):
    """Portion of income that fell in one bracket."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    bracket: TaxBracket
    taxable_in_bracket: Money
    tax_in_bracket: Money


class TaxComputation(BaseModel):
    """Result of compute_tax()."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable_income: Money
    tax: Money
    breakdown: Tuple[BracketLine, ...] = ()
    effective_rate: Money = Field(..., description="tax / taxable_income, 0 when income <= 0")


class StatutoryExemptions(BaseModel):
    """Per-employee inputs to compute_statutory_deductions()."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    exempt_from_nhf: bool = Field(default=False, alias="exemptFromNHF")
    additional_pension: Money = Field(default=Decimal("0"), alias="additionalPension")
    itf_applicable: bool = Field(default=True, alias="itfApplicable")


class StatutoryDeductions(BaseModel):
    """Contributions for one period.

    Employee side (pension, nhf, nhis) is subtracted from net pay.
    Employer side (employer_pension, nsitf, itf) is reported only.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    pension: Money = Field(..., description="Mandatory plus voluntary employee pension")
    voluntary_pension: Money = Field(..., description="Voluntary top-up included in pension")
    nhf: Money
    nhis: Money
    total: Money = Field(..., description="Employee contributions")
    employer_pension: Money
    nsitf: Money
    itf: Money
    employer_total: Money = Field(..., description="Employer contributions")
