"""Pydantic schemas for employee profiles and payroll results.

Profiles accept the camelCase keys employee records use (basicSalary,
exemptFromNHF, ...) as well as snake_case. Every field except employee_id
has an explicit default so a sparse record still produces a profile; see
profiles.parse_profile() for how malformed fields are degraded.

Results are frozen and produced fresh on every call.
"""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .money import ZERO, Money
from .taxes.schemas import BracketLine, StatutoryDeductions

NHF_EXEMPTION_REASONS = (
    "age_60_plus",
    "non_nigerian",
    "casual_worker",
    "contract_staff",
    "other",
)

HousingSituation = Literal["renting", "owner", "company"]
Priority = Literal["HIGH", "MEDIUM", "LOW"]
RecommendationCategory = Literal["exemption", "optimization", "informational"]
ComplianceStatus = Literal["COMPLIANT", "NEEDS_REVIEW"]


# =============================================================================
# Employee profile
# =============================================================================


class Allowances(BaseModel):
    """Monthly allowances on top of basic salary."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    housing: Money = Field(default=ZERO, ge=0)
    transport: Money = Field(default=ZERO, ge=0)
    entertainment: Money = Field(default=ZERO, ge=0)
    meal_subsidy: Money = Field(default=ZERO, ge=0, alias="mealSubsidy")
    medical: Money = Field(default=ZERO, ge=0)
    benefits_in_kind: Money = Field(default=ZERO, ge=0, alias="benefitsInKind")
    other: Money = Field(default=ZERO, ge=0)

    @property
    def total(self) -> Decimal:
        return (
            self.housing + self.transport + self.entertainment + self.meal_subsidy
            + self.medical + self.benefits_in_kind + self.other
        )


class EmployeeTaxProfile(BaseModel):
    """Snapshot of an employee's tax-relevant data for one computation.

    Salary amounts are monthly. life_assurance_premium is annual.
    Unknown keys (department, bank details, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    name: str = Field(default="")
    basic_salary: Money = Field(default=ZERO, ge=0, alias="basicSalary")
    allowances: Allowances = Field(default_factory=Allowances)
    housing_situation: Optional[HousingSituation] = Field(default=None, alias="housingSituation")
    annual_rent: Money = Field(default=ZERO, ge=0, alias="annualRent")
    has_tenancy_agreement: bool = Field(default=False, alias="hasTenancyAgreement")
    exempt_from_nhf: bool = Field(default=False, alias="exemptFromNHF")
    nhf_exemption_reason: Optional[str] = Field(default=None, alias="nhfExemptionReason")
    additional_pension: Money = Field(default=ZERO, ge=0, alias="additionalPension")
    has_life_assurance: bool = Field(default=False, alias="hasLifeAssurance")
    life_assurance_premium: Money = Field(default=ZERO, ge=0, alias="lifeAssurancePremium")
    has_disability: bool = Field(default=False, alias="hasDisability")
    date_of_birth: Optional[date] = Field(default=None, alias="dateOfBirth")

    @field_validator("employee_id", mode="before")
    @classmethod
    def coerce_employee_id(cls, v):
        """Numeric IDs from employee stores become strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def gross_salary(self) -> Decimal:
        """Monthly gross: basic plus every allowance."""
        return self.basic_salary + self.allowances.total

    @property
    def pensionable_emoluments(self) -> Decimal:
        """Monthly basic + housing + transport."""
        return self.basic_salary + self.allowances.housing + self.allowances.transport

    def age_on(self, as_of: date) -> Optional[int]:
        """Age in whole years on as_of, None if date of birth unknown."""
        if self.date_of_birth is None:
            return None
        dob = self.date_of_birth
        age = as_of.year - dob.year
        if (as_of.month, as_of.day) < (dob.month, dob.day):
            age -= 1
        return age


# =============================================================================
# Eligibility
# =============================================================================


class ComputationWarning(BaseModel):
    """Non-fatal finding recorded on a result. Never raised."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(..., description="Stable identifier, e.g. RENT_RELIEF_CAPPED")
    message: str
    field: Optional[str] = Field(default=None, description="Profile field involved")


class Recommendation(BaseModel):
    """One relief, exemption or optimization the employee qualifies for.

    estimated_annual_benefit is the number; benefit is display text built
    from it and is never parsed back.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str
    category: RecommendationCategory
    priority: Priority
    estimated_annual_benefit: Money
    benefit: str
    action: str
    documentation: Tuple[str, ...] = ()


class AppliedReliefs(BaseModel):
    """Annual relief amounts that reduce taxable income."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rent: Money = ZERO
    disability: Money = ZERO
    age: Money = ZERO
    life_assurance: Money = ZERO

    @property
    def total(self) -> Decimal:
        return self.rent + self.disability + self.age + self.life_assurance


class EligibilitySummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    total_exemptions: int
    total_optimizations: int
    total_warnings: int
    estimated_annual_savings: Money
    compliance_status: ComplianceStatus


class EligibilityResult(BaseModel):
    """Result of assess_eligibility()."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    summary: EligibilitySummary
    recommendations: Tuple[Recommendation, ...] = ()
    warnings: Tuple[ComputationWarning, ...] = ()
    applied_reliefs: AppliedReliefs = Field(default_factory=AppliedReliefs)

    def recommendation(self, rec_type: str) -> Optional[Recommendation]:
        """First recommendation of the given type, if any."""
        for rec in self.recommendations:
            if rec.type == rec_type:
                return rec
        return None


# =============================================================================
# Payroll results
# =============================================================================


class PayrollLineResult(BaseModel):
    """Net-pay computation for one employee for one monthly cycle.

    Monthly: gross_salary, paye_tax, statutory_deductions, total_deductions,
    net_salary, employer_cost. Annual: annual_gross, taxable_income,
    annual_tax.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_id: Optional[str] = None
    gross_salary: Money
    annual_gross: Money
    pensionable_emoluments: Money
    taxable_income: Money
    annual_tax: Money
    paye_tax: Money
    tax_breakdown: Tuple[BracketLine, ...] = ()
    statutory_deductions: StatutoryDeductions
    total_deductions: Money
    net_salary: Money
    employer_cost: Money
    eligibility: EligibilityResult
    warnings: Tuple[ComputationWarning, ...] = ()
    config_version: int = 1


class BatchSummary(BaseModel):
    """Totals across a batch of PayrollLineResults (monthly amounts)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_employees: int
    total_gross: Money
    total_paye: Money
    total_statutory_deductions: Money
    total_net: Money
    total_employer_cost: Money
    employees_with_reliefs: int
    total_rent_relief: Money
    total_disability_relief: Money
    total_nhf_exemptions: int
    total_life_assurance_relief: Money
    total_additional_pension: Money
    employees_needing_review: int
    total_warnings: int
