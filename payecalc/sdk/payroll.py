"""Payroll computation - one employee line, a batch, and batch totals.

Composition per employee:
    gross (basic + allowances)
    -> eligibility (reliefs, recommendations, warnings)
    -> statutory contributions on pensionable emoluments
    -> taxable income = annual gross - annual employee pension - reliefs
    -> PAYE via the bracket table, divided over 12 months
    -> net = gross - PAYE - employee contributions

Reliefs (rent, disability, age, life assurance) all reduce taxable income
before brackets are applied. Employer contributions are reported as
employer cost, never taken from net pay.

Every function here is pure. A batch may run on worker threads because
the only shared value is the frozen TaxConfig.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from .eligibility import assess_eligibility
from .errors import ProfileDataError
from .money import ZERO, annualize, clamp_zero, monthly, round_money
from .profiles import parse_profile
from .schemas import (
    BatchSummary,
    ComputationWarning,
    EmployeeTaxProfile,
    PayrollLineResult,
)
from .taxes import (
    StatutoryExemptions,
    TaxConfig,
    compute_statutory_deductions,
    compute_tax,
    itf_applies,
    require_valid_config,
)

logger = logging.getLogger(__name__)

ProfileInput = Union[EmployeeTaxProfile, Mapping[str, Any]]


def _as_config(config: Union[TaxConfig, Mapping[str, Any]]) -> TaxConfig:
    # Settings-store dicts are validated here; TaxConfig instances are
    # assumed to have been validated by the caller.
    if isinstance(config, TaxConfig):
        return config
    return require_valid_config(config)


def compute_line(
    profile: ProfileInput,
    config: Union[TaxConfig, Mapping[str, Any]],
    employer_headcount: Optional[int] = None,
    as_of: Optional[date] = None,
) -> PayrollLineResult:
    """Compute one employee's monthly payroll line.

    Args:
        profile: EmployeeTaxProfile or an employee record dict
        config: TaxConfig, or a settings dict (validated, raising
            ConfigurationError if invalid)
        employer_headcount: Employer's staff count for the ITF threshold;
            None treats ITF as due
        as_of: Date for age-based rules (default: today)

    Returns:
        PayrollLineResult. Monthly amounts are rounded to kobo.

    Raises:
        ConfigurationError: If a settings dict fails validation
        ProfileDataError: If the record is not a mapping
    """
    config = _as_config(config)
    profile, profile_warnings = parse_profile(profile)
    return _line(profile, profile_warnings, config, employer_headcount, as_of)


def _line(
    profile: EmployeeTaxProfile,
    profile_warnings: Tuple[ComputationWarning, ...],
    config: TaxConfig,
    employer_headcount: Optional[int],
    as_of: Optional[date],
) -> PayrollLineResult:
    gross = profile.gross_salary
    annual_gross = annualize(gross)
    pensionable = profile.pensionable_emoluments

    eligibility = assess_eligibility(profile, config, as_of=as_of, profile_warnings=profile_warnings)

    statutory = compute_statutory_deductions(
        pensionable,
        config.statutory_rates,
        StatutoryExemptions(
            exempt_from_nhf=profile.exempt_from_nhf,
            additional_pension=profile.additional_pension,
            itf_applicable=itf_applies(employer_headcount),
        ),
    )

    reliefs = eligibility.applied_reliefs.total
    taxable_income = clamp_zero(annual_gross - annualize(statutory.pension) - reliefs)
    tax = compute_tax(taxable_income, config.tax_brackets)
    paye = round_money(monthly(tax.tax))

    total_deductions = paye + statutory.total
    net = round_money(gross - total_deductions)

    logger.debug(
        f"line {profile.employee_id or profile.name or '?'}: gross={gross} "
        f"taxable={taxable_income} (reliefs {reliefs}) annual_tax={tax.tax} "
        f"paye={paye} statutory={statutory.total} net={net}"
    )

    return PayrollLineResult(
        employee_id=profile.employee_id,
        gross_salary=round_money(gross),
        annual_gross=round_money(annual_gross),
        pensionable_emoluments=round_money(pensionable),
        taxable_income=round_money(taxable_income),
        annual_tax=tax.tax,
        paye_tax=paye,
        tax_breakdown=tax.breakdown,
        statutory_deductions=statutory,
        total_deductions=total_deductions,
        net_salary=net,
        employer_cost=round_money(gross + statutory.employer_total),
        eligibility=eligibility,
        warnings=eligibility.warnings,
        config_version=config.version,
    )


def _unreadable_line(
    index: int,
    error: ProfileDataError,
    config: TaxConfig,
    employer_headcount: int,
    as_of: date,
) -> PayrollLineResult:
    """All-default line for a record that is not a mapping at all."""
    logger.error(f"batch record {index}: {error}")
    warning = ComputationWarning(code="PROFILE_DATA", message=f"Record {index}: {error}")
    return _line(EmployeeTaxProfile(), (warning,), config, employer_headcount, as_of)


def compute_batch(
    profiles: Iterable[ProfileInput],
    config: Union[TaxConfig, Mapping[str, Any]],
    max_workers: Optional[int] = None,
    as_of: Optional[date] = None,
) -> List[PayrollLineResult]:
    """Compute payroll lines for every employee in a run.

    The config is validated once up front; an invalid config blocks the
    whole run. Bad employee records never do: their fields degrade to
    defaults with warnings on that employee's line.

    Args:
        profiles: Employee profiles or records
        config: TaxConfig or settings dict
        max_workers: Thread count; None or 1 computes sequentially
        as_of: Date for age-based rules, shared by every line (default: today)

    Returns:
        Results in the same order as profiles.

    Raises:
        ConfigurationError: If config fails validation
    """
    config = require_valid_config(config)
    records = list(profiles)
    headcount = len(records)
    if as_of is None:
        as_of = date.today()

    def line_for(item: Tuple[int, ProfileInput]) -> PayrollLineResult:
        index, record = item
        try:
            return compute_line(record, config, employer_headcount=headcount, as_of=as_of)
        except ProfileDataError as e:
            return _unreadable_line(index, e, config, headcount, as_of)

    logger.info(f"computing payroll for {headcount} employee(s), config v{config.version}")

    if max_workers and max_workers > 1 and headcount > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(line_for, enumerate(records)))
    return [line_for(item) for item in enumerate(records)]


def _total(values: Iterable[Decimal]) -> Decimal:
    return round_money(sum(values, ZERO))


def _nhf_exempt(result: PayrollLineResult) -> bool:
    rec = result.eligibility.recommendation("NHF_EXEMPTION")
    return rec is not None and rec.category == "exemption"


def summarize_batch(results: Iterable[PayrollLineResult]) -> BatchSummary:
    """Totals and eligibility roll-up for a batch (monthly amounts, annual reliefs)."""
    results = list(results)
    return BatchSummary(
        total_employees=len(results),
        total_gross=_total(r.gross_salary for r in results),
        total_paye=_total(r.paye_tax for r in results),
        total_statutory_deductions=_total(r.statutory_deductions.total for r in results),
        total_net=_total(r.net_salary for r in results),
        total_employer_cost=_total(r.employer_cost for r in results),
        employees_with_reliefs=sum(1 for r in results if r.eligibility.applied_reliefs.total > 0),
        total_rent_relief=_total(r.eligibility.applied_reliefs.rent for r in results),
        total_disability_relief=_total(r.eligibility.applied_reliefs.disability for r in results),
        total_nhf_exemptions=sum(1 for r in results if _nhf_exempt(r)),
        total_life_assurance_relief=_total(r.eligibility.applied_reliefs.life_assurance for r in results),
        total_additional_pension=_total(r.statutory_deductions.voluntary_pension for r in results),
        employees_needing_review=sum(1 for r in results if r.warnings),
        total_warnings=sum(len(r.warnings) for r in results),
    )
