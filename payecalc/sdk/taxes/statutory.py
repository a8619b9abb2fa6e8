"""Statutory contribution calculations.

Employee side: pension (mandatory + voluntary top-up), NHF, NHIS.
Employer side: employer pension, NSITF, ITF - reported, never taken out
of net pay.

All contributions are computed on pensionable emoluments for the period
and rounded to kobo half-up.
"""

import logging
from typing import Optional

from ..money import ZERO, round_money, to_decimal
from .schemas import StatutoryDeductions, StatutoryExemptions, StatutoryRates

logger = logging.getLogger(__name__)

# ITF is only levied on employers with at least this many staff
ITF_MIN_HEADCOUNT = 5


def itf_applies(employer_headcount: Optional[int]) -> bool:
    """True when ITF is due. Unknown headcount is treated as due."""
    return employer_headcount is None or employer_headcount >= ITF_MIN_HEADCOUNT


def compute_statutory_deductions(
    pensionable_emoluments,
    rates: StatutoryRates,
    exemptions: Optional[StatutoryExemptions] = None,
) -> StatutoryDeductions:
    """Calculate statutory contributions for one period.

    Args:
        pensionable_emoluments: Basic + housing + transport for the period
        rates: Statutory rates from the tax config
        exemptions: NHF exemption, voluntary pension top-up, ITF applicability

    Returns:
        StatutoryDeductions. Negative emoluments give all zeros. Zero
        emoluments still carry the voluntary top-up.

    Note:
        additional_pension is passed through unchanged. The 15% cap is
        policy, flagged by eligibility assessment, not truncated here.
    """
    if exemptions is None:
        exemptions = StatutoryExemptions()

    base = to_decimal(pensionable_emoluments)
    if base < 0:
        return StatutoryDeductions(
            pension=ZERO, voluntary_pension=ZERO, nhf=ZERO, nhis=ZERO, total=ZERO,
            employer_pension=ZERO, nsitf=ZERO, itf=ZERO, employer_total=ZERO,
        )

    voluntary = round_money(max(exemptions.additional_pension, ZERO))
    pension = round_money(base * rates.employee_pension + voluntary)
    nhf = ZERO if exemptions.exempt_from_nhf else round_money(base * rates.nhf)
    nhis = round_money(base * rates.nhis)

    employer_pension = round_money(base * rates.employer_pension)
    nsitf = round_money(base * rates.nsitf)
    itf = round_money(base * rates.itf) if exemptions.itf_applicable else ZERO

    logger.debug(
        f"statutory: base={base} pension={pension} (voluntary {voluntary}) "
        f"nhf={nhf} nhis={nhis} employer={employer_pension}/{nsitf}/{itf}"
    )

    return StatutoryDeductions(
        pension=pension,
        voluntary_pension=voluntary,
        nhf=nhf,
        nhis=nhis,
        total=pension + nhf + nhis,
        employer_pension=employer_pension,
        nsitf=nsitf,
        itf=itf,
        employer_total=employer_pension + nsitf + itf,
    )
