"""taxes - PAYE brackets, statutory contributions and config validation.

Scope:
- Progressive PAYE over an ordered bracket table (brackets.py)
- Pension, NHF, NHIS, NSITF, ITF contributions (statutory.py)
- Tax configuration validation (validation.py)
- Tax configuration schemas (schemas.py)

Constraints:
- Pure calculation - no employee-specific logic (that's in eligibility/)
- No I/O - receives config values, returns results
- Amounts are Decimal naira, rounded to kobo half-up on output

Usage:
    from payecalc.sdk.taxes import compute_tax, validate_config

    result = validate_config(config)
    if result.is_valid:
        tax = compute_tax(1800000, config.tax_brackets)  # tax.tax == 150000.00
"""

# Bracket engine
from .brackets import compute_tax, marginal_rate

# Statutory contributions
from .statutory import compute_statutory_deductions, itf_applies, ITF_MIN_HEADCOUNT

# Validation
from .validation import validate_config, require_valid_config, STATUTORY_RATE_BOUNDS

# Schemas
from .schemas import (
    TaxBracket,
    StatutoryRates,
    Reliefs,
    TaxConfig,
    ConfigValidationResult,
    BracketLine,
    TaxComputation,
    StatutoryExemptions,
    StatutoryDeductions,
)

__all__ = [
    # Brackets
    "compute_tax",
    "marginal_rate",
    # Statutory
    "compute_statutory_deductions",
    "itf_applies",
    "ITF_MIN_HEADCOUNT",
    # Validation
    "validate_config",
    "require_valid_config",
    "STATUTORY_RATE_BOUNDS",
    # Schemas
    "TaxBracket",
    "StatutoryRates",
    "Reliefs",
    "TaxConfig",
    "ConfigValidationResult",
    "BracketLine",
    "TaxComputation",
    "StatutoryExemptions",
    "StatutoryDeductions",
]
