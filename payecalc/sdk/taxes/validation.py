"""Tax configuration validation.

validate_config() reports every problem with a TaxConfig in one pass and
never raises. Callers decide whether a failed validation blocks a payroll
run; require_valid_config() is the blocking variant.

Checks run in this order:
    (a) each bracket rate in [0, 1]
    (b) each bracket min <= max (max may be unbounded)
    (c) first bracket starts at 0
    (d) brackets ascend contiguously: bracket[i].max + 1 == bracket[i+1].min
    (e) final bracket is unbounded
    (f) each statutory rate within its domain bound
    (g) relief fractions in [0, 1], relief amounts non-negative,
        age threshold positive
"""

import logging
from decimal import Decimal
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..money import format_percent
from .schemas import ConfigValidationResult, TaxConfig

logger = logging.getLogger(__name__)

ONE = Decimal("1")

# Upper bound per statutory rate. Lower bound is always 0.
STATUTORY_RATE_BOUNDS = {
    "employee_pension": (Decimal("0.20"), "Employee pension"),
    "employer_pension": (Decimal("0.20"), "Employer pension"),
    "nhf": (Decimal("0.10"), "NHF"),
    "nhis": (Decimal("0.15"), "NHIS"),
    "nsitf": (Decimal("0.10"), "NSITF"),
    "itf": (Decimal("0.10"), "ITF"),
}

# Relief parameters that are fractions, checked against [0, 1]
RELIEF_FRACTIONS = {
    "rent_relief": "Rent relief rate",
    "age_relief_rate": "Age relief rate",
    "life_assurance_income_cap": "Life assurance income cap",
    "voluntary_pension_cap": "Voluntary pension cap",
    "default_marginal_relief_rate": "Default marginal relief rate",
}

# Relief parameters that are Naira amounts
RELIEF_AMOUNTS = {
    "rent_relief_cap": "Rent relief cap",
    "disability_relief_monthly": "Disability relief",
}


def _format_pydantic_errors(exc: ValidationError) -> List[str]:
    errors = []
    for err in exc.errors():
        path = ".".join(str(p) for p in err["loc"]) if err["loc"] else "root"
        errors.append(f"Invalid configuration at {path}: {err['msg']}")
    return errors


def validate_config(config: Union[TaxConfig, Mapping[str, Any]]) -> ConfigValidationResult:
    """Validate a tax configuration.

    Args:
        config: TaxConfig, or the JSON-shaped dict a settings store provides

    Returns:
        ConfigValidationResult with is_valid and the list of errors.
        Structural problems in a dict (missing keys, non-numeric rates) are
        reported as errors too; nothing is raised.
    """
    if not isinstance(config, TaxConfig):
        try:
            config = TaxConfig.model_validate(config)
        except ValidationError as e:
            errors = _format_pydantic_errors(e)
            logger.debug(f"validate_config: structural errors {errors}")
            return ConfigValidationResult(is_valid=False, errors=tuple(errors))

    errors: List[str] = []
    brackets = config.tax_brackets

    if not brackets:
        errors.append("Tax brackets must be a non-empty list")

    # (a) rates
    for i, bracket in enumerate(brackets, start=1):
        if bracket.rate < 0 or bracket.rate > ONE:
            errors.append(f"Tax bracket {i}: rate {bracket.rate} must be between 0 and 1 (0% to 100%)")

    # (b) min <= max
    for i, bracket in enumerate(brackets, start=1):
        if bracket.min < 0:
            errors.append(f"Tax bracket {i}: min must be non-negative")
        if bracket.max is not None and bracket.min > bracket.max:
            errors.append(f"Tax bracket {i}: min ({bracket.min}) cannot be greater than max ({bracket.max})")

    # (c) first starts at 0
    if brackets and brackets[0].min != 0:
        errors.append(f"First tax bracket must start from 0, got {brackets[0].min}")

    # (d) contiguous ascending
    for i in range(1, len(brackets)):
        prev, cur = brackets[i - 1], brackets[i]
        if prev.max is None:
            errors.append(
                f"Tax bracket {i}: unbounded bracket must be last, "
                f"found {len(brackets) - i} bracket(s) after it"
            )
            break
        expected_min = prev.max + 1
        if cur.min > expected_min:
            errors.append(
                f"Tax bracket {i + 1}: gap between {prev.max} and {cur.min} "
                f"(min should be {expected_min})"
            )
        elif cur.min < expected_min:
            errors.append(
                f"Tax bracket {i + 1}: overlaps previous bracket "
                f"(min {cur.min} should be {expected_min})"
            )

    # (e) unbounded terminal bracket
    if brackets and brackets[-1].max is not None:
        errors.append(
            f"Last tax bracket must be unbounded (max: null); "
            f"missing unbounded terminal bracket above {brackets[-1].max}"
        )

    # (f) statutory rates
    rates = config.statutory_rates
    for field_name, (upper, label) in STATUTORY_RATE_BOUNDS.items():
        value = getattr(rates, field_name)
        if value < 0 or value > upper:
            errors.append(f"{label} rate must be between 0% and {format_percent(upper)}, got {format_percent(value)}")

    # (g) reliefs
    reliefs = config.reliefs
    for field_name, label in RELIEF_FRACTIONS.items():
        value = getattr(reliefs, field_name)
        if value < 0 or value > ONE:
            errors.append(f"{label} must be between 0% and 100%, got {format_percent(value)}")
    for field_name, label in RELIEF_AMOUNTS.items():
        if getattr(reliefs, field_name) < 0:
            errors.append(f"{label} must be a non-negative amount")
    if reliefs.age_relief_min_age <= 0:
        errors.append(f"Age relief minimum age must be positive, got {reliefs.age_relief_min_age}")

    if errors:
        logger.debug(f"validate_config: {len(errors)} error(s) for tax year {config.tax_year}")

    return ConfigValidationResult(is_valid=not errors, errors=tuple(errors))


def require_valid_config(config: Union[TaxConfig, Mapping[str, Any]]) -> TaxConfig:
    """Validate and return the config as a TaxConfig.

    Raises:
        ConfigurationError: If validation fails (errors attached)
    """
    result = validate_config(config)
    if not result.is_valid:
        raise ConfigurationError("Invalid tax configuration", list(result.errors))
    if isinstance(config, TaxConfig):
        return config
    return TaxConfig.model_validate(config)
