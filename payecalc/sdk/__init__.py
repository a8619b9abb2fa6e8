"""PAYE Calc SDK - Nigerian PAYE tax, statutory deductions and reliefs."""

from .config import (
    get_config_dir,
    get_user_rules_dir,
    get_packaged_rules_dir,
    get_available_years,
    find_rules_file,
    load_config_file,
    load_tax_config,
    default_tax_config,
    save_tax_config,
    config_to_dict,
    to_plain,
    revise_config,
)

from .errors import (
    PayeCalcError,
    ConfigurationError,
    ConfigNotFoundError,
    ProfileDataError,
)

from .taxes import (
    validate_config,
    require_valid_config,
    compute_tax,
    marginal_rate,
    compute_statutory_deductions,
    itf_applies,
    TaxBracket,
    StatutoryRates,
    Reliefs,
    TaxConfig,
    ConfigValidationResult,
    TaxComputation,
    StatutoryExemptions,
    StatutoryDeductions,
)

from .eligibility import assess_eligibility

from .profiles import parse_profile

from .payroll import compute_line, compute_batch, summarize_batch

from .schemas import (
    Allowances,
    EmployeeTaxProfile,
    ComputationWarning,
    Recommendation,
    AppliedReliefs,
    EligibilitySummary,
    EligibilityResult,
    PayrollLineResult,
    BatchSummary,
    NHF_EXEMPTION_REASONS,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_user_rules_dir",
    "get_packaged_rules_dir",
    "get_available_years",
    "find_rules_file",
    "load_config_file",
    "load_tax_config",
    "default_tax_config",
    "save_tax_config",
    "config_to_dict",
    "to_plain",
    "revise_config",
    # Errors
    "PayeCalcError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ProfileDataError",
    # Taxes
    "validate_config",
    "require_valid_config",
    "compute_tax",
    "marginal_rate",
    "compute_statutory_deductions",
    "itf_applies",
    "TaxBracket",
    "StatutoryRates",
    "Reliefs",
    "TaxConfig",
    "ConfigValidationResult",
    "TaxComputation",
    "StatutoryExemptions",
    "StatutoryDeductions",
    # Eligibility
    "assess_eligibility",
    # Profiles
    "parse_profile",
    # Payroll
    "compute_line",
    "compute_batch",
    "summarize_batch",
    # Schemas
    "Allowances",
    "EmployeeTaxProfile",
    "ComputationWarning",
    "Recommendation",
    "AppliedReliefs",
    "EligibilitySummary",
    "EligibilityResult",
    "PayrollLineResult",
    "BatchSummary",
    "NHF_EXEMPTION_REASONS",
]
