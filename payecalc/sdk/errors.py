"""Typed errors for the PAYE engine.

Configuration problems and profile problems are kept apart so callers can
block a payroll run on the former and degrade on the latter. Business-rule
edge cases (zero income, no reliefs, caps exceeded) are never raised; they
surface as ComputationWarning entries on results.
"""

from typing import List, Optional


class PayeCalcError(Exception):
    """Base class for all payecalc errors."""
    pass


class ConfigurationError(PayeCalcError):
    """Raised when a tax configuration is invalid or unusable.

    Must be surfaced to an operator; never auto-corrected.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


class ConfigNotFoundError(ConfigurationError):
    """Raised when no tax rules file can be resolved."""
    pass


class ProfileDataError(PayeCalcError):
    """Raised when an employee record cannot be read as a profile at all.

    Individual bad fields do not raise; see profiles.parse_profile.
    """
    pass
