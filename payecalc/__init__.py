"""PAYE Calc - Nigerian PAYE tax and statutory deduction engine."""

__version__ = "0.3.0"
