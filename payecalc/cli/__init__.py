"""PAYE Calc command-line interface."""
