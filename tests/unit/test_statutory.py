"""Tests for statutory contributions (pension, NHF, NHIS, NSITF, ITF)."""

from decimal import Decimal

import pytest

from payecalc.sdk.taxes import (
    StatutoryExemptions,
    compute_statutory_deductions,
    itf_applies,
)


class TestEmployeeContributions:

    def test_one_million_emoluments(self, config):
        """1,000,000 at 8% pension and 2.5% NHF -> 80,000 and 25,000."""
        result = compute_statutory_deductions(1000000, config.statutory_rates,
                                              StatutoryExemptions(exempt_from_nhf=False))
        assert result.pension == Decimal("80000.00")
        assert result.nhf == Decimal("25000.00")
        assert result.nhis == Decimal("50000.00")
        assert result.total == Decimal("155000.00")

    def test_default_exemptions(self, config):
        """No exemptions argument behaves like no exemptions."""
        assert compute_statutory_deductions(1000000, config.statutory_rates) == \
            compute_statutory_deductions(1000000, config.statutory_rates, StatutoryExemptions())

    def test_nhf_exempt(self, config):
        result = compute_statutory_deductions(1000000, config.statutory_rates,
                                              StatutoryExemptions(exempt_from_nhf=True))
        assert result.nhf == Decimal("0")
        assert result.total == Decimal("130000.00")

    def test_voluntary_pension_passed_through(self, config):
        """Top-up is added to pension unchanged, even above the 15% policy cap."""
        result = compute_statutory_deductions(
            100000, config.statutory_rates,
            StatutoryExemptions(additional_pension=50000),
        )
        assert result.voluntary_pension == Decimal("50000.00")
        assert result.pension == Decimal("58000.00")

    def test_camel_case_exemptions(self):
        exemptions = StatutoryExemptions.model_validate({"exemptFromNHF": True, "additionalPension": 1000})
        assert exemptions.exempt_from_nhf is True
        assert exemptions.additional_pension == Decimal("1000")


class TestEmployerContributions:
    """Employer side is reported separately from the employee total."""

    def test_employer_side(self, config):
        result = compute_statutory_deductions(1000000, config.statutory_rates)
        assert result.employer_pension == Decimal("100000.00")
        assert result.nsitf == Decimal("10000.00")
        assert result.itf == Decimal("10000.00")
        assert result.employer_total == Decimal("120000.00")
        # Not part of what the employee pays
        assert result.total == result.pension + result.nhf + result.nhis

    def test_itf_not_applicable(self, config):
        result = compute_statutory_deductions(1000000, config.statutory_rates,
                                              StatutoryExemptions(itf_applicable=False))
        assert result.itf == Decimal("0")
        assert result.employer_total == Decimal("110000.00")

    @pytest.mark.parametrize("headcount,expected", [(None, True), (4, False), (5, True), (120, True)])
    def test_itf_headcount_threshold(self, headcount, expected):
        assert itf_applies(headcount) is expected


class TestRounding:

    def test_half_up_to_kobo(self, config):
        """100.10 x 5% = 5.005 rounds up to 5.01, not to even."""
        result = compute_statutory_deductions(Decimal("100.10"), config.statutory_rates)
        assert result.nhis == Decimal("5.01")

    @pytest.mark.parametrize("emoluments", [-1, -500000])
    def test_negative_emoluments(self, config, emoluments):
        result = compute_statutory_deductions(emoluments, config.statutory_rates,
                                              StatutoryExemptions(additional_pension=1000))
        assert result.total == Decimal("0")
        assert result.employer_total == Decimal("0")
        assert result.pension == Decimal("0")

    def test_zero_emoluments_keep_voluntary_pension(self, config):
        """No pensionable pay: rate-based lines are zero, the top-up still counts."""
        result = compute_statutory_deductions(0, config.statutory_rates,
                                              StatutoryExemptions(additional_pension=10000))
        assert result.pension == Decimal("10000.00")
        assert result.voluntary_pension == Decimal("10000.00")
        assert result.nhf == Decimal("0")
        assert result.nhis == Decimal("0")
        assert result.total == Decimal("10000.00")
        assert result.employer_total == Decimal("0")

    def test_zero_emoluments_without_top_up(self, config):
        result = compute_statutory_deductions(0, config.statutory_rates)
        assert result.total == Decimal("0")
        assert result.employer_total == Decimal("0")
