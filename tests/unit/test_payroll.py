"""Tests for payroll line and batch computation.

Reference employee (monthly): basic 500,000 + housing 200,000 +
transport 100,000 = 800,000 gross, all of it pensionable.

    pension 64,000  NHF 20,000  NHIS 40,000  -> 124,000
    taxable = 9,600,000 - 768,000 = 8,832,000 a year
    tax = 330,000 + 5,832,000 x 18% = 1,379,760 a year -> 114,980 PAYE
    net = 800,000 - 114,980 - 124,000 = 561,020
"""

from datetime import date
from decimal import Decimal

import pytest

from payecalc.sdk import (
    ConfigurationError,
    compute_batch,
    compute_line,
    summarize_batch,
)


AS_OF = date(2026, 1, 31)


class TestComputeLine:

    def test_reference_employee(self, employee, config):
        line = compute_line(employee, config, as_of=AS_OF)

        assert line.employee_id == "EMP001"
        assert line.gross_salary == Decimal("800000.00")
        assert line.annual_gross == Decimal("9600000.00")
        assert line.taxable_income == Decimal("8832000.00")
        assert line.annual_tax == Decimal("1379760.00")
        assert line.paye_tax == Decimal("114980.00")
        assert line.statutory_deductions.total == Decimal("124000.00")
        assert line.total_deductions == Decimal("238980.00")
        assert line.net_salary == Decimal("561020.00")
        assert line.warnings == ()
        assert line.config_version == 1

    def test_net_identity(self, employee, config):
        line = compute_line(employee, config, as_of=AS_OF)
        assert line.net_salary == line.gross_salary - line.paye_tax - line.statutory_deductions.total

    def test_employer_cost(self, employee, config):
        """Employer pension 80,000 + NSITF 8,000 + ITF 8,000 on top of gross."""
        line = compute_line(employee, config, as_of=AS_OF)
        assert line.statutory_deductions.employer_total == Decimal("96000.00")
        assert line.employer_cost == Decimal("896000.00")
        # Employer side never reduces net pay
        assert line.net_salary == Decimal("561020.00")

    def test_small_employer_no_itf(self, employee, config):
        line = compute_line(employee, config, employer_headcount=3, as_of=AS_OF)
        assert line.statutory_deductions.itf == Decimal("0")
        assert line.employer_cost == Decimal("888000.00")

    def test_rent_relief_reduces_taxable_income(self, employee_record, config):
        """1,200,000 rent -> 240,000 relief -> taxable 8,592,000."""
        employee_record.update(housingSituation="renting", annualRent=1200000, hasTenancyAgreement=True)
        line = compute_line(employee_record, config, as_of=AS_OF)

        assert line.taxable_income == Decimal("8592000.00")
        assert line.annual_tax == Decimal("1336560.00")
        assert line.paye_tax == Decimal("111380.00")

    def test_disability_relief_reduces_taxable_income(self, employee_record, config):
        employee_record["hasDisability"] = True
        line = compute_line(employee_record, config, as_of=AS_OF)
        assert line.taxable_income == Decimal("8592000.00")

    def test_nhf_exempt(self, employee_record, config):
        employee_record.update(exemptFromNHF=True, nhfExemptionReason="non_nigerian")
        line = compute_line(employee_record, config, as_of=AS_OF)

        assert line.statutory_deductions.nhf == Decimal("0")
        assert line.net_salary == Decimal("581020.00")
        assert line.eligibility.recommendation("NHF_EXEMPTION") is not None

    def test_voluntary_pension(self, employee_record, config):
        """50,000 top-up: pension 114,000, taxable drops by 600,000."""
        employee_record["additionalPension"] = 50000
        line = compute_line(employee_record, config, as_of=AS_OF)

        assert line.statutory_deductions.pension == Decimal("114000.00")
        assert line.taxable_income == Decimal("8232000.00")

    def test_tax_free_income(self, config):
        """50,000/month is under the 800,000 annual threshold after pension."""
        line = compute_line({"basicSalary": 50000}, config, as_of=AS_OF)
        assert line.paye_tax == Decimal("0")
        assert line.net_salary == Decimal("42250.00")

    def test_voluntary_pension_without_pensionable_pay(self, config):
        """Entertainment allowance only: the 10,000 top-up is still deducted.

        taxable = 6,000,000 - 120,000 = 5,880,000
        tax = 330,000 + 2,880,000 x 18% = 848,400 -> 70,700 PAYE
        net = 500,000 - 70,700 - 10,000 = 419,300
        """
        record = {"basicSalary": 0, "allowances": {"entertainment": 500000}, "additionalPension": 10000}
        line = compute_line(record, config, as_of=AS_OF)

        assert line.pensionable_emoluments == Decimal("0")
        assert line.statutory_deductions.pension == Decimal("10000.00")
        assert line.statutory_deductions.total == Decimal("10000.00")
        assert line.taxable_income == Decimal("5880000.00")
        assert line.paye_tax == Decimal("70700.00")
        assert line.net_salary == Decimal("419300.00")
        # Above 15% of zero pensionable pay: flagged, and applied
        assert [w.code for w in line.warnings] == ["VOLUNTARY_PENSION_CAP_EXCEEDED"]
        assert line.eligibility.recommendation("VOLUNTARY_PENSION") is not None

    def test_zero_salary(self, config):
        line = compute_line({"employeeId": "E0"}, config, as_of=AS_OF)
        assert line.gross_salary == Decimal("0")
        assert line.paye_tax == Decimal("0")
        assert line.net_salary == Decimal("0")
        assert line.tax_breakdown == ()

    def test_reliefs_exceeding_income(self, config):
        """Taxable income floors at zero."""
        line = compute_line({"basicSalary": 10000, "hasDisability": True}, config, as_of=AS_OF)
        assert line.taxable_income == Decimal("0")
        assert line.paye_tax == Decimal("0")

    def test_profile_warnings_attached(self, employee_record, config):
        employee_record["allowances"]["transport"] = "n/a"
        line = compute_line(employee_record, config, as_of=AS_OF)

        assert [w.code for w in line.warnings] == ["PROFILE_DATA"]
        assert line.gross_salary == Decimal("700000.00")
        assert line.eligibility.summary.compliance_status == "NEEDS_REVIEW"
        assert line.eligibility.summary.total_warnings == 1

    def test_eligibility_warnings_attached(self, employee_record, config):
        employee_record.update(housingSituation="renting", annualRent=3000000)
        line = compute_line(employee_record, config, as_of=AS_OF)
        assert [w.code for w in line.warnings] == ["RENT_RELIEF_CAPPED"]

    def test_idempotent(self, employee_record, config):
        employee_record.update(housingSituation="renting", annualRent=3000000, dateOfBirth="1958-09-09")
        first = compute_line(employee_record, config, as_of=AS_OF)
        second = compute_line(employee_record, config, as_of=AS_OF)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_settings_dict_validated(self, employee, settings):
        line = compute_line(employee, settings, as_of=AS_OF)
        assert line.net_salary == Decimal("561020.00")

        settings["taxBrackets"].pop()
        with pytest.raises(ConfigurationError):
            compute_line(employee, settings, as_of=AS_OF)


class TestComputeBatch:

    @pytest.fixture
    def records(self, employee_record):
        return [
            employee_record,
            {"employeeId": "EMP002", "basicSalary": 300000, "allowances": {"housing": 100000}},
            {"employeeId": "EMP003", "basicSalary": 1500000, "exemptFromNHF": True,
             "nhfExemptionReason": "contract_staff", "housingSituation": "renting", "annualRent": 2000000},
        ]

    def test_matches_individual_lines(self, records, config):
        results = compute_batch(records, config, as_of=AS_OF)

        assert [r.employee_id for r in results] == ["EMP001", "EMP002", "EMP003"]
        for record, result in zip(records, results):
            assert result == compute_line(record, config, employer_headcount=3, as_of=AS_OF)

    def test_headcount_drives_itf(self, records, config):
        """Three employees is below the ITF threshold of five."""
        results = compute_batch(records, config, as_of=AS_OF)
        assert all(r.statutory_deductions.itf == 0 for r in results)

        five = compute_batch(records + records[:2], config, as_of=AS_OF)
        assert all(r.statutory_deductions.itf > 0 for r in five)

    def test_threaded_same_order(self, records, config):
        many = [dict(r, employeeId=f"E{i:03d}") for i in range(20) for r in records[:1]]
        sequential = compute_batch(many, config, as_of=AS_OF)
        threaded = compute_batch(many, config, max_workers=4, as_of=AS_OF)

        assert [r.employee_id for r in threaded] == [f"E{i:03d}" for i in range(20)]
        assert threaded == sequential

    def test_invalid_config_blocks_run(self, records, settings):
        settings["statutoryRates"]["employeePension"] = 0.5
        with pytest.raises(ConfigurationError) as exc_info:
            compute_batch(records, settings, as_of=AS_OF)
        assert "Employee pension" in str(exc_info.value)

    def test_unreadable_record_does_not_abort(self, records, config):
        results = compute_batch(records + ["not a record"], config, as_of=AS_OF)

        assert len(results) == 4
        bad = results[-1]
        assert bad.gross_salary == Decimal("0")
        assert bad.warnings[0].code == "PROFILE_DATA"
        assert bad.eligibility.summary.compliance_status == "NEEDS_REVIEW"

    def test_empty(self, config):
        assert compute_batch([], config) == []


class TestSummarizeBatch:

    def test_totals(self, employee_record, config):
        exempt = dict(employee_record, employeeId="EMP002", exemptFromNHF=True,
                      nhfExemptionReason="other", housingSituation="renting", annualRent=3000000)
        results = compute_batch([employee_record, exempt], config, as_of=AS_OF)
        summary = summarize_batch(results)

        assert summary.total_employees == 2
        assert summary.total_gross == Decimal("1600000.00")
        assert summary.total_paye == results[0].paye_tax + results[1].paye_tax
        assert summary.total_net == results[0].net_salary + results[1].net_salary
        assert summary.employees_with_reliefs == 1
        assert summary.total_rent_relief == Decimal("500000.00")
        assert summary.total_nhf_exemptions == 1
        assert summary.employees_needing_review == 1
        assert summary.total_warnings == 1

    def test_empty(self):
        summary = summarize_batch([])
        assert summary.total_employees == 0
        assert summary.total_gross == Decimal("0")
