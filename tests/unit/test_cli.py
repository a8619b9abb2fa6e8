"""Tests for the paye-calc CLI.

Runs commands through CliRunner against an isolated config directory so
only the packaged 2026 rules (plus whatever a test writes) are visible.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from payecalc.cli.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def profile_file(tmp_path, employee_record):
    path = tmp_path / "employee.yaml"
    path.write_text(yaml.safe_dump(employee_record))
    return path


@pytest.fixture
def batch_file(tmp_path, employee_record):
    records = [
        employee_record,
        {"employeeId": "EMP002", "basicSalary": 300000, "allowances": {"housing": 100000}},
    ]
    path = tmp_path / "employees.json"
    path.write_text(json.dumps({"employees": records}))
    return path


class TestTaxCommand:

    def test_json(self, runner, isolated_env):
        result = runner.invoke(cli, ["tax", "1800000", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["tax"] == 150000
        assert data["effective_rate"] == 0.0833
        assert len(data["breakdown"]) == 2

    def test_text(self, runner, isolated_env):
        result = runner.invoke(cli, ["tax", "1,800,000"])

        assert result.exit_code == 0, result.output
        assert "PAYE FOR TAX YEAR 2026" in result.output
        assert "₦150,000.00" in result.output
        assert "₦12,500.00" in result.output
        assert "8.33%" in result.output

    def test_not_a_number(self, runner, isolated_env):
        result = runner.invoke(cli, ["tax", "lots"])
        assert result.exit_code != 0

    def test_explicit_config(self, runner, tmp_path, settings):
        settings["taxBrackets"] = [{"min": 0, "max": None, "rate": 0.1}]
        path = tmp_path / "flat.yaml"
        path.write_text(yaml.safe_dump(settings))

        result = runner.invoke(cli, ["tax", "1000000", "--config", str(path), "--format", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["tax"] == 100000

    def test_invalid_config_rejected(self, runner, tmp_path, settings):
        settings["taxBrackets"][-1]["max"] = 90000000
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(settings))

        result = runner.invoke(cli, ["tax", "1000000", "--config", str(path)])
        assert result.exit_code != 0
        assert "unbounded" in result.output


class TestLineCommand:

    def test_json(self, runner, isolated_env, profile_file):
        result = runner.invoke(cli, [
            "line", str(profile_file), "--as-of", "2026-01-31", "--format", "json",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["employee_id"] == "EMP001"
        assert data["paye_tax"] == 114980
        assert data["net_salary"] == 561020
        assert data["employer_cost"] == 896000

    def test_small_employer(self, runner, isolated_env, profile_file):
        result = runner.invoke(cli, [
            "line", str(profile_file), "--headcount", "3", "--format", "json",
        ])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["statutory_deductions"]["itf"] == 0

    def test_text(self, runner, isolated_env, profile_file):
        result = runner.invoke(cli, ["line", str(profile_file), "--as-of", "2026-01-31"])

        assert result.exit_code == 0, result.output
        assert "NET PAY" in result.output
        assert "₦561,020.00" in result.output
        assert "COMPLIANT" in result.output

    def test_missing_file(self, runner, isolated_env, tmp_path):
        result = runner.invoke(cli, ["line", str(tmp_path / "nobody.yaml")])
        assert result.exit_code != 0


class TestBatchCommand:

    def test_json(self, runner, isolated_env, batch_file):
        result = runner.invoke(cli, ["batch", str(batch_file), "--as-of", "2026-01-31", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [line["employee_id"] for line in data["lines"]] == ["EMP001", "EMP002"]
        assert data["summary"]["total_employees"] == 2
        assert data["summary"]["total_gross"] == 1200000
        # Two employees: below the ITF headcount
        assert all(line["statutory_deductions"]["itf"] == 0 for line in data["lines"])

    def test_threaded(self, runner, isolated_env, batch_file):
        result = runner.invoke(cli, ["batch", str(batch_file), "--workers", "2", "--format", "json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["lines"]) == 2

    def test_text(self, runner, isolated_env, batch_file):
        result = runner.invoke(cli, ["batch", str(batch_file), "--as-of", "2026-01-31"])

        assert result.exit_code == 0, result.output
        assert "EMP002" in result.output
        assert "TOTAL" in result.output
        assert "₦1,200,000.00" in result.output

    def test_not_a_list(self, runner, isolated_env, tmp_path):
        path = tmp_path / "employees.yaml"
        path.write_text("employeeId: EMP001\n")

        result = runner.invoke(cli, ["batch", str(path)])
        assert result.exit_code != 0
        assert "list of employee records" in result.output


class TestConfigCommands:

    def test_path(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert str(isolated_env["config_dir"]) in result.output
        assert "2026" in result.output

    def test_show_yaml(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("# Source: ")
        data = yaml.safe_load(result.output)
        assert data["taxYear"] == 2026
        assert data["statutoryRates"]["nhf"] == 0.025

    def test_show_json_user_override(self, runner, isolated_env, settings):
        settings["statutoryRates"]["nhis"] = 0.04
        isolated_env["rules_dir"].mkdir()
        (isolated_env["rules_dir"] / "2026.yaml").write_text(yaml.safe_dump(settings))

        result = runner.invoke(cli, ["config", "show", "--year", "2026", "--format", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["statutoryRates"]["nhis"] == 0.04

    def test_defaults(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "defaults", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["taxBrackets"][-1]["max"] is None
        assert data["reliefs"]["rentReliefCap"] == 500000

    def test_validate_packaged(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0, result.output
        assert "Valid." in result.output

    def test_validate_bad_file(self, runner, tmp_path, settings):
        settings["taxBrackets"][-1]["max"] = 90000000
        settings["statutoryRates"]["nhf"] = 0.5
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(settings))

        result = runner.invoke(cli, ["config", "validate", str(path)])

        assert result.exit_code != 0
        assert "Invalid (2 error(s)):" in result.output
        assert "unbounded" in result.output
        assert "NHF rate" in result.output


class TestVersion:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "paye-calc" in result.output
