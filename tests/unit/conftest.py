"""Shared fixtures: the default Nigerian tax settings and sample employees."""

import copy

import pytest

from payecalc.sdk import EmployeeTaxProfile, TaxConfig


# Same shape a settings store hands over (camelCase, JSON types)
DEFAULT_SETTINGS = {
    "taxYear": 2026,
    "taxBrackets": [
        {"min": 0, "max": 800000, "rate": 0.0, "description": "Tax-free threshold"},
        {"min": 800001, "max": 3000000, "rate": 0.15},
        {"min": 3000001, "max": 12000000, "rate": 0.18},
        {"min": 12000001, "max": 25000000, "rate": 0.21},
        {"min": 25000001, "max": 50000000, "rate": 0.23},
        {"min": 50000001, "max": None, "rate": 0.25},
    ],
    "statutoryRates": {
        "employeePension": 0.08,
        "employerPension": 0.10,
        "nhf": 0.025,
        "nhis": 0.05,
        "nsitf": 0.01,
        "itf": 0.01,
    },
    "reliefs": {
        "rentRelief": 0.20,
        "rentReliefCap": 500000,
    },
}


@pytest.fixture
def settings():
    """Mutable copy of the default settings dict."""
    return copy.deepcopy(DEFAULT_SETTINGS)


@pytest.fixture
def config():
    return TaxConfig.model_validate(DEFAULT_SETTINGS)


@pytest.fixture
def brackets(config):
    return config.tax_brackets


@pytest.fixture
def employee_record():
    """Monthly: basic 500k + housing 200k + transport 100k = 800k gross."""
    return {
        "employeeId": "EMP001",
        "name": "Adaeze Okafor",
        "basicSalary": 500000,
        "allowances": {"housing": 200000, "transport": 100000},
    }


@pytest.fixture
def employee(employee_record):
    return EmployeeTaxProfile.model_validate(employee_record)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the config directory at an empty temp dir."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYE_CALC_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir, "rules_dir": config_dir / "tax-rules"}
