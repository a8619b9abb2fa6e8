"""PAYE Calc MCP Server - FastMCP implementation for PAYE computation tools."""

import logging
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from payecalc import sdk

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("paye-calc")


def _load_config(config: dict | None, year: int | None) -> sdk.TaxConfig:
    """Inline settings take precedence over the rules directories."""
    if config is not None:
        return sdk.require_valid_config(config)
    return sdk.load_tax_config(year=year)


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


# --- Tools ---

@mcp.tool()
async def validate_config(
    config: dict | None = Field(default=None, description="Tax settings (taxYear, taxBrackets, statutoryRates, reliefs). Omit to validate the rules file in effect"),
    year: int | None = Field(default=None, description="Tax year to resolve when config is omitted"),
) -> dict[str, Any]:
    """Validate a tax configuration. Returns is_valid and every error found."""
    try:
        if config is None:
            config = sdk.load_config_file(sdk.find_rules_file(year))
        result = sdk.validate_config(config)
        return {"is_valid": result.is_valid, "errors": list(result.errors)}

    except Exception as e:
        logger.error(f"Error validating config: {e}")
        return {"error": str(e), "is_valid": False, "errors": []}


@mcp.tool()
async def compute_tax(
    income: float = Field(description="Annual taxable income in Naira"),
    year: int | None = Field(default=None, description="Tax year (default: latest available)"),
    config: dict | None = Field(default=None, description="Inline tax settings instead of the rules file"),
) -> dict[str, Any]:
    """Compute annual PAYE on a taxable income. Returns tax, per-bracket breakdown and effective rate."""
    try:
        tax_config = _load_config(config, year)
        result = sdk.compute_tax(income, tax_config.tax_brackets)
        return sdk.to_plain(result.model_dump())

    except Exception as e:
        logger.error(f"Error computing tax: {e}")
        return {"error": str(e)}


@mcp.tool()
async def assess_eligibility(
    profile: dict = Field(description="Employee record (basicSalary, allowances, housingSituation, annualRent, exemptFromNHF, ...)"),
    year: int | None = Field(default=None, description="Tax year (default: latest available)"),
    as_of: str | None = Field(default=None, description="Date for age-based rules, YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Assess reliefs, exemptions and optimizations for an employee. Returns recommendations, warnings (including unreadable profile fields) and a summary."""
    try:
        tax_config = _load_config(None, year)
        parsed, warnings = sdk.parse_profile(profile)
        result = sdk.assess_eligibility(
            parsed, tax_config,
            as_of=_parse_date(as_of),
            profile_warnings=warnings,
        )
        return sdk.to_plain(result.model_dump())

    except Exception as e:
        logger.error(f"Error assessing eligibility: {e}")
        return {"error": str(e)}


@mcp.tool()
async def compute_line(
    profile: dict = Field(description="Employee record (basicSalary, allowances, housingSituation, annualRent, exemptFromNHF, ...)"),
    year: int | None = Field(default=None, description="Tax year (default: latest available)"),
    employer_headcount: int | None = Field(default=None, description="Employer staff count for the ITF threshold"),
    as_of: str | None = Field(default=None, description="Date for age-based rules, YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Compute one employee's monthly payroll line: gross, PAYE, statutory deductions, net pay and reliefs."""
    try:
        tax_config = _load_config(None, year)
        result = sdk.compute_line(
            profile, tax_config,
            employer_headcount=employer_headcount,
            as_of=_parse_date(as_of),
        )
        return sdk.to_plain(result.model_dump())

    except Exception as e:
        logger.error(f"Error computing payroll line: {e}")
        return {"error": str(e)}


@mcp.tool()
async def compute_batch(
    profiles: list[dict] = Field(description="Employee records"),
    year: int | None = Field(default=None, description="Tax year (default: latest available)"),
    as_of: str | None = Field(default=None, description="Date for age-based rules, YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Compute payroll for a list of employees. Returns per-employee lines and batch totals."""
    try:
        tax_config = _load_config(None, year)
        results = sdk.compute_batch(profiles, tax_config, as_of=_parse_date(as_of))
        return {
            "summary": sdk.to_plain(sdk.summarize_batch(results).model_dump()),
            "lines": [sdk.to_plain(r.model_dump()) for r in results],
        }

    except Exception as e:
        logger.error(f"Error computing payroll batch: {e}")
        return {"error": str(e), "lines": []}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
