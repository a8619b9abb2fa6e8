"""Computation commands: PAYE on an income, one payroll line, a batch."""

import json
from pathlib import Path

import click
import yaml
from rich.console import Console

from payecalc.sdk import (
    ConfigurationError,
    PayeCalcError,
    compute_batch,
    compute_line,
    compute_tax,
    load_tax_config,
    summarize_batch,
    to_plain,
)
from payecalc.sdk.money import format_naira, format_percent

from .renderers.payroll_renderer import render_batch, render_line

FORMAT_OPTION = click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), default="text",
    help="Output format (default: text)",
)
CONFIG_OPTION = click.option(
    "--config", "config_file", type=click.Path(exists=True, dir_okay=False),
    help="Tax rules file (default: resolved for --year)",
)
YEAR_OPTION = click.option("--year", type=int, help="Tax year (default: latest available)")
AS_OF_OPTION = click.option(
    "--as-of", type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Date ages are computed on, YYYY-MM-DD (default: today)",
)


def _tax_config(config_file, year):
    try:
        return load_tax_config(year=year, path=config_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e))


def _read_records(path: str):
    """Read a YAML or JSON file of employee records."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse {path}: {e}")


def _echo_json(data):
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.command("tax")
@click.argument("income")
@CONFIG_OPTION
@YEAR_OPTION
@FORMAT_OPTION
def tax_command(income, config_file, year, output_format):
    """Compute annual PAYE on a taxable income.

    INCOME is annual taxable income in Naira (commas allowed).

    \b
    Examples:
        paye-calc tax 1800000
        paye-calc tax 12,500,000 --format json
    """
    tax_config = _tax_config(config_file, year)
    try:
        result = compute_tax(income.replace(",", ""), tax_config.tax_brackets)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="INCOME")

    if output_format == "json":
        _echo_json(to_plain(result.model_dump()))
        return

    click.echo(f"PAYE FOR TAX YEAR {tax_config.tax_year} (config v{tax_config.version})")
    click.echo("=" * 60)
    click.echo(f"  {'Taxable income':<24} {format_naira(result.taxable_income):>18}")
    click.echo("")
    click.echo(f"  {'Bracket':<28} {'Rate':>6} {'Tax':>18}")
    for line in result.breakdown:
        click.echo(
            f"  {line.bracket.label():<28} {format_percent(line.bracket.rate):>6} "
            f"{format_naira(line.tax_in_bracket):>18}"
        )
    click.echo("  " + "-" * 54)
    click.echo(f"  {'Annual tax':<24} {format_naira(result.tax):>18}")
    click.echo(f"  {'Monthly PAYE':<24} {format_naira(result.tax / 12):>18}")
    click.echo(f"  {'Effective rate':<24} {format_percent(result.effective_rate):>18}")


@click.command("line")
@click.argument("profile_file", type=click.Path(exists=True, dir_okay=False))
@CONFIG_OPTION
@YEAR_OPTION
@AS_OF_OPTION
@click.option("--headcount", type=int, help="Employer headcount for the ITF threshold (default: ITF applies)")
@FORMAT_OPTION
def line_command(profile_file, config_file, year, as_of, headcount, output_format):
    """Compute one employee's monthly payroll line.

    PROFILE_FILE is a YAML or JSON employee record (basicSalary,
    allowances, housingSituation, annualRent, exemptFromNHF, ...).
    """
    tax_config = _tax_config(config_file, year)
    record = _read_records(profile_file)

    try:
        result = compute_line(
            record, tax_config,
            employer_headcount=headcount,
            as_of=as_of.date() if as_of else None,
        )
    except PayeCalcError as e:
        raise click.ClickException(str(e))

    data = to_plain(result.model_dump())
    if output_format == "json":
        _echo_json(data)
    else:
        render_line(Console(width=120), data)


@click.command("batch")
@click.argument("profiles_file", type=click.Path(exists=True, dir_okay=False))
@CONFIG_OPTION
@YEAR_OPTION
@AS_OF_OPTION
@click.option("--workers", type=int, default=1, show_default=True, help="Worker threads")
@FORMAT_OPTION
def batch_command(profiles_file, config_file, year, as_of, workers, output_format):
    """Compute payroll for every employee in a file.

    PROFILES_FILE is a YAML or JSON list of employee records, or a
    mapping with an 'employees' list. Bad fields in a record fall back
    to defaults and are reported as warnings on that employee's line.
    """
    tax_config = _tax_config(config_file, year)
    records = _read_records(profiles_file)
    if isinstance(records, dict):
        records = records.get("employees")
    if not isinstance(records, list):
        raise click.ClickException(
            f"{Path(profiles_file).name} must contain a list of employee records "
            f"or an 'employees' list"
        )

    try:
        results = compute_batch(
            records, tax_config,
            max_workers=workers,
            as_of=as_of.date() if as_of else None,
        )
    except PayeCalcError as e:
        raise click.ClickException(str(e))

    lines = [to_plain(r.model_dump()) for r in results]
    summary = to_plain(summarize_batch(results).model_dump())
    if output_format == "json":
        _echo_json({"summary": summary, "lines": lines})
    else:
        render_batch(Console(width=120), lines, summary)
