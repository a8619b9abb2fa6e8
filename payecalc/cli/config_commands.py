"""Tax rules CLI commands for PAYE Calc.

Shows where tax rules are read from, prints the rules in effect, and
validates rules files before a payroll run uses them.
"""

import json

import click
import yaml

from payecalc.sdk import (
    ConfigurationError,
    config_to_dict,
    default_tax_config,
    find_rules_file,
    get_available_years,
    get_config_dir,
    get_packaged_rules_dir,
    get_user_rules_dir,
    load_config_file,
    load_tax_config,
    validate_config,
)


@click.group()
def config():
    """Manage tax rules (tax-rules/<year>.yaml).

    User rules in the config directory override the packaged rules
    for the same tax year.
    """
    pass


@config.command("path")
def config_path():
    """Show config directories and available tax years."""
    click.echo(f"Config directory: {get_config_dir()}")
    click.echo(f"User rules:       {get_user_rules_dir()}")
    click.echo(f"Packaged rules:   {get_packaged_rules_dir()}")

    years = get_available_years()
    if years:
        click.echo(f"Tax years:        {', '.join(str(y) for y in years)}")
    else:
        click.echo("Tax years:        (none)")


def _echo_rules(data: dict, output_format: str):
    if output_format == "json":
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip())


@config.command("show")
@click.option("--year", type=int, help="Tax year (default: latest available)")
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default="yaml",
              help="Output format (default: yaml)")
def config_show(year, output_format):
    """Show the tax rules in effect for a year."""
    try:
        source = find_rules_file(year)
        tax_config = load_tax_config(path=source)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    if output_format == "yaml":
        click.echo(f"# Source: {source}")
    _echo_rules(config_to_dict(tax_config), output_format)


@config.command("defaults")
@click.option("--year", type=int, help="Tax year (default: latest packaged)")
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default="yaml",
              help="Output format (default: yaml)")
def config_defaults(year, output_format):
    """Print the packaged rules, e.g. as a starting point for overrides.

    \b
    Example:
        paye-calc config defaults > ~/.config/paye-calc/tax-rules/2026.yaml
    """
    try:
        tax_config = default_tax_config(year)
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    _echo_rules(config_to_dict(tax_config), output_format)


@config.command("validate")
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, help="Tax year to resolve when FILE is omitted")
def config_validate(file, year):
    """Validate a tax rules file.

    FILE defaults to the rules file in effect for --year (or the latest).
    Exits non-zero if the rules are invalid.
    """
    try:
        source = file or find_rules_file(year)
        data = load_config_file(source)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    result = validate_config(data)
    click.echo(f"File: {source}")
    if result.is_valid:
        click.echo("Valid.")
        return

    click.echo(f"Invalid ({len(result.errors)} error(s)):")
    for error in result.errors:
        click.echo(f"  - {error}")
    raise click.ClickException("Tax rules failed validation.")
