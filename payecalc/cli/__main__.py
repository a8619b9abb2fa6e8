"""PAYE Calc CLI - Command-line interface for Nigerian PAYE computation."""

import logging
import os

import click

from payecalc import __version__

from .config_commands import config as config_group
from .compute_commands import tax_command, line_command, batch_command


@click.group()
@click.version_option(version=__version__, prog_name="paye-calc")
def cli():
    """PAYE Calc - Nigerian PAYE tax and statutory deduction engine.

    Computes PAYE, pension, NHF, NHIS, NSITF and ITF for employees,
    and recommends reliefs and exemptions they qualify for.

    Tax rules are loaded from (in order):

    \b
    1. --config FILE (where a command accepts it)
    2. $PAYE_CALC_CONFIG_PATH/tax-rules/<year>.yaml
    3. ~/.config/paye-calc/tax-rules/<year>.yaml (XDG default)
    4. Rules packaged with paye-calc

    Run 'paye-calc config show' to see the rules in effect.
    Set LOG_LEVEL=DEBUG to trace each calculation step.
    """
    pass


cli.add_command(config_group)
cli.add_command(tax_command)
cli.add_command(line_command)
cli.add_command(batch_command)


def main():
    """Entry point for the CLI."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    cli()


if __name__ == "__main__":
    main()
