"""paytax CLI - Command-line interface for payroll withholding."""

import logging
import os

import click

from paytax import __version__

from .calc_commands import calc
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="paytax")
def cli():
    """paytax - Per-period payroll tax withholding.

    Computes federal income tax, Social Security, Medicare, state income
    tax and state disability insurance for one paycheck.

    Rules are loaded from (in order):

    \b
    1. rules_url setting / PAYTAX_RULES_URL (remote rule service)
    2. rules_dir setting / PAYTAX_RULES_DIR ({year}.yaml files)
    3. Embedded reference-year rules (always used as fallback)

    Set LOG_LEVEL=INFO or DEBUG to see rule resolution details.
    """
    pass


cli.add_command(calc)
cli.add_command(rules_group)
cli.add_command(settings_group)


def main():
    """Entry point for the paytax console script."""
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(levelname)s: %(message)s",
    )
    cli()


if __name__ == "__main__":
    main()
