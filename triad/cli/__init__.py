"""
triad/cli/__init__.py

triad CLI — root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    triad = "triad.cli:cli"
"""

import click

from triad.cli.simulate import simulate_command
from triad.cli.verify import summary_command, verify_command


@click.group()
@click.version_option(package_name="triad")
def cli() -> None:
    """
    triad — wager settlement engine tools.

    \b
    Commands:
      verify    Verify an audit journal — schema, chain, signatures.
      summary   Event counts and money totals recorded in a journal.
      simulate  Play seeded rounds against an in-process oracle.

    \b
    Quick start:
      triad simulate --rounds 20 --seed 7 --journal .triad/journal
      triad verify .triad/journal
      triad summary .triad/journal --format json
    """
    pass


cli.add_command(verify_command)
cli.add_command(summary_command)
cli.add_command(simulate_command)
