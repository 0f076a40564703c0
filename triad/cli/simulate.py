"""
triad/cli/simulate.py

triad simulate — seeded rounds against the in-process coordinator.
"""

import json
import random
from pathlib import Path
from typing import Optional

import click

from triad.core.choice import Choice
from triad.core.exceptions import ConfigError, TriadError
from triad.runtime.context import RuntimeContext


DEFAULT_CONFIG = {
    "engine": {"address": "triad-engine", "admin": "admin"},
    "oracle": {"address": "vrf-coordinator"},
}


@click.command("simulate")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="YAML runtime configuration.")
@click.option("--journal", type=click.Path(file_okay=False), default=None,
              help="Journal directory; overrides the config's journal section.")
@click.option("--rounds", type=click.IntRange(min=0), default=10, show_default=True)
@click.option("--players", type=click.IntRange(min=1), default=2, show_default=True)
@click.option("--stake", type=click.IntRange(min=0), default=10**18, show_default=True)
@click.option("--fund", type=click.IntRange(min=0), default=0, show_default=True,
              help="Administrator funding before the first round.")
@click.option("--seed", type=int, default=0, show_default=True)
def simulate_command(
    config_file: Optional[str],
    journal: Optional[str],
    rounds: int,
    players: int,
    stake: int,
    fund: int,
    seed: int,
) -> None:
    """Play ROUNDS seeded matches and print the resulting ledger state."""
    try:
        if config_file:
            if journal:
                raise ConfigError("--journal cannot be combined with --config")
            ctx = RuntimeContext.from_config(Path(config_file))
        else:
            config = dict(DEFAULT_CONFIG)
            if journal:
                config["journal"] = {"path": journal}
            ctx = RuntimeContext.from_dict(config)
    except TriadError as exc:
        raise click.ClickException(str(exc))

    engine = ctx.engine
    admin = engine.funding.admin
    rng = random.Random(seed)

    ctx.fee_token.mint(engine.address, engine.fee * rounds)
    if fund:
        ctx.wallets.credit(admin, fund)
        engine.fund(admin, fund)

    for i in range(rounds):
        player = f"player-{i % players}"
        ctx.wallets.credit(player, stake)
        engine.submit(player, Choice(rng.randrange(3)), stake)
        ctx.coordinator.fulfill_pending(rng)

    stats = engine.get_settlement_stats()
    stats["claimable"] = {
        f"player-{p}": engine.claimable_of(f"player-{p}") for p in range(players)
    }
    if ctx.journal is not None:
        stats["journal"] = str(ctx.journal.file)
    click.echo(json.dumps(stats, indent=2))
