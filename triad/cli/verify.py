"""
triad/cli/verify.py

triad verify / triad summary — audit journal inspection.

Exit codes:
    0  Journal fully valid (schema + sequence + chain + signatures)
    1  Journal has violations
    2  Error (file missing, malformed JSON, missing fields)
"""

import json
import sys
from pathlib import Path

import click

from triad.core.exceptions import JournalError
from triad.journal.verify import JournalReport, verify_journal


def _load_report(journal: str) -> JournalReport:
    try:
        return verify_journal(Path(journal))
    except JournalError as exc:
        click.echo(click.style(f"❌ Error: {exc}", fg="red"), err=True)
        sys.exit(2)


def _row(label: str, value, ok: bool = True) -> str:
    mark = click.style("✅", fg="green") if ok else click.style("❌", fg="red")
    return f"  {label:<18} {mark}  {value}"


@click.command("verify")
@click.argument("journal", type=click.Path())
@click.option(
    "--format", "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option("--quiet", is_flag=True, help="Exit code only.")
def verify_command(journal: str, fmt: str, quiet: bool) -> None:
    """Verify the journal at JOURNAL (directory or journal.jsonl)."""
    report = _load_report(journal)

    if quiet:
        sys.exit(0 if report.valid else 1)

    if fmt == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.valid else 1)

    by_type = {}
    for v in report.violations:
        by_type.setdefault(v.violation_type, []).append(v)

    click.echo()
    click.echo(click.style("triad journal verification", bold=True))
    click.echo(f"  {'journal':<18}     {journal}")
    click.echo(f"  {'entries':<18}     {report.total_entries}")
    click.echo(_row("schema", "ok" if "schema" not in by_type
                    else f"{len(by_type['schema'])} violation(s)", "schema" not in by_type))
    click.echo(_row("sequence", "ok" if "sequence_gap" not in by_type
                    else f"{len(by_type['sequence_gap'])} gap(s)", "sequence_gap" not in by_type))
    click.echo(_row("chain", "ok" if "chain_break" not in by_type
                    else f"{len(by_type['chain_break'])} break(s)", "chain_break" not in by_type))
    click.echo(_row(
        "signatures",
        f"{report.valid_signatures}/{report.total_entries} valid",
        "invalid_signature" not in by_type,
    ))

    for v in report.violations[:20]:
        click.echo(f"    #{v.at_sequence} {v.violation_type}: {v.detail}")
    if len(report.violations) > 20:
        click.echo(f"    ... {len(report.violations) - 20} more")

    click.echo()
    if report.valid:
        click.echo(click.style("✅ Journal valid", fg="green"))
        sys.exit(0)
    click.echo(click.style("❌ Journal has violations", fg="red"))
    sys.exit(1)


@click.command("summary")
@click.argument("journal", type=click.Path())
@click.option(
    "--format", "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
def summary_command(journal: str, fmt: str) -> None:
    """Show event counts and money totals recorded in JOURNAL."""
    report = _load_report(journal)

    if fmt == "json":
        click.echo(json.dumps({
            "valid":          report.valid,
            "event_counts":   report.event_counts,
            "outcome_counts": report.outcome_counts,
            "totals":         report.totals,
        }, indent=2))
        return

    click.echo(click.style("Events", bold=True))
    for event_type, count in sorted(report.event_counts.items()):
        click.echo(f"  {event_type:<20} {count}")
    click.echo(click.style("Outcomes", bold=True))
    for outcome, count in sorted(report.outcome_counts.items()):
        click.echo(f"  {outcome:<20} {count}")
    click.echo(click.style("Totals", bold=True))
    for name, amount in sorted(report.totals.items()):
        click.echo(f"  {name:<20} {amount}")
    if not report.valid:
        click.echo(click.style(
            f"⚠️  {len(report.violations)} violation(s); run `triad verify` for detail",
            fg="yellow",
        ))
