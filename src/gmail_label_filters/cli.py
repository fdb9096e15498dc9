"""CLI entry point for Gmail Label Filters."""

from __future__ import annotations

import click

from .auth import check_auth, get_gmail_service
from .display import display_rules, display_run_summary
from .errors import AuthenticationError
from .gmail_client import GmailMailStore
from .log import LOG_LEVELS, configure_logging
from .processor import FilterRunner
from .rules import RULES, default_rules, get_rule
from .store import DryRunMailStore


@click.group()
@click.version_option(version="0.1.0", prog_name="gmail-label-filters")
def cli() -> None:
    """Gmail Label Filters - label and route notification threads."""


@cli.command()
@click.option(
    "-r",
    "--rule",
    "rule_names",
    multiple=True,
    type=click.Choice(list(RULES)),
    help="Rule to run (repeatable). Defaults to all rules.",
)
@click.option(
    "-m", "--max-threads", default=None, type=click.IntRange(min=1), help="Maximum threads per rule."
)
@click.option("--dry-run", is_flag=True, help="Classify without changing the mailbox.")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log verbosity.",
)
def run(rule_names: tuple[str, ...], max_threads: int | None, dry_run: bool, log_level: str) -> None:
    """Label unlabeled threads and move them to the inbox or the archive."""
    configure_logging(log_level)

    try:
        service = get_gmail_service()
    except (FileNotFoundError, AuthenticationError) as e:
        raise click.ClickException(str(e)) from e

    store = GmailMailStore(service)
    if dry_run:
        store = DryRunMailStore(store)

    rules = [get_rule(name) for name in rule_names] if rule_names else default_rules()
    reports = FilterRunner(store).run_all(rules, search_max=max_threads)

    display_run_summary(reports, dry_run=dry_run)

    if any(r.failed or r.error for r in reports):
        raise SystemExit(1)


@cli.command(name="rules")
def rules_cmd() -> None:
    """List the rules and the Gmail query each one runs."""
    display_rules(default_rules())


@cli.command()
def auth() -> None:
    """Authorize Gmail access (opens a browser once) and test it."""
    if not check_auth():
        raise SystemExit(1)
