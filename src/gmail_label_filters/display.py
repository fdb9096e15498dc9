"""Rich-based display functions for Gmail Label Filters."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import RuleReport
from .rules import ClassifierRule

console = Console()


def display_rules(rules: list[ClassifierRule]) -> None:
    """Show the configured rules and the Gmail query each one runs."""
    table = Table(title="Rules")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Max threads", justify="right")
    table.add_column("Query", overflow="fold")

    for rule in rules:
        table.add_row(rule.name, str(rule.search_max), rule.search_filter())

    console.print(table)


def display_run_summary(reports: list[RuleReport], dry_run: bool = False) -> None:
    """Show one row per rule run, then the threads that failed."""
    table = Table(title="Run Summary" + (" (dry run)" if dry_run else ""))
    table.add_column("Rule")
    table.add_column("Threads", justify="right")
    table.add_column("Labeled", justify="right")
    table.add_column("Important", justify="right")
    table.add_column("Unlabeled", justify="right")
    table.add_column("Failed", justify="right")

    for report in reports:
        failed = report.failed
        failed_cell = f"[red]{failed}[/red]" if failed else "0"
        if report.error:
            failed_cell = "[red]search failed[/red]"
        table.add_row(
            report.rule_name,
            str(len(report.outcomes)),
            f"[green]{report.labeled}[/green]",
            str(report.important),
            f"[yellow]{report.unlabeled}[/yellow]" if report.unlabeled else "0",
            failed_cell,
        )

    console.print(table)

    total_threads = sum(len(r.outcomes) for r in reports)
    total_labeled = sum(r.labeled for r in reports)
    console.print(
        Panel(
            f"Threads processed: {total_threads}  |  Labeled: {total_labeled}",
            title="Summary",
        )
    )

    for report in reports:
        if report.error:
            console.print(f"[red]{report.rule_name}: search failed - {escape(report.error)}[/red]")
        for outcome in report.outcomes:
            if outcome.error is not None:
                console.print(
                    f'[red]{report.rule_name}: "{escape(outcome.subject)}" (id={outcome.thread_id}) '
                    f"- {escape(outcome.error)}[/red]"
                )
