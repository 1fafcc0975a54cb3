"""Journal commands for TradeFlow CLI.

Handles adding, editing, browsing and deleting journal entries. Values
not given on the command line are pre-filled from the field defaults
configured with ``tradeflow defaults``.
"""

from datetime import date, datetime
from typing import Any, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradeflow.cli.common import (
    format_rr,
    get_journal_service,
    get_settings_service,
    report_errors,
    tag_badges,
)
from tradeflow.constants import FIELD_ATTRIBUTES, FIELD_LABELS, JOURNAL_ENTRY_FIELDS
from tradeflow.errors import EntryNotFoundError
from tradeflow.models import JournalEntry, JournalEntryInput, JournalField, Outcome

console = Console()


OUTCOME_COLORS = {
    Outcome.WIN: "green",
    Outcome.LOSS: "red",
    Outcome.BREAKEVEN: "yellow",
}


def entry_options(func):
    """Attach the journal form options shared by add and edit."""
    options = [
        click.option("--pair", help="Instrument pair, e.g. EUR/USD."),
        click.option("--date", "trade_date", type=click.DateTime(formats=["%Y-%m-%d"]),
                     help="Trade date (YYYY-MM-DD). Defaults to today."),
        click.option("--type", "direction", type=click.Choice(["Long", "Short"], case_sensitive=False),
                     help="Trade direction."),
        click.option("--premarket", multiple=True, help="Premarket condition (repeatable)."),
        click.option("--poi", multiple=True, help="Point of interest (repeatable)."),
        click.option("--reaction", multiple=True, help="Reaction to the POI (repeatable)."),
        click.option("--entry-type", help="Entry type, e.g. Limit."),
        click.option("--session", help="Trading session, e.g. London."),
        click.option("--psychology", multiple=True, help="Psychology tag (repeatable)."),
        click.option("--outcome", type=click.Choice([o.value for o in Outcome], case_sensitive=False),
                     help="Trade outcome."),
        click.option("--rr", type=float, help="Risk/reward ratio, e.g. 2.5."),
        click.option("--chart-url", help="TradingView chart URL."),
        click.option("--tp", multiple=True, help="Take profit reason (repeatable)."),
        click.option("--sl", multiple=True, help="Stop loss reason (repeatable)."),
        click.option("--custom", "custom_values", multiple=True, metavar="NAME=VALUE",
                     help="Custom column value (repeatable)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _given_values(values: dict[str, Any]) -> dict[str, Any]:
    """Map command line options onto JournalEntryInput attributes.

    Options that were not given are left out.
    """
    given = {
        "pair": values.get("pair"),
        "date": values["trade_date"].date() if values.get("trade_date") else None,
        "direction": values["direction"].capitalize() if values.get("direction") else None,
        "premarket_condition": list(values.get("premarket") or []),
        "poi": list(values.get("poi") or []),
        "reaction_to_poi": list(values.get("reaction") or []),
        "entry_type": values.get("entry_type"),
        "session": values.get("session"),
        "psychology": list(values.get("psychology") or []),
        "outcome": values["outcome"].capitalize() if values.get("outcome") else None,
        "rr_ratio": values.get("rr"),
        "tradingview_chart_url": values.get("chart_url"),
        "tp": list(values.get("tp") or []),
        "sl": list(values.get("sl") or []),
    }
    return {k: v for k, v in given.items() if v is not None and v != []}


def parse_custom_values(pairs: tuple[str, ...], known: Optional[set[str]] = None) -> dict[str, str]:
    """Parse NAME=VALUE arguments.

    Args:
        pairs: Raw arguments.
        known: Defined custom column names; unknown names are rejected.
    """
    data = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise click.BadParameter(f"Expected NAME=VALUE, got '{pair}'", param_hint="--custom")
        if known is not None and name not in known:
            raise click.BadParameter(
                f"Unknown custom column '{name}'. Add it with 'tradeflow columns add'.",
                param_hint="--custom",
            )
        data[name] = value.strip()
    return data


def _defaults_as_form(owner: str) -> dict[str, Any]:
    """Stored field defaults keyed by entry attribute."""
    defaults = get_settings_service().get_form_defaults(owner)
    return {
        FIELD_ATTRIBUTES[field]: value
        for field, value in defaults.items()
        if field in FIELD_ATTRIBUTES and field is not JournalField.DATE
    }


def resolve_entry(service, owner: str, entry_id: str) -> JournalEntry:
    """Find an entry by full ID or unique ID prefix.

    Raises:
        EntryNotFoundError: If nothing or more than one entry matches.
    """
    entry = service.get_entry(entry_id, owner)
    if entry is not None:
        return entry

    matches = [e for e in service.list_entries(owner) if e.id.startswith(entry_id)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise EntryNotFoundError(f"ID prefix '{entry_id}' matches {len(matches)} entries; use more characters.")
    raise EntryNotFoundError("Entry not found or permission denied.")


def _entry_panel(entry: JournalEntry, title: str, border_style: str = "cyan") -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("ID", entry.id)
    for field in JOURNAL_ENTRY_FIELDS:
        value = getattr(entry, FIELD_ATTRIBUTES[field])
        if field.is_multi_select:
            rendered = tag_badges(value) if value else "-"
        elif field is JournalField.RR_RATIO:
            rendered = format_rr(value)
        elif field is JournalField.OUTCOME:
            rendered = f"[{OUTCOME_COLORS[value]}]{value.value}[/{OUTCOME_COLORS[value]}]"
        elif hasattr(value, "value"):
            rendered = value.value
        else:
            rendered = str(value) if value not in (None, "") else "-"
        table.add_row(FIELD_LABELS[field], rendered)
    for name, value in sorted(entry.custom_data.items()):
        table.add_row(name, value or "-")
    table.add_row("Created", entry.created_at.strftime("%Y-%m-%d %H:%M"))

    return Panel(table, title=f"[bold]{title}[/bold]", border_style=border_style)


@click.command()
@entry_options
def add(**values) -> None:
    """Log a new trade.

    \b
    Examples:
      tradeflow add --pair EUR/USD --type long --premarket Sweep \\
        --poi "Order Block" --reaction "Strong Rejection" --entry-type Limit \\
        --session London --outcome win --rr 2.5 --tp Liquidity --sl Structure
    """
    from tradeflow.config import require_login

    with report_errors("add entry"):
        owner = require_login()
        service = get_journal_service()
        known = {c.name for c in service.list_custom_columns()}

        form = _defaults_as_form(owner)
        form.setdefault("date", date.today())
        form.update(_given_values(values))
        form["custom_data"] = parse_custom_values(values.get("custom_values") or (), known)

        entry = service.add_entry(JournalEntryInput.model_validate(form), owner)

    console.print(_entry_panel(entry, "Journal Entry Added", "green"))


@click.command()
@click.argument("entry_id")
@entry_options
def edit(entry_id: str, **values) -> None:
    """Change fields of an existing entry.

    Only the options you pass are changed. Repeatable options replace the
    whole tag list.
    """
    from tradeflow.config import require_login

    with report_errors("update entry"):
        owner = require_login()
        service = get_journal_service()
        entry = resolve_entry(service, owner, entry_id)
        known = {c.name for c in service.list_custom_columns()}

        form = entry.form_data()
        form.update(_given_values(values))
        form["custom_data"] = {
            **entry.custom_data,
            **parse_custom_values(values.get("custom_values") or (), known),
        }

        updated = service.update_entry(entry.id, owner, JournalEntryInput.model_validate(form))

    console.print(_entry_panel(updated, "Journal Entry Updated", "green"))


@click.command("log")
@click.option("-s", "--search", help="Free-text search across every field.")
@click.option("--pair", help="Only this pair.")
@click.option("--outcome", type=click.Choice([o.value for o in Outcome], case_sensitive=False),
              help="Only this outcome.")
@click.option("--from", "date_from", type=click.DateTime(formats=["%Y-%m-%d"]), help="Earliest date.")
@click.option("--to", "date_to", type=click.DateTime(formats=["%Y-%m-%d"]), help="Latest date.")
@click.option("--oldest-first", is_flag=True, help="Sort by date ascending.")
@click.option("-n", "--limit", type=int, default=None, help="Show at most N entries.")
def log_entries(
    search: Optional[str],
    pair: Optional[str],
    outcome: Optional[str],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    oldest_first: bool,
    limit: Optional[int],
) -> None:
    """Browse the journal.

    \b
    Examples:
      tradeflow log                           # Newest first
      tradeflow log --search "order block"    # Search every field
      tradeflow log --pair EUR/USD --outcome win --from 2024-01-01
    """
    from tradeflow.analytics.log import filter_entries, unique_outcomes, unique_pairs
    from tradeflow.config import require_login

    with report_errors("load journal"):
        owner = require_login()
        service = get_journal_service()
        entries = service.list_entries(owner, ascending=oldest_first)
        columns = service.list_custom_columns()

    if not entries:
        console.print("[yellow]No journal entries yet.[/yellow]")
        console.print("[dim]Log a trade with: tradeflow add --help[/dim]")
        return

    filtered = filter_entries(
        entries,
        search=search,
        pair=pair,
        outcome=Outcome(outcome.capitalize()) if outcome else None,
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
    )
    if not filtered:
        console.print("[yellow]No entries match your filters.[/yellow]")
        console.print(f"[dim]Pairs in journal: {', '.join(unique_pairs(entries))}[/dim]")
        outcomes = ", ".join(o.value for o in unique_outcomes(entries))
        console.print(f"[dim]Outcomes in journal: {outcomes}[/dim]")
        return

    shown = filtered[:limit] if limit else filtered

    table = Table(title=f"Journal ({len(filtered)} of {len(entries)} entries)")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Pair", style="cyan")
    table.add_column("Type")
    table.add_column("POI")
    table.add_column("Reaction")
    table.add_column("Entry")
    table.add_column("Session")
    table.add_column("Outcome")
    table.add_column("RR", justify="right")
    for column in columns:
        table.add_column(column.name)

    for entry in shown:
        color = OUTCOME_COLORS[entry.outcome]
        table.add_row(
            entry.id[:8],
            entry.date.isoformat(),
            entry.pair,
            entry.direction.value,
            tag_badges(entry.poi),
            tag_badges(entry.reaction_to_poi),
            entry.entry_type,
            entry.session or "-",
            f"[{color}]{entry.outcome.value}[/{color}]",
            format_rr(entry.rr_ratio),
            *(entry.custom_data.get(c.name) or "-" for c in columns),
        )

    console.print(table)


@click.command()
@click.argument("entry_id")
def show(entry_id: str) -> None:
    """Show every field of one entry."""
    from tradeflow.config import require_login

    with report_errors("load entry"):
        owner = require_login()
        entry = resolve_entry(get_journal_service(), owner, entry_id)

    console.print(_entry_panel(entry, f"{entry.pair} {entry.date.isoformat()}"))


@click.command()
@click.argument("entry_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
def delete(entry_id: str, yes: bool) -> None:
    """Permanently delete one entry."""
    from tradeflow.config import require_login

    with report_errors("delete entry"):
        owner = require_login()
        service = get_journal_service()
        entry = resolve_entry(service, owner, entry_id)

        if not yes and not click.confirm(
            f"Delete the {entry.pair} trade from {entry.date.isoformat()}? This cannot be undone."
        ):
            console.print("[dim]Cancelled.[/dim]")
            return

        service.delete_entry(entry.id, owner)

    console.print(f"[green]✓ Deleted entry {entry.id[:8]}[/green]")


@click.command()
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
def clear(yes: bool) -> None:
    """Permanently delete ALL of your journal entries."""
    from tradeflow.config import require_login

    with report_errors("delete all entries"):
        owner = require_login()
        service = get_journal_service()
        count = service.count_entries(owner)
        if count == 0:
            console.print("[yellow]No journal entries to delete.[/yellow]")
            return

        if not yes and not click.confirm(
            f"Delete all {count} journal entries for {owner}? This cannot be undone."
        ):
            console.print("[dim]Cancelled.[/dim]")
            return

        deleted = service.delete_all_entries(owner)

    console.print(Panel(
        f"[green]✓[/green] Deleted {deleted} journal entries",
        title="[bold green]Journal Cleared[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("entry_id")
@click.argument("values", nargs=-1, metavar="NAME=VALUE...")
@click.option("--unset", multiple=True, help="Remove a custom value (repeatable).")
def custom(entry_id: str, values: tuple[str, ...], unset: tuple[str, ...]) -> None:
    """Set custom column values on an entry.

    \b
    Examples:
      tradeflow custom 3f2a "Setup Grade=A+" Notes="News spike"
      tradeflow custom 3f2a --unset Notes
    """
    from tradeflow.config import require_login

    with report_errors("update custom data"):
        owner = require_login()
        service = get_journal_service()
        entry = resolve_entry(service, owner, entry_id)
        known = {c.name for c in service.list_custom_columns()}

        data = {**entry.custom_data, **parse_custom_values(values, known)}
        for name in unset:
            data.pop(name, None)
        service.update_custom_data(entry.id, owner, data)

    console.print(f"[green]✓ Updated custom data for entry {entry.id[:8]}[/green]")
