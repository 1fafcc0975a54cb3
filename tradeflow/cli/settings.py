"""Settings commands for TradeFlow CLI.

Manage the option lists offered for each journal field, the default
values pre-filled into new entries, and the custom columns shared by
every journal.
"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from tradeflow.cli.common import get_journal_service, get_settings_service, report_errors, tag_badges
from tradeflow.constants import FIELD_LABELS, JOURNAL_ENTRY_FIELDS
from tradeflow.models import JournalField

console = Console()


VOCABULARY_FIELDS = [f for f in JOURNAL_ENTRY_FIELDS if f.has_vocabulary]
DEFAULTABLE_FIELDS = [f for f in JOURNAL_ENTRY_FIELDS if f is not JournalField.DATE]


class FieldType(click.ParamType):
    """Journal field given by its key, e.g. poi or reactionToPoi."""

    name = "field"

    def __init__(self, fields: list[JournalField]):
        self.fields = fields

    def get_metavar(self, param, ctx=None) -> str:
        return "[" + "|".join(f.value for f in self.fields) + "]"

    def convert(self, value, param, ctx) -> JournalField:
        if isinstance(value, JournalField):
            return value
        for field in self.fields:
            if field.value.lower() == str(value).replace("_", "").lower():
                return field
        self.fail(
            f"'{value}' is not one of: {', '.join(f.value for f in self.fields)}",
            param,
            ctx,
        )


def _format_default(value) -> str:
    if value is None:
        return "[dim]-[/dim]"
    if isinstance(value, list):
        return ", ".join(value)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# ==================== Options ====================


@click.group()
def options() -> None:
    """Manage the selectable values of journal fields.

    \b
    Examples:
      tradeflow options list poi
      tradeflow options add poi "Breaker Block"
      tradeflow options rename poi "Liquidity Pool" "Liquidity"
      tradeflow options remove poi Trendline
    """
    pass


@options.command("list")
@click.argument("field", type=FieldType(VOCABULARY_FIELDS), required=False)
def list_options(field: Optional[JournalField]) -> None:
    """Show option lists, for one field or all of them."""
    from tradeflow.config import require_login

    fields = [field] if field else VOCABULARY_FIELDS
    with report_errors("load options"):
        owner = require_login()
        service = get_settings_service()
        rows = [(f, service.get_options(f, owner), service.get_default(f, owner)) for f in fields]

    table = Table(title="Field Options")
    table.add_column("Field", style="cyan")
    table.add_column("Key", style="dim")
    table.add_column("Options")
    table.add_column("Default")
    for f, values, default in rows:
        table.add_row(FIELD_LABELS[f], f.value, tag_badges(values), _format_default(default))
    console.print(table)


@options.command("add")
@click.argument("field", type=FieldType(VOCABULARY_FIELDS))
@click.argument("value")
def add_option(field: JournalField, value: str) -> None:
    """Add VALUE to the options of FIELD."""
    from tradeflow.config import require_login

    if not value.strip():
        console.print("[yellow]Option cannot be empty.[/yellow]")
        return

    with report_errors("add option"):
        owner = require_login()
        service = get_settings_service()
        if value.strip() in service.get_options(field, owner):
            console.print(f"[yellow]'{value.strip()}' is already an option of {FIELD_LABELS[field]}[/yellow]")
            return
        service.add_option(field, owner, value)

    console.print(f"[green]✓ Added '{value.strip()}' to {FIELD_LABELS[field]}[/green]")


@options.command("remove")
@click.argument("field", type=FieldType(VOCABULARY_FIELDS))
@click.argument("value")
def remove_option(field: JournalField, value: str) -> None:
    """Remove VALUE from the options of FIELD.

    If VALUE is the field's default it is removed from the default too.
    Existing journal entries keep the value.
    """
    from tradeflow.config import require_login

    with report_errors("remove option"):
        owner = require_login()
        service = get_settings_service()
        if value not in service.get_options(field, owner):
            console.print(f"[yellow]'{value}' is not an option of {FIELD_LABELS[field]}[/yellow]")
            return
        service.remove_option(field, owner, value)

    console.print(f"[green]✓ Removed '{value}' from {FIELD_LABELS[field]}[/green]")


@options.command("rename")
@click.argument("field", type=FieldType(VOCABULARY_FIELDS))
@click.argument("old_value")
@click.argument("new_value")
def rename_option(field: JournalField, old_value: str, new_value: str) -> None:
    """Rename OLD_VALUE to NEW_VALUE in the options of FIELD."""
    from tradeflow.config import require_login

    with report_errors("rename option"):
        owner = require_login()
        get_settings_service().rename_option(field, owner, old_value, new_value)

    console.print(f"[green]✓ Renamed '{old_value}' to '{new_value.strip()}' in {FIELD_LABELS[field]}[/green]")


# ==================== Defaults ====================


@click.group()
def defaults() -> None:
    """Manage values pre-filled into new journal entries.

    \b
    Examples:
      tradeflow defaults show
      tradeflow defaults set session London
      tradeflow defaults set psychology Disciplined Confident
      tradeflow defaults set rrRatio 2
      tradeflow defaults clear session
    """
    pass


@defaults.command("show")
def show_defaults() -> None:
    """Show every configured default."""
    from tradeflow.config import require_login

    with report_errors("load defaults"):
        owner = require_login()
        values = get_settings_service().get_form_defaults(owner)

    if not values:
        console.print("[yellow]No defaults configured.[/yellow]")
        return

    table = Table(title="Field Defaults")
    table.add_column("Field", style="cyan")
    table.add_column("Default")
    for field in DEFAULTABLE_FIELDS:
        if field in values:
            table.add_row(FIELD_LABELS[field], _format_default(values[field]))
    console.print(table)


@defaults.command("set")
@click.argument("field", type=FieldType(DEFAULTABLE_FIELDS))
@click.argument("values", nargs=-1, required=True)
def set_default(field: JournalField, values: tuple[str, ...]) -> None:
    """Set the default of FIELD.

    Multi-value fields take several VALUES; other fields take one.
    """
    from tradeflow.config import require_login

    if field.is_multi_select:
        value = [v.strip() for v in values if v.strip()]
    elif len(values) != 1:
        raise click.BadParameter(f"{field.value} takes a single value", param_hint="VALUES")
    elif field is JournalField.RR_RATIO:
        try:
            value = float(values[0])
        except ValueError:
            raise click.BadParameter(f"'{values[0]}' is not a number", param_hint="VALUES")
        if value <= 0:
            raise click.BadParameter("RR ratio must be positive", param_hint="VALUES")
    else:
        value = values[0].strip()

    with report_errors("set default"):
        owner = require_login()
        get_settings_service().set_default(field, owner, value or None)

    console.print(f"[green]✓ Default for {FIELD_LABELS[field]}: {_format_default(value or None)}[/green]")


@defaults.command("clear")
@click.argument("field", type=FieldType(DEFAULTABLE_FIELDS))
def clear_default(field: JournalField) -> None:
    """Clear the default of FIELD."""
    from tradeflow.config import require_login

    with report_errors("clear default"):
        owner = require_login()
        get_settings_service().set_default(field, owner, None)

    console.print(f"[green]✓ Cleared default for {FIELD_LABELS[field]}[/green]")


# ==================== Custom Columns ====================


@click.group()
def columns() -> None:
    """Manage custom journal columns.

    Custom columns are shared by every user. Removing one keeps the values
    already stored on entries.
    """
    pass


@columns.command("list")
def list_columns() -> None:
    """Show custom columns."""
    with report_errors("load custom columns"):
        items = get_journal_service().list_custom_columns()

    if not items:
        console.print("[yellow]No custom columns defined.[/yellow]")
        return

    table = Table(title="Custom Columns")
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Created")
    for column in items:
        table.add_row(column.name, column.id[:8], column.created_at.strftime("%Y-%m-%d"))
    console.print(table)


@columns.command("add")
@click.argument("name")
def add_column(name: str) -> None:
    """Add a custom column called NAME."""
    with report_errors("add custom column"):
        column = get_journal_service().add_custom_column(name)

    console.print(f"[green]✓ Added custom column '{column.name}'[/green]")


@columns.command("remove")
@click.argument("name")
def remove_column(name: str) -> None:
    """Remove the custom column called NAME (or with that ID)."""
    with report_errors("remove custom column"):
        service = get_journal_service()
        matches = [
            c for c in service.list_custom_columns()
            if c.name == name.strip() or c.id.startswith(name)
        ]
        if not matches:
            console.print(f"[yellow]No custom column '{name}'[/yellow]")
            return
        service.remove_custom_column(matches[0].id)

    console.print(f"[green]✓ Removed custom column '{matches[0].name}'[/green]")
