"""Identity and configuration commands for TradeFlow CLI.

The login name is the owner key that partitions every journal, option
list and default value in the store.
"""

import logging

import click
from rich.console import Console
from rich.panel import Panel

from tradeflow.cli.common import get_settings_service
from tradeflow.errors import StoreError

console = Console()
logger = logging.getLogger(__name__)


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a template configuration file.

    The file holds the OpenAI settings used by [cyan]tradeflow analyze[/cyan]
    and the database location.
    """
    from tradeflow.config import create_template_config, get_config_path

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_path}[/yellow]")
        console.print("[dim]Use --force to overwrite it.[/dim]")
        return

    config_path = create_template_config()
    console.print(Panel(
        f"[yellow]Configuration file created at:[/yellow]\n"
        f"[cyan]{config_path}[/cyan]\n\n"
        f"Add your OpenAI API key to enable AI analysis,\n"
        f"or set the OPENAI_API_KEY environment variable.",
        title="[bold]Configuration Created[/bold]",
        border_style="yellow",
    ))


@click.command()
@click.argument("name")
def login(name: str) -> None:
    """Log in as NAME.

    Every journal command afterwards reads and writes NAME's data. On login
    the option lists of every field are seeded with the built-in
    vocabulary if they do not exist yet.
    """
    from tradeflow.config import save_session

    name = name.strip()
    if not name:
        console.print("[red]Please enter a name.[/red]")
        raise SystemExit(1)

    save_session(name)

    # Seeding is best effort: an unusable store must not undo the login
    try:
        seeded = get_settings_service().seed_all_initial_settings(name)
    except StoreError as e:
        logger.warning("Could not open journal store to seed settings for %s: %s", name, e)
        seeded = []

    details = f"\n[dim]Seeded options for {len(seeded)} fields.[/dim]" if seeded else ""
    console.print(Panel(
        f"[green]✓[/green] Logged in as [cyan]{name}[/cyan]{details}",
        title="[bold green]Login Successful[/bold green]",
        border_style="green",
    ))


@click.command()
def logout() -> None:
    """Log out and forget the stored name."""
    from tradeflow.config import clear_session

    if clear_session():
        console.print(Panel(
            "[green]✓[/green] Session cleared\n\n"
            "[dim]Your journal remains intact. Log in again to access it.[/dim]",
            title="[bold green]Logout Successful[/bold green]",
            border_style="green",
        ))
    else:
        console.print("[yellow]Not logged in. Nothing to logout from.[/yellow]")


@click.command()
def whoami() -> None:
    """Show who is logged in."""
    from tradeflow.config import get_owner

    owner = get_owner()
    if owner is None:
        console.print("[yellow]Not logged in.[/yellow]")
        raise SystemExit(1)
    console.print(f"Logged in as [cyan]{owner}[/cyan]")
