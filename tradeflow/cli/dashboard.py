"""Dashboard command for TradeFlow CLI.

Shows the cumulative RR equity curve and the distribution of trades by
session.
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradeflow.cli.common import get_journal_service, report_errors
from tradeflow.models import EquityCurve, JournalEntry, Outcome, SessionDistribution

console = Console()

BAR_WIDTH = 30


def _summary_panel(entries: list[JournalEntry], curve: EquityCurve) -> Panel:
    wins = sum(1 for e in entries if e.outcome is Outcome.WIN)
    losses = sum(1 for e in entries if e.outcome is Outcome.LOSS)
    decided = wins + losses
    win_rate = f"{wins / decided * 100:.1f}%" if decided else "-"

    total = curve.final_rr
    color = "green" if total >= 0 else "red"
    return Panel(
        f"Trades: [cyan]{len(entries)}[/cyan]   "
        f"Wins: [green]{wins}[/green]   Losses: [red]{losses}[/red]   "
        f"Win rate: [cyan]{win_rate}[/cyan]   "
        f"Net RR: [{color}]{total:+.2f}R[/{color}]",
        title="[bold]Summary[/bold]",
        border_style="cyan",
    )


def _equity_table(curve: EquityCurve) -> Table:
    """Cumulative RR per trade with a bar scaled to the largest excursion."""
    peak = max((abs(p.cumulative_rr) for p in curve.points), default=0.0) or 1.0

    table = Table(title="Equity Curve (Cumulative RR)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Trade")
    table.add_column("Cumulative RR", justify="right")
    table.add_column("")
    for point in curve.points:
        width = round(abs(point.cumulative_rr) / peak * BAR_WIDTH)
        color = "green" if point.cumulative_rr >= 0 else "red"
        table.add_row(
            str(point.index),
            point.label,
            f"[{color}]{point.cumulative_rr:+.2f}R[/{color}]",
            f"[{color}]{'█' * width}[/{color}]",
        )
    return table


def _session_table(distribution: SessionDistribution) -> Table:
    table = Table(title="Trades by Session")
    table.add_column("Session")
    table.add_column("Trades", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("")
    for slice_ in distribution.slices:
        share = distribution.percentage(slice_.label)
        table.add_row(
            f"[{slice_.color}]{slice_.label}[/{slice_.color}]",
            str(slice_.count),
            f"{share:.1f}%",
            f"[{slice_.color}]{'█' * round(share / 100 * BAR_WIDTH)}[/{slice_.color}]",
        )
    return table


@click.command()
@click.option("--equity/--no-equity", default=True, help="Show the equity curve.")
@click.option("--sessions/--no-sessions", default=True, help="Show the session distribution.")
def dashboard(equity: bool, sessions: bool) -> None:
    """Show your equity curve and session distribution."""
    from tradeflow.analytics.equity import build_equity_curve
    from tradeflow.analytics.sessions import session_distribution
    from tradeflow.config import require_login

    with report_errors("load dashboard"):
        owner = require_login()
        entries = get_journal_service().list_entries(owner, ascending=True)

    curve = build_equity_curve(entries)
    if curve.is_empty:
        console.print(Panel(
            "[yellow]No journal entries yet.[/yellow]\n\n"
            "[dim]Log trades with [cyan]tradeflow add[/cyan] to see your equity curve.[/dim]",
            title="[bold]Dashboard[/bold]",
            border_style="yellow",
        ))
        return

    console.print(_summary_panel(entries, curve))
    if equity:
        console.print(_equity_table(curve))
    if sessions:
        console.print(_session_table(session_distribution(entries)))
