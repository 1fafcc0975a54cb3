"""Pattern analysis command for TradeFlow CLI.

Suggests strategies from recurring combinations of POI, reaction,
premarket condition and entry type, either with the AI agent or with the
local deterministic engine.
"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tradeflow.cli.common import format_rr, get_journal_service, report_errors, tag_badges
from tradeflow.constants import DISPLAY_EXAMPLE_LIMIT
from tradeflow.models import SuggestedStrategy

console = Console()


def _confidence_style(confidence: float) -> str:
    if confidence >= 0.6:
        return "green"
    if confidence >= 0.35:
        return "yellow"
    return "red"


def _strategy_panel(rank: int, strategy: SuggestedStrategy) -> Panel:
    details = Table(show_header=False, box=None, padding=(0, 1))
    details.add_column("Field", style="dim")
    details.add_column("Value")
    details.add_row("POI", tag_badges(strategy.poi_combination))
    details.add_row("Reaction", tag_badges(strategy.reaction_to_poi_combination))
    details.add_row("Entry type", strategy.entry_type)
    if strategy.premarket_condition_combination:
        details.add_row("Premarket", tag_badges(strategy.premarket_condition_combination))
    details.add_row("Strategy", strategy.strategy)

    examples = strategy.example_trades[:DISPLAY_EXAMPLE_LIMIT]
    if examples:
        details.add_row(
            "Examples",
            ", ".join(f"{t.date} {t.outcome} {format_rr(t.rr_ratio)}" for t in examples),
        )
    hidden = len(strategy.example_trades) - len(examples)
    if hidden > 0:
        details.add_row("", f"[dim]+{hidden} more[/dim]")

    style = _confidence_style(strategy.confidence)
    return Panel(
        details,
        title=f"[bold]#{rank}[/bold] [{style}]Confidence {strategy.confidence:.0%}[/{style}]",
        border_style=style,
    )


@click.command()
@click.option("--local", is_flag=True, help="Use the built-in engine instead of the AI agent.")
@click.option("--model", default=None, help="OpenAI model override.")
@click.option("-n", "--top", type=int, default=None, help="Show only the N best strategies.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def analyze(local: bool, model: Optional[str], top: Optional[int], as_json: bool) -> None:
    """Suggest strategies from your recurring trade setups.

    \b
    Examples:
      tradeflow analyze            # AI analysis
      tradeflow analyze --local    # Offline, deterministic
      tradeflow analyze --json     # Machine-readable output
    """
    from tradeflow.config import require_login
    from tradeflow.models import PatternAnalysisOutput

    with report_errors("analyze trading patterns"):
        owner = require_login()
        entries = get_journal_service().list_entries(owner)

        if not entries:
            console.print("[yellow]No journal entries to analyze.[/yellow]")
            return

        if local:
            from tradeflow.analytics.patterns import analyze_patterns

            strategies = analyze_patterns(entries)
        else:
            from tradeflow.agents.pattern_analyzer import PatternAnalyzerAgent

            with console.status(f"[dim]Analyzing {len(entries)} trades...[/dim]"):
                strategies = PatternAnalyzerAgent(model=model).analyze(entries)

    if top:
        strategies = strategies[:top]

    if as_json:
        output = PatternAnalysisOutput(suggested_strategies=strategies)
        click.echo(output.model_dump_json(by_alias=True, indent=2))
        return

    if not strategies:
        console.print(Panel(
            "No recurring patterns were found in your journal.\n\n"
            "[dim]Log more trades and try again.[/dim]",
            title="[bold]Analysis Complete[/bold]",
            border_style="yellow",
        ))
        return

    console.print(f"[bold]Suggested strategies from {len(entries)} trades[/bold]\n")
    for rank, strategy in enumerate(strategies, 1):
        console.print(_strategy_panel(rank, strategy))
