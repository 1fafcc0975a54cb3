"""Main CLI entry point for TradeFlow.

This module provides the main click group and lazy loading
for heavy imports to improve startup time.
"""

import logging

import click
from rich.console import Console

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    This improves CLI startup time by only importing
    command modules when they are actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Identity and config
    "init": "tradeflow.cli.auth",
    "login": "tradeflow.cli.auth",
    "logout": "tradeflow.cli.auth",
    "whoami": "tradeflow.cli.auth",
    # Journal
    "add": "tradeflow.cli.journal",
    "edit": "tradeflow.cli.journal",
    "log": "tradeflow.cli.journal",
    "show": "tradeflow.cli.journal",
    "delete": "tradeflow.cli.journal",
    "clear": "tradeflow.cli.journal",
    "custom": "tradeflow.cli.journal",
    # Settings
    "options": "tradeflow.cli.settings",
    "defaults": "tradeflow.cli.settings",
    "columns": "tradeflow.cli.settings",
    # Dashboard and analysis
    "dashboard": "tradeflow.cli.dashboard",
    "analyze": "tradeflow.cli.analyze",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    if not verbose:
        # The SDK logs retries and HTTP traffic at INFO
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradeflow")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TradeFlow - a trading journal with AI pattern analysis.

    Log discretionary trades with structured tags, review them in a
    filterable log, chart your equity curve and let an AI agent
    suggest strategies from your recurring setups.

    \b
    Quick Start:
      tradeflow login alice     # Choose who you are
      tradeflow add --help      # Log a trade
      tradeflow log             # Browse your journal
      tradeflow dashboard       # Equity curve and sessions
      tradeflow analyze         # Suggest strategies
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
