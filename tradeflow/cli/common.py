"""Shared helpers for CLI commands."""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from tradeflow.errors import NotAuthenticatedError, TradeflowError

console = Console()
logger = logging.getLogger(__name__)


def get_store():
    """Get the journal store at the configured path."""
    from tradeflow.config import get_db_path
    from tradeflow.db.store import JournalStore

    return JournalStore(get_db_path())


def get_journal_service():
    from tradeflow.services.journal import JournalService

    return JournalService(get_store())


def get_settings_service():
    from tradeflow.services.settings import SettingsService

    return SettingsService(get_store())


def format_validation_error(error: ValidationError) -> str:
    """One line per offending field."""
    lines = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "entry"
        message = item["msg"].removeprefix("Value error, ")
        lines.append(f"  • {field}: {message}")
    return "\n".join(lines)


def error_panel(title: str, message: str) -> None:
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


@contextmanager
def report_errors(action: str) -> Iterator[None]:
    """Render application errors as a red panel and exit with status 1.

    Args:
        action: What the command was doing, e.g. "add entry".
    """
    try:
        yield
    except NotAuthenticatedError as e:
        error_panel(
            "Login Required",
            f"[red]{e}[/red]\n\n[dim]Run [cyan]tradeflow login NAME[/cyan] first.[/dim]",
        )
        raise SystemExit(1)
    except ValidationError as e:
        error_panel("Invalid Entry", f"[red]Please fix the following fields:[/red]\n\n{format_validation_error(e)}")
        raise SystemExit(1)
    except TradeflowError as e:
        logger.debug("Failed to %s", action, exc_info=True)
        error_panel("Error", f"[red]Failed to {action}:[/red]\n\n{e}")
        raise SystemExit(1)


def tag_badges(tags: Iterable[str]) -> Text:
    """Render tags as colored badges, each tag always in the same color."""
    from tradeflow.analytics.sessions import color_for_label

    text = Text()
    for i, tag in enumerate(tags):
        if i:
            text.append(" ")
        text.append(f" {tag} ", style=f"black on {color_for_label(tag)}")
    return text


def format_rr(rr) -> str:
    return "-" if rr is None else f"{rr:g}R"
