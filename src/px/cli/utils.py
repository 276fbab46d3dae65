"""Utility functions for CLI commands."""

import functools
import logging
from datetime import datetime
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from px.config import Config, PxConfig
from px.core.git import GitStatusProvider
from px.errors import ProjectNotFoundError, PxError
from px.managers.index_store import IndexStore
from px.managers.search import ProjectSearcher
from px.models import Project

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route px log records to stderr through rich."""
    logger = logging.getLogger("px")
    logger.handlers.clear()
    handler = RichHandler(
        console=err_console, show_time=False, show_path=False, markup=False
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def handle_cli_error(func):
    """Turn px errors into a red message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PxError as e:
            console.print(f"[red]❌ {e}[/red]")
            raise typer.Exit(1)

    return wrapper


def get_config_with_data() -> Tuple[Config, PxConfig]:
    """Load px config from the default location.

    Returns:
        tuple: (config, config_data)
    """
    config = Config()
    return config, config.load()


def get_store(config_data: PxConfig) -> IndexStore:
    """Open the project index configured by config_data."""
    return IndexStore.open(
        provider=GitStatusProvider(timeout=config_data.git_timeout),
        max_depth=config_data.max_depth,
        threads=config_data.threads,
    )


def resolve_project(store: IndexStore, query: str) -> Optional[Project]:
    """Best match for query, or None after telling the user nothing matched."""
    try:
        return ProjectSearcher().best_match(
            list(store.projects.values()), query, strict=True
        )
    except ProjectNotFoundError as e:
        console.print(f"[yellow]{escape(str(e))}[/yellow]")
        return None


def truncate(text: str, max_len: int) -> str:
    """Shorten text with an ellipsis when longer than max_len."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_time(dt: Optional[datetime]) -> str:
    """Render a timestamp in local time, or '-' when absent."""
    if dt is None:
        return "-"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")
