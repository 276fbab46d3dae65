"""Main CLI entry point for px."""

import json
import subprocess
import time
from datetime import timedelta
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table as RichTable

from px.cli.utils import (
    console,
    format_time,
    get_config_with_data,
    get_store,
    handle_cli_error,
    resolve_project,
    setup_logging,
    truncate,
)
from px.config import Config
from px.managers.search import ProjectSearcher
from px.models import utc_now

app = typer.Typer(
    name="px",
    help="px - Fast project switcher with fuzzy search and frecency tracking",
    add_completion=False,
    invoke_without_command=True,
)

LIST_FILTERS = ("has-changes", "inactive-30d", "inactive-90d")
LIST_FORMATS = ("pretty", "json", "path")

STATUS_LABELS = {
    "changes": "[yellow]⚠ changes[/yellow]",
    "ahead": "[cyan]↑ ahead[/cyan]",
    "behind": "[magenta]↓ behind[/magenta]",
    "clean": "[green]✓ clean[/green]",
}


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging on stderr"
    ),
):
    """
    px - Fast project switcher with fuzzy search and frecency tracking
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def init():
    """Create a default px config file."""
    config = Config()
    try:
        config.init()
    except FileExistsError:
        console.print(f"[yellow]Config file already exists at: {config.config_path}[/yellow]")
        console.print("Edit manually or delete to regenerate")
        return

    console.print(f"[green]✅ Created px config at: {config.config_path}[/green]")
    console.print("\nEdit this file to customize:")
    console.print("  - scan_dirs: directories to search for projects")
    console.print("  - default_editor: editor command (code, cursor, vim, etc.)")


@app.command()
@handle_cli_error
def sync():
    """Re-index projects by scanning configured directories."""
    config, config_data = get_config_with_data()
    scan_dirs = config.expanded_scan_dirs()

    if not scan_dirs:
        console.print("[yellow]⚠️  No scan directories configured![/yellow]")
        console.print("Run `px init` to create a config file, then edit:")
        console.print(f"  {config.config_path}")
        return

    console.print(f"Scanning {len(scan_dirs)} directories...")
    for scan_dir in scan_dirs:
        console.print(f"  • {scan_dir}")

    store = get_store(config_data)
    start = time.perf_counter()
    count = store.sync(scan_dirs)
    elapsed = time.perf_counter() - start

    console.print(f"\n[green]✓ Indexed {count} projects in {elapsed:.2f}s[/green]")


@app.command(name="list")
@handle_cli_error
def list_projects(
    filter: Optional[str] = typer.Option(
        None, "--filter", help="Filter projects (has-changes, inactive-30d, inactive-90d)"
    ),
    format: str = typer.Option(
        "pretty", "--format", "-f", help="Output format (pretty, json, path)"
    ),
):
    """List all projects, most relevant first."""
    if filter is not None and filter not in LIST_FILTERS:
        console.print(f"[red]❌ Unknown filter '{filter}'. Choose from: {', '.join(LIST_FILTERS)}[/red]")
        raise typer.Exit(1)
    if format not in LIST_FORMATS:
        console.print(f"[red]❌ Unknown format '{format}'. Choose from: {', '.join(LIST_FORMATS)}[/red]")
        raise typer.Exit(1)

    _, config_data = get_config_with_data()
    projects = get_store(config_data).sorted_projects()

    if filter == "has-changes":
        projects = [p for p in projects if p.git_status.has_uncommitted]
    elif filter in ("inactive-30d", "inactive-90d"):
        cutoff = utc_now() - timedelta(days=30 if filter == "inactive-30d" else 90)
        projects = [
            p for p in projects if p.last_accessed is None or p.last_accessed < cutoff
        ]

    if format == "json":
        typer.echo(json.dumps([p.model_dump(mode="json", exclude_none=True) for p in projects], indent=2))
        return
    if format == "path":
        for project in projects:
            typer.echo(str(project.path))
        return

    if not projects:
        if filter:
            console.print("[yellow]No projects found matching filter[/yellow]")
        else:
            console.print("[yellow]No projects indexed yet. Run `px sync` to scan for projects.[/yellow]")
        return

    table = RichTable(title="Projects")
    table.add_column("Project", style="cyan")
    table.add_column("Branch", style="yellow")
    table.add_column("Status")

    for project in projects:
        table.add_row(
            escape(truncate(project.name, 28)),
            escape(truncate(project.git_status.current_branch, 13)),
            STATUS_LABELS[project.git_status.summary],
        )

    console.print(table)
    console.print(f"\nTotal: {len(projects)} projects")


@app.command()
@handle_cli_error
def search(
    query: str = typer.Argument(..., help="Project name/path query"),
    exact: bool = typer.Option(
        False, "--exact", "-e", help="Substring match instead of fuzzy match"
    ),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum results to show"),
):
    """Search projects by name or path."""
    _, config_data = get_config_with_data()
    store = get_store(config_data)
    searcher = ProjectSearcher()
    projects = list(store.projects.values())

    if exact:
        results = searcher.exact_search(projects, query)
    else:
        results = searcher.search(projects, query)

    if not results:
        console.print(f"[yellow]No projects found matching '{query}'[/yellow]")
        return

    table = RichTable(title=f"Results for '{query}'")
    table.add_column("Project", style="cyan")
    table.add_column("Path")
    table.add_column("Score", justify="right", style="green")

    for project in results[:limit]:
        table.add_row(escape(project.name), escape(str(project.path)), f"{project.frecency_score:.1f}")

    console.print(table)


@app.command()
@handle_cli_error
def info(query: str = typer.Argument(..., help="Project name/path query (fuzzy matched)")):
    """Show information about the best matching project."""
    _, config_data = get_config_with_data()
    store = get_store(config_data)
    project = resolve_project(store, query)
    if project is None:
        return

    status = project.git_status
    console.print(f"\n[bold]📁 {escape(project.name)}[/bold]")
    console.print("=" * 60)
    console.print(f"Path:     {project.path}")
    console.print(f"Branch:   {status.current_branch}")
    if status.has_uncommitted:
        console.print("Status:   [yellow]⚠️  Uncommitted changes[/yellow]")
    else:
        console.print("Status:   [green]✓ Clean[/green]")

    if status.ahead > 0 or status.behind > 0:
        console.print(f"Sync:     ↑ {status.ahead} ahead, ↓ {status.behind} behind")

    if status.last_commit:
        commit = status.last_commit
        console.print("\nLast commit:")
        console.print(f"  {commit.hash} - {commit.message}", markup=False)
        console.print(f"  by {commit.author} at {format_time(commit.timestamp)}", markup=False)

    if project.readme_excerpt:
        console.print("\nREADME:")
        console.print(f"  {project.readme_excerpt}", markup=False)

    if project.access_count > 0:
        console.print("\nAccess stats:")
        console.print(f"  Count:   {project.access_count}")
        console.print(f"  Last:    {format_time(project.last_accessed)}")
        console.print(f"  Score:   {project.frecency_score:.1f}")


@app.command(name="open")
@handle_cli_error
def open_project(
    query: str = typer.Argument(..., help="Project name/path query (fuzzy matched)"),
    editor: Optional[str] = typer.Option(
        None, "--editor", "-e", help="Editor to use (code, cursor, vim, etc.)"
    ),
):
    """Open the best matching project in an editor."""
    _, config_data = get_config_with_data()
    store = get_store(config_data)
    project = resolve_project(store, query)
    if project is None:
        return

    editor = editor or config_data.default_editor
    console.print(f"Opening {escape(project.name)} in {escape(editor)}...")
    console.print(f"  Path: {project.path}")

    try:
        result = subprocess.run([editor, str(project.path)])
    except OSError as e:
        console.print(f"[red]❌ Failed to spawn editor '{editor}': {e}[/red]")
        raise typer.Exit(1)

    if result.returncode != 0:
        console.print(f"[yellow]⚠️  Editor '{editor}' exited with error[/yellow]")

    store.record_access(project.path)


@app.command()
def version():
    """Show px version."""
    from px import __version__

    typer.echo(f"px version {__version__}")


if __name__ == "__main__":
    app()
