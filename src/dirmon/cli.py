"""CLI interface for dirmon."""

import threading
from typing import Callable, Optional, TypeVar

import typer
from rich.markup import escape

from dirmon import __version__
from dirmon.analyzer import (
    DEFAULT_AGE_DAYS,
    DEFAULT_SIZE_MB,
    advise_cleanup,
    analyze_usage,
    find_duplicates,
)
from dirmon.cleaner import delete_file, delete_paths
from dirmon.config import (
    DEFAULT_WORKERS,
    add_directory,
    get_config_path,
    load_config,
    remove_directory,
    save_config,
)
from dirmon.display import (
    configure_logging,
    confirm_action,
    console,
    show_change_event,
    show_cleanup_advice,
    show_deletion_results,
    show_directory_listing,
    show_duplicates,
    show_monitored_dirs,
    show_scanning_progress,
    show_usage,
)
from dirmon.errors import RootAccessError, ScanCancelled
from dirmon.monitor import watch
from dirmon.walker import ensure_root, list_directory

T = TypeVar("T")

EXIT_CANCELLED = 130

# Create Typer app
app = typer.Typer(
    name="dirmon",
    help="Monitor directories, find duplicates, analyze disk usage and get cleanup advice",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dirmon version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """dirmon - directory housekeeping from the terminal."""
    configure_logging(verbose)


def run_scan(description: str, scan: Callable[[threading.Event], T]) -> T:
    """
    Run a scan behind a spinner, mapping failures to exit codes.

    Ctrl+C stops hashing workers through the cancel event; nothing partial is shown.
    """
    cancel = threading.Event()
    try:
        with show_scanning_progress() as progress:
            progress.add_task(description, total=None)
            return scan(cancel)
    except RootAccessError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)
    except (KeyboardInterrupt, ScanCancelled):
        console.print("[yellow]Scan cancelled - no results shown[/yellow]")
        raise typer.Exit(EXIT_CANCELLED)


@app.command(name="list")
def list_cmd(
    path: str = typer.Argument(".", help="Directory to list"),
) -> None:
    """List directory contents."""
    try:
        root = ensure_root(path)
        records = list_directory(root)
    except RootAccessError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    show_directory_listing(str(root), records)


@app.command()
def delete(
    path: str = typer.Argument(..., help="File to delete"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
) -> None:
    """Delete a file."""
    check = delete_file(path, dry_run=True)
    if not check.success:
        console.print(f"[red]Error: {escape(check.error or '')}[/red]", highlight=False)
        raise typer.Exit(1)

    if not yes and not confirm_action(f"Are you sure you want to delete '{path}'?"):
        console.print("[yellow]Operation cancelled[/yellow]")
        raise typer.Exit(0)

    result = delete_file(path)
    show_deletion_results([result])
    if not result.success:
        raise typer.Exit(1)


@app.command(name="cleanup-advice")
def cleanup_advice(
    path: str = typer.Argument(".", help="Directory to analyze"),
    age: int = typer.Option(DEFAULT_AGE_DAYS, "--age", min=0, help="Age threshold in days for old file detection"),
    size: int = typer.Option(DEFAULT_SIZE_MB, "--size", min=0, help="Size threshold in MB for large file detection"),
    offer_delete: bool = typer.Option(False, "--delete", help="Offer to delete the recommended files"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate deletion"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
) -> None:
    """Analyze directory and provide file deletion recommendations."""
    report = run_scan(
        "Analyzing files...",
        lambda cancel: advise_cleanup(path, age, size, cancel=cancel),
    )
    show_cleanup_advice(report)

    if not offer_delete or not report.candidates:
        return

    console.print()
    if not yes and not dry_run and not confirm_action("Would you like to delete these files?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    results = delete_paths([c.path for c in report.candidates], dry_run=dry_run)
    show_deletion_results(results)


@app.command(name="find-duplicates")
def find_duplicates_cmd(
    path: str = typer.Argument(".", help="Directory to scan"),
    workers: int = typer.Option(DEFAULT_WORKERS, "--workers", "-w", min=1, help="Parallel hashing threads"),
) -> None:
    """Find duplicate files in a directory."""
    report = run_scan(
        "Finding duplicates...",
        lambda cancel: find_duplicates(path, max_workers=workers, cancel=cancel),
    )
    show_duplicates(report)


@app.command(name="disk-usage")
def disk_usage(
    path: str = typer.Argument(".", help="Directory to analyze"),
) -> None:
    """Analyze disk usage in a directory."""
    report = run_scan("Analyzing disk usage...", lambda cancel: analyze_usage(path, cancel=cancel))
    show_usage(report)


def _watch_until_interrupted(
    directories: list[str],
    interval: float,
    cycles: Optional[int],
    show_directory: bool,
) -> None:
    stop = threading.Event()
    console.print("\n[bold]Starting monitoring...[/bold] [dim](Press Ctrl+C to stop)[/dim]")
    try:
        watch(
            directories,
            callback=lambda event: show_change_event(event, show_directory=show_directory),
            interval=interval,
            stop=stop,
            max_cycles=cycles,
        )
    except KeyboardInterrupt:
        stop.set()
        console.print("\n[dim]Monitoring stopped[/dim]")


@app.command()
def monitor(
    path: str = typer.Argument(".", help="Directory to monitor"),
    interval: float = typer.Option(1.0, "--interval", "-i", min=0.1, help="Seconds between polls"),
    cycles: Optional[int] = typer.Option(None, "--cycles", hidden=True),
) -> None:
    """Monitor a directory for changes."""
    try:
        root = ensure_root(path)
        records = list_directory(root)
    except RootAccessError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    show_directory_listing(str(root), records)
    _watch_until_interrupted([str(root)], interval, cycles, show_directory=False)


@app.command(name="add-dir")
def add_dir(
    path: str = typer.Argument(..., help="Directory to add"),
) -> None:
    """Add a directory to monitored list."""
    config = load_config()
    try:
        config, added = add_directory(config, path)
    except (FileNotFoundError, NotADirectoryError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)

    if not added:
        console.print(f"[yellow]Directory {escape(path)} is already in the monitored list[/yellow]")
        return

    save_config(config)
    console.print(f"[green]Directory {escape(config.monitored_dirs[-1])} has been added to the monitored list[/green]")


@app.command(name="remove-dir")
def remove_dir(
    index: int = typer.Argument(..., help="Number of the directory (see show-dirs)"),
) -> None:
    """Remove a directory from monitored list."""
    config = load_config()
    config, removed = remove_directory(config, index)
    if removed is None:
        console.print(f"[red]No monitored directory with number {index}[/red]")
        raise typer.Exit(1)

    save_config(config)
    console.print(f"[green]Directory {escape(removed)} has been removed from the monitored list[/green]")


@app.command(name="show-dirs")
def show_dirs() -> None:
    """Show all monitored directories."""
    show_monitored_dirs(load_config(), str(get_config_path()))


@app.command(name="monitor-all")
def monitor_all(
    interval: float = typer.Option(1.0, "--interval", "-i", min=0.1, help="Seconds between polls"),
    cycles: Optional[int] = typer.Option(None, "--cycles", hidden=True),
) -> None:
    """Monitor all saved directories."""
    config = load_config()
    if not config.monitored_dirs:
        console.print("[red]Error: no directories to monitor[/red]")
        raise typer.Exit(1)

    for directory in config.monitored_dirs:
        console.print(f"Adding {escape(directory)} to watch list")
    _watch_until_interrupted(config.monitored_dirs, interval, cycles, show_directory=True)


@app.command()
def interactive() -> None:
    """Run in interactive mode."""
    from dirmon.menu import start_menu

    start_menu(console=console)


# Short aliases
app.command(name="i", hidden=True)(interactive)
app.command(name="ls", hidden=True)(list_cmd)
app.command(name="rm", hidden=True)(delete)
app.command(name="ca", hidden=True)(cleanup_advice)
app.command(name="fd", hidden=True)(find_duplicates_cmd)
app.command(name="du", hidden=True)(disk_usage)
app.command(name="mon", hidden=True)(monitor)


if __name__ == "__main__":
    app()
