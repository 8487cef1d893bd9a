"""Rich terminal display for dirmon."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from dirmon.models import (
    ChangeEvent,
    ChangeKind,
    CleanupReason,
    CleanupReport,
    DeletionResult,
    DuplicateReport,
    FileRecord,
    MonitorConfig,
    UsageReport,
    format_size,
)

console = Console()

ROOT_LABEL = "[root directory]"


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, marking the cut with '...'."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def reason_label(reason: CleanupReason) -> str:
    """Get styled label for a cleanup reason."""
    labels = {
        CleanupReason.TEMPORARY: "[green]Temporary[/green]",
        CleanupReason.LOG: "[cyan]Log[/cyan]",
        CleanupReason.STALE: "[yellow]Stale[/yellow]",
        CleanupReason.OVERSIZE: "[red]Oversize[/red]",
    }
    return labels.get(reason, "Unknown")


def relative_dir(directory: str, root: str) -> str:
    """Directory relative to root, with the root itself labelled."""
    rel = os.path.relpath(directory, root)
    return ROOT_LABEL if rel == "." else rel


def show_directory_listing(path: str, records: list[FileRecord]) -> None:
    """Display the direct contents of a directory."""
    table = Table(title=f"Contents of {escape(path)}", show_header=True, header_style="bold")
    table.add_column("Type", width=6)
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for record in records:
        table.add_row(
            "[blue]DIR[/blue]" if record.is_dir else "FILE",
            escape(record.name),
            "" if record.is_dir else format_size(record.size),
            record.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
    if not records:
        console.print("[dim]Directory is empty.[/dim]")


def show_duplicates(report: DuplicateReport) -> None:
    """Display duplicate groups and reclaimable space."""
    console.print(f"[bold]Duplicate files in {escape(report.root)}[/bold]\n")

    if not report.groups:
        console.print("[green]No duplicate files found.[/green]")
    else:
        for i, group in enumerate(report.groups, 1):
            console.print(
                f"[bold]Duplicate Group {i}[/bold] "
                f"[dim]({group.short_digest}, {format_size(group.size)} each)[/dim] "
                f"wasted: [yellow]{format_size(group.wasted_bytes)}[/yellow]"
            )
            for j, member in enumerate(group.members, 1):
                console.print(f"  {j}. {escape(member)}")
            console.print()

        console.print(
            Panel(
                f"[bold]Groups:[/bold] {len(report.groups)}\n"
                f"[bold]Duplicate files:[/bold] {report.duplicate_file_count}\n"
                f"[bold]Potential space savings:[/bold] {format_size(report.total_wasted)}",
                title="Summary",
                border_style="blue",
            )
        )

    if report.skipped:
        console.print(f"[yellow]! {report.skipped} file(s) could not be read and were skipped[/yellow]")


def show_usage(report: UsageReport) -> None:
    """Display usage by file type and the largest directories."""
    console.print(f"[bold]Disk usage analysis for {escape(report.root)}[/bold]\n")

    if report.total_bytes == 0 and not report.by_type:
        console.print("[dim]No files found.[/dim]")
        return

    table = Table(title="Usage by File Type", show_header=True, header_style="bold")
    table.add_column("File Type")
    table.add_column("Size", justify="right")
    table.add_column("% of Total", justify="right")

    for stat in report.by_type:
        table.add_row(
            escape(stat.extension),
            format_size(stat.size),
            f"{report.percent_of_total(stat.size):.1f}%",
        )
    console.print(table)
    console.print()

    table = Table(title="Largest Directories", show_header=True, header_style="bold")
    table.add_column("Directory")
    table.add_column("Size", justify="right")

    for stat in report.by_dir:
        table.add_row(escape(truncate(relative_dir(stat.directory, report.root), 60)), format_size(stat.size))
    console.print(table)

    if report.dir_count_total > len(report.by_dir):
        console.print(
            f"[dim]Showing top {len(report.by_dir)} of {report.dir_count_total} directories[/dim]"
        )

    console.print(f"\n[bold]Total size:[/bold] {format_size(report.total_bytes)}")


def show_cleanup_advice(report: CleanupReport) -> None:
    """Display cleanup candidates and potential savings."""
    console.print(f"[bold]Cleanup advice for {escape(report.root)}[/bold]")
    console.print(
        f"[dim]Stale after {report.age_threshold_days} days, "
        f"large above {report.size_threshold_mb} MB[/dim]\n"
    )

    if not report.candidates:
        console.print("[green]No files recommended for deletion.[/green]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Type")
    table.add_column("Reason")

    for candidate in sorted(report.candidates, key=lambda c: (-c.size, c.path)):
        table.add_row(
            escape(truncate(os.path.relpath(candidate.path, report.root), 50)),
            format_size(candidate.size),
            candidate.modified_at.strftime("%Y-%m-%d"),
            reason_label(candidate.reason),
            candidate.detail,
        )

    console.print(table)
    console.print(
        f"\n[bold]Potential space savings:[/bold] {format_size(report.total_savings)} "
        f"in {len(report.candidates)} file(s)"
    )


def show_deletion_results(results: list[DeletionResult]) -> None:
    """Display the outcome of deleting files."""
    for result in results:
        if result.success:
            verb = "Would delete" if result.dry_run else "Deleted"
            console.print(f"  [green]✓[/green] {verb}: {escape(result.path)} ({format_size(result.bytes_freed)})")
        else:
            console.print(f"  [red]✗[/red] {escape(result.path)}: {escape(result.error or '')}")

    freed = sum(r.bytes_freed for r in results if r.success)
    failed = sum(1 for r in results if not r.success)
    console.print(f"\n[bold]Space freed:[/bold] {format_size(freed)}")
    if failed:
        console.print(f"[red]Failed: {failed}[/red]")


def show_monitored_dirs(config: MonitorConfig, config_path: str) -> None:
    """Display the monitored directory list."""
    if not config.monitored_dirs:
        console.print("[yellow]No directories are being monitored[/yellow]")
        return

    console.print(f"[bold]Monitored Directories[/bold] [dim](saved in {escape(config_path)})[/dim]")
    for i, directory in enumerate(config.monitored_dirs, 1):
        console.print(f"  {i}. {escape(directory)}")


def show_change_event(event: ChangeEvent, show_directory: bool = False) -> None:
    """Print a single change notification."""
    colors = {
        ChangeKind.CREATED: "green",
        ChangeKind.MODIFIED: "yellow",
        ChangeKind.DELETED: "red",
    }
    color = colors.get(event.kind, "white")
    where = f"[dim]{escape('[' + event.directory + ']')}[/dim] " if show_directory else ""
    console.print(
        f"[{event.timestamp.strftime('%H:%M:%S')}] {where}"
        f"[{color}]{event.kind.value}[/{color}] - {escape(event.name)}",
        highlight=False,
    )


def show_scanning_progress() -> Progress:
    """Create an indeterminate progress spinner for scanning."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
