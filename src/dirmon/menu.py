"""Menu-driven interactive mode."""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

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
    show_change_event,
    show_cleanup_advice,
    show_deletion_results,
    show_directory_listing,
    show_duplicates,
    show_monitored_dirs,
    show_usage,
)
from dirmon.errors import RootAccessError, ScanCancelled
from dirmon.monitor import watch
from dirmon.walker import ensure_root, list_directory

MENU_ITEMS = [
    "List directory contents",
    "Delete a file",
    "Monitor a directory",
    "View monitored directories",
    "Add directory to monitored list",
    "Remove directory from monitored list",
    "Monitor all saved directories",
    "Get cleanup advice",
    "Find duplicate files",
    "Analyze disk usage",
]


@dataclass
class MenuSession:
    """Interactive numbered-menu session."""

    console: Console
    config_path: Optional[Path] = None
    workers: int = DEFAULT_WORKERS

    def __post_init__(self):
        self.config_path = self.config_path or get_config_path()

    def run(self) -> None:
        """Main menu loop."""
        self.console.print(Panel("[bold blue]Directory Monitor[/bold blue]", expand=False))

        while True:
            try:
                if not self._main_menu():
                    break
            except (KeyboardInterrupt, EOFError):
                self.console.print("\n[dim]Goodbye![/dim]")
                break

    def _main_menu(self) -> bool:
        """Display and handle main menu, return False to exit."""
        self.console.print("\n[bold]Main Menu[/bold]\n")
        for i, item in enumerate(MENU_ITEMS, 1):
            self.console.print(f"{i}. {item}")
        self.console.print("0. Exit")

        choice = self._get_choice(len(MENU_ITEMS))
        if choice == 0:
            self.console.print("\n[dim]Goodbye![/dim]")
            return False

        handlers = {
            1: self._do_list,
            2: self._do_delete,
            3: self._do_monitor,
            4: self._do_show_dirs,
            5: self._do_add_dir,
            6: self._do_remove_dir,
            7: self._do_monitor_all,
            8: self._do_cleanup_advice,
            9: self._do_find_duplicates,
            10: self._do_disk_usage,
        }
        try:
            handlers[choice]()
        except RootAccessError as e:
            self.console.print(f"Error: {e}", style="red", markup=False, highlight=False)
        except ScanCancelled:
            self.console.print("[yellow]Scan cancelled - no results shown[/yellow]")

        if choice not in (3, 7):
            self._pause()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────────────

    def _do_list(self) -> None:
        path = self._get_path_input()
        root = ensure_root(path)
        show_directory_listing(str(root), list_directory(root))

    def _do_delete(self) -> None:
        path = self.console.input("[bold cyan]Enter file path to delete:[/bold cyan] ").strip()
        if not path:
            return
        check = delete_file(path, dry_run=True)
        if not check.success:
            self.console.print(f"Error: {check.error}", style="red", markup=False)
            return
        if not self._confirm(f"Are you sure you want to delete '{path}'?"):
            self.console.print("[yellow]Operation cancelled[/yellow]")
            return
        show_deletion_results([delete_file(path)])

    def _do_monitor(self) -> None:
        path = self._get_path_input()
        root = ensure_root(path)
        show_directory_listing(str(root), list_directory(root))
        self._watch([str(root)], show_directory=False)

    def _do_show_dirs(self) -> None:
        show_monitored_dirs(load_config(self.config_path), str(self.config_path))

    def _do_add_dir(self) -> None:
        path = self.console.input("[bold cyan]Enter directory path to add:[/bold cyan] ").strip()
        if not path:
            return
        try:
            config, added = add_directory(load_config(self.config_path), path)
        except (FileNotFoundError, NotADirectoryError) as e:
            self.console.print(f"Error: {e}", style="red", markup=False)
            return

        if added:
            save_config(config, self.config_path)
            self.console.print(f"Directory {config.monitored_dirs[-1]} has been added", style="green", markup=False)
        else:
            self.console.print(f"Directory {path} is already in the monitored list", style="yellow", markup=False)

    def _do_remove_dir(self) -> None:
        config = load_config(self.config_path)
        show_monitored_dirs(config, str(self.config_path))
        if not config.monitored_dirs:
            return

        index = self._get_int_input("Enter the number of the directory to remove (0 to cancel)", 0)
        config, removed = remove_directory(config, index)
        if removed is not None:
            save_config(config, self.config_path)
            self.console.print(f"Directory {removed} has been removed", style="green", markup=False)

    def _do_monitor_all(self) -> None:
        config = load_config(self.config_path)
        if not config.monitored_dirs:
            self.console.print("[red]Error: no directories to monitor[/red]")
            self._pause()
            return
        self._watch(config.monitored_dirs, show_directory=True)

    def _do_cleanup_advice(self) -> None:
        path = self._get_path_input()
        age = self._get_int_input(f"Age threshold in days (default {DEFAULT_AGE_DAYS})", DEFAULT_AGE_DAYS)
        size = self._get_int_input(f"Size threshold in MB (default {DEFAULT_SIZE_MB})", DEFAULT_SIZE_MB)

        report = self._scan(lambda cancel: advise_cleanup(path, age, size, cancel=cancel))
        show_cleanup_advice(report)

        if report.candidates and self._confirm("Would you like to delete these files?"):
            show_deletion_results(delete_paths(c.path for c in report.candidates))

    def _do_find_duplicates(self) -> None:
        path = self._get_path_input()
        report = self._scan(lambda cancel: find_duplicates(path, max_workers=self.workers, cancel=cancel))
        show_duplicates(report)

    def _do_disk_usage(self) -> None:
        path = self._get_path_input()
        show_usage(self._scan(lambda cancel: analyze_usage(path, cancel=cancel)))

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _scan(self, scan):
        """Run a scan; Ctrl+C cancels it and returns to the menu."""
        cancel = threading.Event()
        self.console.print("[dim]Scanning... (Ctrl+C to cancel)[/dim]")
        try:
            return scan(cancel)
        except KeyboardInterrupt:
            raise ScanCancelled("interrupted")

    def _watch(self, directories: list[str], show_directory: bool) -> None:
        stop = threading.Event()
        self.console.print("\n[bold]Monitoring...[/bold] [dim](Press Ctrl+C to stop)[/dim]")
        try:
            watch(
                directories,
                callback=lambda event: show_change_event(event, show_directory=show_directory),
                stop=stop,
            )
        except KeyboardInterrupt:
            stop.set()
            self.console.print("\n[dim]Monitoring stopped[/dim]")

    def _get_choice(self, max_choice: int) -> int:
        """Get menu choice from user."""
        while True:
            try:
                choice = self.console.input("\n[bold cyan]Enter your choice:[/bold cyan] ").strip()
                if not choice:
                    continue
                num = int(choice)
                if 0 <= num <= max_choice:
                    return num
                self.console.print(f"[yellow]Please enter 0-{max_choice}[/yellow]")
            except ValueError:
                self.console.print("[yellow]Please enter a number[/yellow]")

    def _get_path_input(self) -> str:
        """Get a directory path, defaulting to the current directory."""
        path = self.console.input(
            "[bold cyan]Enter directory path[/bold cyan] [dim](Enter for current directory)[/dim]: "
        ).strip()
        return path or "."

    def _get_int_input(self, prompt: str, default: int) -> int:
        """Get a non-negative integer, falling back to default on bad input."""
        raw = self.console.input(f"[bold cyan]{prompt}:[/bold cyan] ").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            value = -1
        if value < 0:
            self.console.print(f"[yellow]Invalid value, using default {default}[/yellow]")
            return default
        return value

    def _confirm(self, message: str) -> bool:
        answer = self.console.input(f"{message} [dim](y/N)[/dim]: ").strip().lower()
        return answer in ("y", "yes")

    def _pause(self) -> None:
        """Pause for user to read output."""
        self.console.input("\n[dim]Press Enter to continue...[/dim]")


def start_menu(console: Console, config_path: Optional[Path] = None) -> None:
    """Start the interactive menu."""
    MenuSession(console=console, config_path=config_path).run()
