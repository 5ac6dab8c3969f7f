"""
ConsoleUI - Rich-based console interface.

Provides profile display, change tables, apply progress and summaries.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from ..discovery.models import SystemSnapshot
from ..profile.models import Profile
from ..profile.values import TargetValues
from ..snapshot.models import BackupRecord, RestoreResult
from ..tuning.changes import Change, ChangeSet, Subsystem
from ..tuning.executor import ApplyReport


SUBSYSTEM_COLORS = {
    Subsystem.CPU: "cyan",
    Subsystem.MEMORY: "magenta",
    Subsystem.STORAGE: "yellow",
    Subsystem.NETWORK: "blue",
}


def _fmt(value) -> str:
    if value is None:
        return "[dim]n/a[/]"
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, (tuple, list)):
        return " ".join(str(v) for v in value)
    return str(value)


class ConsoleUI:
    """
    Rich console interface for kerntune.
    """

    def __init__(self, quiet: bool = False, color: bool = True, console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console(no_color=not color, highlight=False)

    def print(self, *args, **kwargs):
        """Print to console."""
        if self.quiet:
            return
        self.console.print(*args, **kwargs)

    # =========================================================================
    # Profile
    # =========================================================================

    def print_profile(self, profile: Profile, snapshot: Optional[SystemSnapshot] = None,
                      target: Optional[TargetValues] = None, explicit: bool = False):
        """Display the selected profile, the facts behind it and its targets."""
        if self.quiet:
            return

        source = "selected" if explicit else "detected"
        self.console.print(Panel(
            f"[bold cyan]{profile.name}[/] [dim]({source})[/]",
            title="Profile",
            border_style="cyan",
        ))

        if snapshot is not None:
            table = Table(title="System", show_header=False, box=None)
            table.add_column("Key", style="dim")
            table.add_column("Value")

            table.add_row("CPU driver", _fmt(snapshot.cpu.driver))
            table.add_row("Governor", _fmt(snapshot.cpu.governor))
            table.add_row("TCP congestion", _fmt(snapshot.network.tcp_congestion))
            if snapshot.network.available_congestion:
                table.add_row("Available", ", ".join(snapshot.network.available_congestion))
            table.add_row("Battery", "yes" if snapshot.power.has_battery else "no")
            table.add_row("Power", "AC" if snapshot.power.on_ac else "battery")
            tlp = snapshot.power.tlp
            table.add_row("TLP", "enabled" if tlp.enabled else ("installed" if tlp.installed else "not installed"))
            for disk in snapshot.storage.disks:
                table.add_row(f"Disk {disk.name}", f"{disk.type}, {_fmt(disk.scheduler)}")

            self.console.print(table)

        if target is not None:
            self.console.print()
            table = Table(title="Targets", show_header=False, box=None)
            table.add_column("Key", style="dim")
            table.add_column("Value")
            for key, value in target.to_dict().items():
                table.add_row(key, _fmt(value))
            self.console.print(table)

    # =========================================================================
    # Changes
    # =========================================================================

    def print_changes(self, change_set: ChangeSet):
        """Display the computed change list and any suppressed subsystems."""
        if self.quiet:
            return

        for warning in change_set.warnings:
            self.print_warning(warning)

        if not change_set:
            self.console.print("[green]System already matches the profile. No changes needed.[/]")
            return

        table = Table(title=f"{len(change_set)} Changes")
        table.add_column("Subsystem")
        table.add_column("Parameter")
        table.add_column("Current", justify="right")
        table.add_column("Target", justify="right")

        for change in change_set:
            color = SUBSYSTEM_COLORS.get(change.subsystem, "white")
            table.add_row(
                f"[{color}]{change.subsystem.value}[/]",
                change.parameter,
                f"[dim]{change.old_value}[/]",
                f"[bold]{change.new_value}[/]",
            )

        self.console.print(table)

    def print_apply_start(self, change: Change):
        """Start a per-change progress line."""
        if self.quiet:
            return
        self.console.print(
            f"  {change.parameter}: {change.old_value} -> {change.new_value} ... ",
            end="",
        )

    def print_apply_result(self, success: bool, error: Optional[str] = None):
        """Finish a per-change progress line."""
        if self.quiet:
            return
        if success:
            self.console.print("[green]OK[/]")
        else:
            self.console.print(f"[red]FAILED[/] [dim]({error})[/]")

    def print_apply_summary(self, report: ApplyReport):
        self.print()
        self.print(f"Applied: {report.succeeded} succeeded, {report.failed} failed")

    # =========================================================================
    # Backup / restore
    # =========================================================================

    def print_backup_info(self, record: BackupRecord):
        self.print(
            f"Restoring values from backup (profile: {record.profile}, saved: {record.timestamp})"
        )
        self.print()

    def print_restore_result(self, result: RestoreResult):
        """Display per-path restore outcomes and the totals."""
        for entry in result.restored:
            if entry.success:
                self.print(f"  {entry.path} -> {entry.value} ... [green]OK[/]")
            else:
                self.print(f"  {entry.path} -> {entry.value} ... [red]FAILED[/] [dim]({entry.error})[/]")
        for path in result.skipped:
            self.print(f"  [dim]{path} (no longer present, skipped)[/]")

    def print_restore_summary(self, result: RestoreResult):
        self.print()
        self.print(f"Restored {result.succeeded} values, {result.failed} failed")

    # =========================================================================
    # Messages
    # =========================================================================

    def print_success(self, message: str):
        self.print(f"[green]{message}[/]")

    def print_warning(self, message: str):
        """Warnings are shown even in quiet mode."""
        self.console.print(f"[yellow]Warning:[/] {message}")

    def print_error(self, message: str, exception: Optional[Exception] = None):
        """Display error message."""
        self.console.print(f"[bold red]Error:[/] {message}")
        if exception:
            self.console.print(f"[dim]{type(exception).__name__}: {exception}[/]")

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask for confirmation. Prompts are shown even in quiet mode."""
        return Confirm.ask(message, default=default, console=self.console)
