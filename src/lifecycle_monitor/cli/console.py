"""Rich console rendering of monitor state, scenarios and the event log."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lifecycle_monitor.domain.models import (
    CounterSnapshot,
    EventRecord,
    HostContext,
    LifecycleState,
    ScenarioRecord,
    format_timestamp,
)

# Shared console instances
console = Console()
error_console = Console(stderr=True)

_CATEGORY_STYLES = {
    "system": "blue",
    "api": "magenta",
    "lifecycle": "green",
    "transition": "cyan",
    "user_action": "yellow",
    "context": "bright_blue",
    "success": "bold green",
    "info": "dim",
}


def print_error(message: str, hint: str | None = None) -> None:
    """Print formatted error message to stderr."""
    content = Text(f"ERROR: {message}", style="bold red")
    if hint:
        content.append(f"\n\nHint: {hint}", style="yellow")
    error_console.print(Panel(content, title="Error", border_style="red"))


def print_status(
    state: LifecycleState,
    context: HostContext,
    save_name: str | None,
    counters: CounterSnapshot,
) -> None:
    """Print current state and counters."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("State", state.value)
    table.add_row("Context", context.value)
    table.add_row("Save", save_name or "NONE")
    table.add_row("Valid transitions", str(counters.valid_transitions))
    error_style = "bold red" if counters.error_count else ""
    table.add_row("Errors", Text(str(counters.error_count), style=error_style))
    for hook, count in counters.hook_calls.items():
        table.add_row(f"  {hook}", str(count))

    console.print(Panel(table, title="Lifecycle Monitor", expand=False))


def print_scenarios(scenarios: Mapping[str, ScenarioRecord]) -> None:
    """Print scenario checklist."""
    console.print("\n[bold]Scenarios:[/bold]")
    for record in scenarios.values():
        if record.detected:
            console.print(f"  [green]✓ {record.name}[/green]")
        else:
            console.print(f"  [dim]○ {record.name}[/dim]")


def print_timeline(events: Sequence[EventRecord]) -> None:
    """Print events newest first."""
    table = Table(show_header=True, box=None)
    table.add_column("Time", style="dim", width=10)
    table.add_column("State", style="cyan", width=22)
    table.add_column("Event")

    for event in reversed(events):
        style = "bold red" if event.is_error else _CATEGORY_STYLES.get(
            event.category.value, ""
        )
        table.add_row(
            format_timestamp(event.relative_ms),
            event.state.value,
            Text(event.message, style=style),
        )

    console.print("\n[bold]Timeline:[/bold]")
    console.print(table)
