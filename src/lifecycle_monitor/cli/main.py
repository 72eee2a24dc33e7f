"""Click entry point for the lifecycle monitor.

Replays recorded host signals through a monitor and renders the result for
a developer audience.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
import jsonschema

from lifecycle_monitor.application.monitor import LifecycleMonitor
from lifecycle_monitor.cli.console import (
    console,
    print_error,
    print_scenarios,
    print_status,
    print_timeline,
)
from lifecycle_monitor.cli.logging_setup import setup_logging
from lifecycle_monitor.domain.exceptions import (
    ConfigurationError,
    HostSignalError,
    PersistenceError,
)
from lifecycle_monitor.domain.host_signal import (
    ContextChanged,
    IntentObserved,
    signal_from_payload,
)
from lifecycle_monitor.domain.models import MonitorConfig
from lifecycle_monitor.infrastructure.config import load_config
from lifecycle_monitor.infrastructure.host import InProcessHost
from lifecycle_monitor.infrastructure.persistence.filesystem import (
    FilesystemSnapshotStore,
)
from lifecycle_monitor.infrastructure.probe import StaticContextProbe
from lifecycle_monitor.schemas import validate_signal

DEFAULT_STORAGE_KEY = MonitorConfig().storage_key


def iter_payloads(path: Path) -> Iterator[tuple[int, Any]]:
    """
    Yield ``(line_number, payload)`` for each non-blank JSONL line.

    Raises:
        ConfigurationError: If a line is not valid JSON
    """
    with open(path) as f:
        for line_no, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                yield line_no, json.loads(line)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"{path}:{line_no}: invalid JSON: {e}") from e


@click.group()
@click.version_option(package_name="lifecycle-monitor")
def cli() -> None:
    """Observe host lifecycle signals and surface anomalies."""


@cli.command()
@click.argument("signals", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to monitor config JSON",
)
@click.option(
    "--state-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory for the persisted event log",
)
@click.option(
    "--export",
    "export_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write the export document to this path",
)
@click.option("--recent", default=20, type=int, help="Timeline rows to show")
@click.option("--log-file", default=None, type=click.Path(), help="Path to log file")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def replay(
    signals: str,
    config_path: str | None,
    state_dir: str | None,
    export_path: str | None,
    recent: int,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Replay a JSONL file of host signals through a monitor."""
    setup_logging(log_file=log_file, verbose=verbose)
    try:
        config = load_config(Path(config_path)) if config_path else MonitorConfig()
        store = (
            FilesystemSnapshotStore(state_dir, config.storage_key)
            if state_dir
            else None
        )
        probe = StaticContextProbe()
        host = InProcessHost()
        monitor = LifecycleMonitor(config=config, store=store, probe=probe)
        monitor.attach(host)

        rejected = 0
        for line_no, payload in iter_payloads(Path(signals)):
            try:
                validate_signal(payload)
                signal = signal_from_payload(payload)
            except (jsonschema.ValidationError, HostSignalError) as e:
                rejected += 1
                message = getattr(e, "message", str(e))
                console.print(f"[yellow]line {line_no}: skipped ({message})[/yellow]")
                continue
            if isinstance(signal, ContextChanged):
                probe.set_context(signal.context)
            elif isinstance(signal, IntentObserved):
                monitor.ingest(signal)
            else:
                host.fire(signal)
        monitor.poll()
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)

    counters = monitor.counters()
    print_status(monitor.current_state, monitor.current_context, monitor.save_name, counters)
    print_scenarios(monitor.scenarios())
    print_timeline(monitor.recent_events(recent))
    if rejected:
        console.print(f"\n[yellow]{rejected} line(s) skipped[/yellow]")

    if export_path:
        document = monitor.export_snapshot()
        Path(export_path).write_text(json.dumps(document, indent=2))
        console.print(f"\nExported to {export_path}")


@cli.command()
@click.argument("state_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--storage-key", default=DEFAULT_STORAGE_KEY, help="Record name")
@click.option("--recent", default=50, type=int, help="Timeline rows to show")
def show(state_dir: str, storage_key: str, recent: int) -> None:
    """Render a persisted event log."""
    store = FilesystemSnapshotStore(state_dir, storage_key)
    try:
        persisted = store.load()
    except PersistenceError as e:
        print_error(str(e))
        sys.exit(1)
    if persisted is None:
        print_error(f"No stored log at {store.path}")
        sys.exit(1)

    console.print(
        f"[cyan]Valid transitions:[/cyan] {persisted.valid_transition_count}  "
        f"[cyan]Errors:[/cyan] {persisted.error_count}  "
        f"[dim]saved {persisted.saved_at or 'unknown'}[/dim]"
    )
    print_timeline(persisted.events[-recent:] if recent > 0 else ())


@cli.command()
@click.argument("signals", type=click.Path(exists=True, dir_okay=False))
def validate(signals: str) -> None:
    """Check every line of a JSONL signal file against the schema."""
    invalid = 0
    try:
        for line_no, payload in iter_payloads(Path(signals)):
            try:
                validate_signal(payload)
            except jsonschema.ValidationError as e:
                invalid += 1
                console.print(f"[red]line {line_no}:[/red] {e.message}")
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)

    if invalid:
        console.print(f"[red]{invalid} invalid line(s)[/red]")
        sys.exit(1)
    console.print("[green]All signals valid[/green]")


@cli.command()
@click.argument("state_dir", type=click.Path(file_okay=False))
@click.option("--storage-key", default=DEFAULT_STORAGE_KEY, help="Record name")
def clear(state_dir: str, storage_key: str) -> None:
    """Remove a persisted event log."""
    store = FilesystemSnapshotStore(state_dir, storage_key)
    try:
        store.clear()
    except PersistenceError as e:
        print_error(str(e))
        sys.exit(1)
    console.print(f"Cleared {store.path}")


if __name__ == "__main__":
    cli()
