"""
CLI — the user interface for XS Notify.

Commands:
    xsnotify run             — Relay notifications to the overlay (runs until killed)
    xsnotify settings        — Interactive settings editor
    xsnotify config show     — Print the effective configuration
    xsnotify config path     — Print the config file location
    xsnotify check-update    — Check GitHub for a newer release
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from xsnotify import __version__

console = Console()

_SINKS = ["xsoverlay", "console", "webhook"]
_SOURCES = ["stdin", "spool"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _config_table(config) -> Table:
    table = Table(title="XS Notify configuration", show_header=True)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for field, value in config.model_dump(mode="json").items():
        if field == "skipped_apps":
            value = ", ".join(escape(app) for app in value) if value else "[dim](none)[/dim]"
        table.add_row(field, str(value))
    return table


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """XS Notify — desktop notifications on your XSOverlay display."""
    pass


# ---------------------------------------------------------------------------
# Relay
# ---------------------------------------------------------------------------


def _build_source(name: str, spool_dir: Path | None):
    from xsnotify.core import XSNOTIFY_SPOOL_DIR

    if name == "spool":
        from xsnotify.relay.sources.spool import SpoolDirectorySource

        return SpoolDirectorySource(spool_dir or XSNOTIFY_SPOOL_DIR)

    from xsnotify.relay.sources.stdin import StdinSource

    return StdinSource()


def _build_sink(name: str, host: str, port: int):
    if name == "console":
        from xsnotify.relay.sinks.console import ConsoleSink

        return ConsoleSink(console=console)
    if name == "webhook":
        from xsnotify.relay.sinks.webhook import WebhookSink

        return WebhookSink(host, port)

    from xsnotify.relay.sinks.xsoverlay import XSOverlaySink

    return XSOverlaySink(host, port)


@main.command()
@click.option("--port", "-p", type=int, default=None, help="Overlay port")
@click.option("--host", default=None, help="Overlay host")
@click.option("--notification-strategy", "-n", type=click.Choice(["listener", "polling"]), default=None)
@click.option("--polling-rate", type=int, default=None, help="Polling interval in milliseconds")
@click.option("--dynamic-timeout/--no-dynamic-timeout", "-d", default=None)
@click.option("--default-timeout", type=float, default=None, help="Seconds, used without dynamic timeout")
@click.option("--reading-speed", type=float, default=None, help="Words per minute")
@click.option("--min-timeout", type=float, default=None)
@click.option("--max-timeout", type=float, default=None)
@click.option("--skipped-app", "skipped_apps", multiple=True, help="App to ignore (repeatable)")
@click.option("--sink", "sink_name", type=click.Choice(_SINKS), default="xsoverlay", show_default=True)
@click.option("--source", "source_name", type=click.Choice(_SOURCES), default=None,
              help="Defaults to stdin for listener, spool for polling")
@click.option("--spool-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.option("--queue-limit", type=click.IntRange(min=0), default=0, show_default=True,
              help="Maximum queued notifications, 0 for unbounded")
@click.option("--drop-policy", type=click.Choice(["oldest", "newest"]), default="oldest", show_default=True)
@click.option("--redeliver", is_flag=True, help="Retry the notification in flight when the overlay fails")
@click.option("--check-update", "check_update_first", is_flag=True, help="Check for a new release first")
@click.option("--verbose", "-v", is_flag=True)
def run(
    port, host, notification_strategy, polling_rate, dynamic_timeout, default_timeout,
    reading_speed, min_timeout, max_timeout, skipped_apps, sink_name, source_name,
    spool_dir, queue_limit, drop_policy, redeliver, check_update_first, verbose,
):
    """Relay notifications to the overlay until the process is killed."""
    from xsnotify.core import XSNOTIFY_CONFIG_FILE, ConfigError, ensure_config_file, load_config
    from xsnotify.relay.queue import DropPolicy, RelayQueue
    from xsnotify.relay.supervisor import RelaySupervisor

    _configure_logging(verbose)
    log = logging.getLogger("xsnotify")

    try:
        if ensure_config_file():
            log.info("Default config written to %s", XSNOTIFY_CONFIG_FILE)
        config = load_config({
            "port": port,
            "host": host,
            "notification_strategy": notification_strategy,
            "polling_rate": polling_rate,
            "dynamic_timeout": dynamic_timeout,
            "default_timeout": default_timeout,
            "reading_speed": reading_speed,
            "min_timeout": min_timeout,
            "max_timeout": max_timeout,
            "skipped_apps": list(skipped_apps) or None,
        })
    except ConfigError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        sys.exit(1)

    if check_update_first:
        _report_update()

    source_name = source_name or (
        "spool" if config.notification_strategy.value == "polling" else "stdin"
    )
    source = _build_source(source_name, spool_dir)
    sink = _build_sink(sink_name, config.host, config.port)
    queue = RelayQueue(maxsize=queue_limit, drop_policy=DropPolicy(drop_policy))

    try:
        supervisor = RelaySupervisor(config, source, sink, queue=queue, redeliver=redeliver)
    except ValueError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        sys.exit(1)

    try:
        asyncio.run(supervisor.run())
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_TEXT_FIELDS = {
    "port": "set_port",
    "host": "set_host",
    "notification_strategy": "set_notification_strategy",
    "polling_rate": "set_polling_rate",
    "default_timeout": "set_default_timeout",
    "reading_speed": "set_reading_speed",
    "min_timeout": "set_min_timeout",
    "max_timeout": "set_max_timeout",
}


@main.command()
def settings() -> None:
    """Interactive settings editor — every accepted change is saved immediately."""
    from xsnotify.core import XSNOTIFY_CONFIG_FILE, ConfigError
    from xsnotify.settings import SettingsEditor

    try:
        editor = SettingsEditor()
    except ConfigError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        sys.exit(1)

    choices = [*_TEXT_FIELDS, "dynamic_timeout", "add_app", "remove_app", "quit"]
    while True:
        console.print(_config_table(editor.settings))
        action = Prompt.ask("  Change", choices=choices, default="quit")

        if action == "quit":
            break
        if action == "dynamic_timeout":
            editor.set_dynamic_timeout(
                Confirm.ask("  Dynamic timeout", default=editor.settings.dynamic_timeout)
            )
        elif action == "add_app":
            editor.set_current_app(Prompt.ask("  Application name"))
            if not editor.add_skipped_app():
                console.print("[yellow]Nothing added (blank or already skipped).[/yellow]")
        elif action == "remove_app":
            if not editor.settings.skipped_apps:
                console.print("[dim]No skipped apps.[/dim]")
                continue
            app = Prompt.ask("  Application to remove", choices=list(editor.settings.skipped_apps))
            editor.remove_skipped_app(app)
        else:
            current = getattr(editor.settings, action)
            if hasattr(current, "value"):
                current = current.value
            raw = Prompt.ask(f"  {action}", default=str(current))
            if not getattr(editor, _TEXT_FIELDS[action])(raw):
                console.print(f"[red]Invalid value for {action}; kept {current}.[/red]")

    console.print(f"[green]>[/green] Settings saved to {XSNOTIFY_CONFIG_FILE}")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@main.group()
def config() -> None:
    """Inspect the configuration."""
    pass


@config.command(name="show")
def config_show():
    """Print the effective configuration (file + environment)."""
    from xsnotify.core import ConfigError, load_config

    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        sys.exit(1)
    console.print(_config_table(cfg))


@config.command(name="path")
def config_path():
    """Print the location of the config file."""
    from xsnotify.core import XSNOTIFY_CONFIG_FILE

    click.echo(str(XSNOTIFY_CONFIG_FILE))


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------


def _report_update() -> None:
    from xsnotify.update import check_for_update

    status = asyncio.run(check_for_update(__version__))
    if status.latest is None:
        console.print("[yellow]Could not determine the latest version.[/yellow]")
    elif status.update_available:
        console.print(f"Current version: [blue]v{status.current}[/blue]\n")
        console.print(
            f"[italic magenta]A NEW VERSION[/italic magenta] is available: "
            f"[bright_blue]v{status.latest}[/bright_blue]"
        )
        console.print(f"Download it from: [bright_cyan]{status.download_url}[/bright_cyan]\n")
    else:
        console.print(f"You are on the latest version: [blue]v{status.current}[/blue]\n")


@main.command(name="check-update")
def check_update():
    """Check GitHub for a newer release."""
    _report_update()
