# cli.py
from __future__ import annotations

import asyncio
import json
import logging
import sys
from functools import partial
from pathlib import Path

import click

from focusgraph.bus import NotificationBus
from focusgraph.config import ConfigStore
from focusgraph.git_facts.git import status_entries
from focusgraph.graph import GraphBuilder
from focusgraph.idea import apply_idea
from focusgraph.model import FocusConfig, PersistenceError
from focusgraph.reach import split_projects
from focusgraph.server.settings import Settings, load_settings
from focusgraph.ui.console import Console, get_console, set_console
from focusgraph.watcher import ChangeWatcher


def _settings(ctx) -> Settings:
    return ctx.obj["settings"]


def _store(settings: Settings) -> ConfigStore:
    return ConfigStore(settings.config_path)


def _builder(settings: Settings) -> GraphBuilder:
    return GraphBuilder(settings.root, settings.registry())


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and debug logging)",
)
@click.option(
    "--root",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Multi-project root (defaults to $FOCUS_ROOT or the current directory)",
)
@click.pass_context
def cli(ctx, debug, root):
    """focusgraph — narrow a multi-project build to the projects you touch."""
    console = Console(debug=debug)
    set_console(console)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    if root is not None:
        settings = settings.with_overrides(root=root.resolve())
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print nodes/edges as JSON")
@click.pass_context
def graph(ctx, as_json):
    """Build and print the dependency graph."""
    console = get_console()
    g = _builder(_settings(ctx)).build()
    if as_json:
        click.echo(json.dumps(g.to_payload(), indent=2))
    else:
        console.print_graph_summary(g)


@cli.command()
@click.option("--verbose", "-v", is_flag=True, default=False, help="List included/excluded projects")
@click.pass_context
def show(ctx, verbose):
    """Show the focus config and the resulting included/excluded split."""
    console = get_console()
    settings = _settings(ctx)
    config = _store(settings).load()
    included, excluded = split_projects(
        _builder(settings).build(), config.focused_projects, config.downstream_hops
    )
    console.print_config(config)
    console.print_split(included, excluded, verbose=verbose)


@cli.command()
@click.argument("projects", nargs=-1)
@click.option("--hops", default=None, type=click.IntRange(min=0), help="Downstream hops (defaults to the saved value)")
@click.pass_context
def focus(ctx, projects, hops):
    """Replace the focused projects (no PROJECTS clears the focus)."""
    console = get_console()
    settings = _settings(ctx)
    store = _store(settings)
    registry = settings.registry()

    if hops is None:
        hops = store.load().downstream_hops

    ids = [registry.normalize(p) for p in projects]
    unknown = [p for p in ids if p not in registry]
    if unknown:
        console.print_error(
            "Unknown project",
            f"Not part of the project registry: {', '.join(unknown)}",
            suggestion="List known projects with:\n  focusgraph graph",
        )
        sys.exit(1)

    config = FocusConfig(tuple(ids), hops)
    try:
        store.save(config)
    except PersistenceError as e:
        console.print_error("Failed to save focus config", str(e))
        sys.exit(1)
    console.print_config(config)


@cli.command("apply-idea")
@click.pass_context
def apply_idea_cmd(ctx):
    """Write the IDE module file excluding every non-included project."""
    console = get_console()
    settings = _settings(ctx)
    try:
        excluded = apply_idea(_store(settings), _builder(settings), settings.idea_path)
    except PersistenceError as e:
        console.print_error(
            "Failed to write IDE descriptor",
            str(e),
            suggestion="Check that the .idea directory is writable.",
        )
        sys.exit(1)
    console.print_success(f"{len(excluded)} project(s) excluded in {settings.idea_path}")


async def _watch(watcher: ChangeWatcher, bus: NotificationBus, console: Console) -> None:
    sub = bus.subscribe()
    runner = asyncio.create_task(watcher.run())
    try:
        while True:
            notification = await sub.get()
            if notification is None:
                break
            console.print_change(notification)
    finally:
        await watcher.stop()
        runner.cancel()
        try:
            await runner
        except asyncio.CancelledError:
            pass
        bus.unsubscribe(sub)


@cli.command()
@click.option("--interval", default=None, type=float, help="Polling interval in seconds")
@click.pass_context
def watch(ctx, interval):
    """Poll git status and report edits in non-focused projects."""
    console = get_console()
    settings = _settings(ctx).with_overrides(poll_interval=interval)
    registry = settings.registry()
    bus = NotificationBus()
    watcher = ChangeWatcher(
        registry,
        _store(settings),
        GraphBuilder(settings.root, registry),
        bus,
        partial(status_entries, settings.root),
        interval=settings.poll_interval,
    )
    console.print_watch_started(str(settings.root), settings.poll_interval, len(registry))
    try:
        asyncio.run(_watch(watcher, bus, console))
    except KeyboardInterrupt:
        console.print_info("\nWatcher stopped by user")
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=3000, type=int, show_default=True, help="Port")
@click.option("--watch/--no-watch", default=None, help="Run the change watcher (defaults to $FOCUS_WATCH)")
@click.pass_context
def serve(ctx, host, port, watch):
    """Run the HTTP/WebSocket server."""
    import uvicorn

    from focusgraph.server.main import create_app

    settings = _settings(ctx).with_overrides(watch=watch)
    log_level = "debug" if ctx.obj.get("debug", False) else "info"
    logging.getLogger("focusgraph").setLevel(log_level.upper())
    uvicorn.run(create_app(settings), host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    cli()
