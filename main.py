#!/usr/bin/env python3
"""
FeedProxy - Feed Rewriting Proxy
================================

Main application entry point with CLI interface for serving and debugging.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py list-feeds                # Show registered feeds
    python main.py fetch dilbert             # Render one feed to stdout
    python main.py serve                     # Start the HTTP server
"""

import sys
import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from feedproxy.config.settings import get_settings
from feedproxy.core.registry import build_registry
from feedproxy.ingestion.http_client import HttpClient, open_session
from feedproxy.processing.pipeline import FeedPipeline
from feedproxy.server.app import run as run_server
from feedproxy.utils.logging import configure_application_logging
from feedproxy.utils.exceptions import FeedProxyError

console = Console()


def _configure_logging(settings, debug: bool) -> None:
    configure_application_logging(
        settings.logging,
        level="DEBUG" if debug else settings.get_effective_log_level(),
    )


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """FeedProxy - republish comic and news feeds as clean RSS."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--host', help='Interface to bind (default from config)')
@click.option('--port', type=int, help='Port to listen on (default from config)')
@click.pass_context
def serve(ctx, host, port):
    """Start the HTTP server."""
    settings = get_settings()
    if host:
        settings.server.host = host
    if port:
        settings.server.port = port

    _configure_logging(settings, ctx.obj.get('debug'))
    console.print(
        f"[bold blue]🚀 Starting Server on {settings.server.host}:{settings.server.port}[/bold blue]"
    )
    run_server(settings)


@cli.command()
def check_config():
    """Validate configuration file and environment variables."""
    console.print("[bold blue]🔧 Checking FeedProxy Configuration[/bold blue]")

    try:
        settings = get_settings()
    except FeedProxyError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Section", style="cyan")
    table.add_column("Details")

    table.add_row("Server", f"{settings.server.host}:{settings.server.port}, "
                            f"scheme override: {settings.server.public_scheme or 'none'}")
    table.add_row("HTTP", f"Timeout: {settings.http.request_timeout}s, "
                          f"item timeout: {settings.http.item_timeout}s, "
                          f"concurrency: {settings.http.max_concurrent_items}")
    table.add_row("Asset proxy", f"{settings.asset_proxy.origin} (Referer: {settings.asset_proxy.referer})")
    table.add_row("Logging", f"Level: {settings.get_effective_log_level()}, "
                             f"file: {settings.logging.file_path or 'none'}")

    console.print(table)
    console.print("[bold green]✅ Configuration loaded[/bold green]")


@cli.command()
def list_feeds():
    """Show every registered feed identifier."""
    registry = build_registry()

    table = Table(title=f"Registered Feeds ({len(registry)})")
    table.add_column("Feed", style="cyan", no_wrap=True)
    table.add_column("Kind", style="green")
    table.add_column("Source")

    for feed_id, binding in registry.bindings.items():
        table.add_row(feed_id, binding.kind, binding.source)

    console.print(table)


@cli.command()
@click.argument('feed_id')
@click.option('--base', default='http://localhost:8889/feeds',
              help='Base URL used for asset-proxy links')
@click.pass_context
def fetch(ctx, feed_id, base):
    """Render a single feed and print it."""
    settings = get_settings()
    _configure_logging(settings, ctx.obj.get('debug'))

    async def run_fetch() -> str:
        async with open_session(settings.http) as session:
            pipeline = FeedPipeline(build_registry(), HttpClient(session), settings.http)
            return await pipeline.render(feed_id, base.rstrip('/'))

    try:
        output = asyncio.run(run_fetch())
    except FeedProxyError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        sys.exit(1)

    click.echo(output)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 FeedProxy interrupted by user[/yellow]")
        sys.exit(130)
