"""Command-line interface for the Uptime Kuma MCP server."""

import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable, Optional

import click

from .api_client import KumaAPIError, KumaClient
from .config import AppConfig, default_local_url, load_config
from .logging_utils import setup_logging
from .mcp_server.handlers.registry import CLIENT_NOT_INITIALIZED
from .mcp_server.utils.serialization import safe_json_dumps
from .services.base import ServiceResult
from .services.monitor_service import MonitorService
from .utils.readiness import wait_for_kuma

logger = logging.getLogger(__name__)


def _require_url(config: AppConfig) -> None:
    if not config.kuma.url:
        click.echo("❌ UPTIME_KUMA_URL is not set", err=True)
        sys.exit(1)


def _run_with_service(config: AppConfig, operation: Callable[[MonitorService], Awaitable[ServiceResult]]) -> Any:
    """Run one service operation on a fresh client and return its data.

    Exits with status 1 when the operation reports a failure.
    """

    async def _run():
        client = KumaClient(config.kuma)
        try:
            return await operation(MonitorService(client, config))
        finally:
            await client.disconnect()

    result = asyncio.run(_run())
    if not result.success:
        click.echo(f"❌ Error: {result.error}", err=True)
        sys.exit(1)
    return result.data


@click.group()
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, WARNING, ERROR)')
@click.option('--config', '--config-file', help='Path to configuration file (YAML, TOML, or JSON)')
@click.pass_context
def cli(ctx, log_level: Optional[str], config: Optional[str]):
    """Uptime Kuma MCP Server - manage Uptime Kuma monitors from MCP clients."""
    ctx.ensure_object(dict)

    try:
        app_config = load_config(config_file=config)
        setup_logging(log_level or app_config.log_level)
    except (OSError, ValueError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    ctx.obj['config'] = app_config


@cli.command()
@click.pass_context
def serve(ctx):
    """Run the MCP server on stdio."""
    from .mcp_server import run_server

    app_config = ctx.obj['config']
    try:
        asyncio.run(run_server(app_config))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


@cli.command()
@click.pass_context
def test(ctx):
    """Test connection and login to Uptime Kuma."""
    app_config = ctx.obj['config']
    _require_url(app_config)
    if not app_config.kuma.has_credentials():
        click.echo(f"❌ {CLIENT_NOT_INITIALIZED}", err=True)
        sys.exit(1)

    async def _check():
        client = KumaClient(app_config.kuma)
        try:
            await client.connect()
            await client.authenticate()
        finally:
            await client.disconnect()

    try:
        asyncio.run(_check())
    except KumaAPIError as e:
        click.echo(f"❌ Connection test failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✅ Successfully connected to Uptime Kuma at {app_config.kuma.url}")


@cli.command()
@click.option('--wait-timeout', default=60.0, show_default=True, help='Seconds to wait for the web endpoint')
@click.pass_context
def setup(ctx, wait_timeout: float):
    """Create the first admin account on a fresh Uptime Kuma instance.

    Uses UPTIME_KUMA_URL, or http://localhost:$UPTIME_KUMA_PORT when no URL
    is configured, and the UPTIME_KUMA_USERNAME / UPTIME_KUMA_PASSWORD pair.
    """
    app_config = ctx.obj['config']
    kuma = app_config.kuma

    if not kuma.username or not kuma.password:
        click.echo("❌ UPTIME_KUMA_USERNAME and UPTIME_KUMA_PASSWORD must be set", err=True)
        sys.exit(1)

    url = kuma.url or default_local_url()
    kuma = kuma.model_copy(update={'url': url})

    async def _setup() -> bool:
        client = KumaClient(kuma)
        try:
            if not await client.need_setup():
                return False
            await client.setup(kuma.username, kuma.password)
            return True
        finally:
            await client.disconnect()

    try:
        click.echo(f"Waiting for Uptime Kuma at {url}...")
        wait_for_kuma(url, timeout=wait_timeout)
        created = asyncio.run(_setup())
    except KumaAPIError as e:
        click.echo(f"❌ Setup failed: {e}", err=True)
        sys.exit(1)

    if created:
        click.echo(f"✅ Created admin account '{kuma.username}'")
    else:
        click.echo("Uptime Kuma is already set up; nothing to do")


@cli.command()
@click.option('--yes', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def cleanup(ctx, yes: bool):
    """Remove every monitor from Uptime Kuma."""
    app_config = ctx.obj['config']
    _require_url(app_config)

    if not yes and not click.confirm(f"Remove ALL monitors from {app_config.kuma.url}?"):
        click.echo("❌ Cleanup cancelled.")
        return

    summary = _run_with_service(app_config, lambda service: service.remove_all_monitors())
    click.echo(f"✅ Removed {summary['removed']} of {summary['total']} monitors")
    if summary['failed']:
        click.echo(f"❌ Failed to remove monitors: {', '.join(str(i) for i in summary['failed'])}", err=True)
        sys.exit(1)


@cli.command(name='list')
@click.pass_context
def list_monitors(ctx):
    """Print all monitors as JSON."""
    app_config = ctx.obj['config']
    _require_url(app_config)

    monitors = _run_with_service(app_config, lambda service: service.list_monitors())
    click.echo(safe_json_dumps(monitors))


@cli.command()
@click.argument('search_term')
@click.option('--regex', is_flag=True, help='Treat SEARCH_TERM as a regular expression')
@click.pass_context
def find(ctx, search_term: str, regex: bool):
    """Find monitors whose name matches SEARCH_TERM."""
    app_config = ctx.obj['config']
    _require_url(app_config)

    matches = _run_with_service(
        app_config, lambda service: service.find_monitors_by_name(search_term, use_regex=regex)
    )
    click.echo(safe_json_dumps(matches))


if __name__ == '__main__':
    cli()
