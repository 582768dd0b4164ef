import asyncio
import atexit
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
import structlog

from . import app
from .client import MastodonClient
from .config import MastodonConfig
from .fetch import fetch_feed
from .models import TIMELINE_MODES, Feed
from .render import format_statuses
from .session import FetchFeed, LoadFailed

logger = structlog.get_logger()

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def configure_logging(log_file: Optional[Path], level: str) -> None:
    """Send structured logs to ``log_file``; the terminal belongs to the UI."""
    if log_file is None:
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL)
        )
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handle = log_file.open("a", encoding="utf-8")
    atexit.register(handle.close)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(file=handle),
    )


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to TOML config file",
)
@click.option("--instance", help="Mastodon instance URL")
@click.option(
    "--token",
    envvar="MASTODON_ACCESS_TOKEN",
    help="Access token (defaults to $MASTODON_ACCESS_TOKEN)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write logs to this file",
)
@click.option(
    "--log-level", type=click.Choice(LOG_LEVELS), default="info", show_default=True
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    instance: Optional[str],
    token: Optional[str],
    log_file: Optional[Path],
    log_level: str,
) -> None:
    """Terminal client for Mastodon timelines."""
    configure_logging(log_file, log_level)

    if config:
        settings = MastodonConfig.from_toml(config)
        if token and not settings.access_token:
            settings = replace(settings, access_token=token)
        ctx.obj = settings
    elif instance:
        ctx.obj = MastodonConfig(instance_url=instance, access_token=token)
    else:
        raise click.UsageError("Either --config or --instance must be provided")


@cli.command()
@click.option(
    "--refresh",
    type=float,
    help="Auto refresh interval in seconds (0 disables)",
)
@click.pass_obj
def run(config: MastodonConfig, refresh: Optional[float]) -> None:
    """Open the interactive timeline viewer."""
    interval = config.refresh_interval if refresh is None else refresh
    logger.info("app_starting", instance=config.instance_url, refresh_interval=interval)
    app.run(
        MastodonClient(config),
        refresh_interval=interval,
        page_size=config.page_size,
    )


@cli.command()
@click.argument(
    "feed",
    type=click.Choice([str(feed) for feed in (*TIMELINE_MODES, Feed.PROFILE)]),
)
@click.option("--limit", type=int, help="Maximum number of statuses to fetch")
@click.pass_obj
def timeline(config: MastodonConfig, feed: str, limit: Optional[int]) -> None:
    """Print one page of a timeline."""

    async def _fetch_timeline() -> None:
        client = MastodonClient(config)
        result = await fetch_feed(
            client, FetchFeed(feed=Feed(feed)), limit or config.page_size
        )
        if isinstance(result, LoadFailed):
            raise click.ClickException(result.error)
        click.echo(format_statuses(result.items))

    asyncio.run(_fetch_timeline())


if __name__ == "__main__":
    cli()
