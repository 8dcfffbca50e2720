"""
ark-chat CLI — interactive multi-turn chat with a Volcengine Ark endpoint.

Registered as `ark-chat` console script via pyproject.toml.
"""

from __future__ import annotations

import logging

import click

from .config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_REGION,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_SECONDS,
    ChatConfig,
)
from .controller import CLEAR_COMMAND, TurnController
from .exceptions import ArkChatError, ConfigurationError
from .streaming import ChatClient

logger = logging.getLogger("ark_chat")

USAGE_EXAMPLE = "ark-chat --apikey sk-xxxxxx --endpoint ep-xxxxxx --timeout 180"
BANNER_WIDTH = 60
PROMPT_TEXT = ">"


def _resolve_log_level(level: str) -> int:
    """Map a ``--log-level`` name or number to a logging level, WARNING if unknown."""
    if level.isdigit():
        return int(level)
    resolved = logging.getLevelName(level.upper())
    if isinstance(resolved, int):
        return resolved
    logger.warning("[ArkChat] Unknown --log-level %r; using WARNING.", level)
    return logging.WARNING


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_resolve_log_level(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_banner() -> None:
    click.secho(f"{' Doubao multi-turn chat CLI ':=^{BANNER_WIDTH}}", fg="cyan", bold=True)
    click.echo(f"Tips: enter q/quit to exit; enter {CLEAR_COMMAND} to reset the context")
    click.secho("=" * BANNER_WIDTH, fg="cyan")


def _read_line() -> str:
    try:
        return click.prompt(PROMPT_TEXT, default="", show_default=False, prompt_suffix=" ")
    except click.exceptions.Abort:
        raise EOFError from None


# ── Main command ──────────────────────────────────────────────────────────────


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="ark-chat")
@click.option("--apikey", envvar="ARK_API_KEY", help="Volcengine Ark API key (required).")
@click.option("--endpoint", envvar="ARK_ENDPOINT_ID", help="Ark endpoint ID (required).")
@click.option(
    "--region",
    envvar="ARK_REGION",
    default=DEFAULT_REGION,
    show_default=True,
    help="Ark region used in the endpoint URL.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT_SECONDS,
    show_default=True,
    help=(
        "Seconds to wait for the response to start, and for each next piece of the "
        "stream; a reply that keeps streaming is not cut off (120-180 recommended)."
    ),
)
@click.option(
    "--max-tokens",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_TOKENS,
    show_default=True,
    help="Token budget for each reply.",
)
@click.option(
    "--temperature",
    type=click.FloatRange(0.0, 2.0),
    default=DEFAULT_TEMPERATURE,
    show_default=True,
    help="Sampling temperature.",
)
@click.option(
    "--log-level",
    default="warning",
    show_default=True,
    help="Logging level for diagnostics on stderr (debug, info, warning, error).",
)
def cli(
    apikey: str | None,
    endpoint: str | None,
    region: str,
    timeout: int,
    max_tokens: int,
    temperature: float,
    log_level: str,
) -> None:
    """Chat with a Doubao model on Volcengine Ark, streaming replies as they arrive.

    \b
    Examples:
        ark-chat --apikey sk-xxxxxx --endpoint ep-xxxxxx
        ark-chat --apikey sk-xxxxxx --endpoint ep-xxxxxx --timeout 180
        ARK_API_KEY=sk-xxxxxx ark-chat --endpoint ep-xxxxxx --region cn-shanghai
    """
    _configure_logging(log_level)
    try:
        config = ChatConfig(
            api_key=apikey or "",
            endpoint_id=endpoint or "",
            region=region,
            timeout=timeout,
            max_tokens=max_tokens,
            temperature=temperature,
        )
    except ConfigurationError as exc:
        click.secho(f"Error: {exc}", fg="red", err=True)
        click.echo("Both --apikey and --endpoint are required.", err=True)
        click.secho("Usage example:", fg="cyan", err=True)
        click.echo(f"  {USAGE_EXAMPLE}", err=True)
        raise SystemExit(1) from exc

    logger.debug("[ArkChat] Starting with %r", config)
    _print_banner()
    controller = TurnController(ChatClient(config))
    raise SystemExit(controller.run(_read_line))


# ── Entry point ───────────────────────────────────────────────────────────────


def cli_entry() -> None:
    """Entry point for the console_scripts."""
    try:
        cli()
    except ArkChatError as exc:
        click.secho(str(exc), fg="red", err=True)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    cli_entry()
