"""Main CLI application.

Click commands for abmcp: mcp, tools, balance, generate-wallet.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING

import click
from dotenv import find_dotenv, load_dotenv

from abmcp import __version__
from abmcp.config.loader import load_config
from abmcp.core.errors import AbmcpError, ConfigError

if TYPE_CHECKING:
    from abmcp.config.schema import AbmcpConfig, LoggingConfig
    from abmcp.runtime import Runtime

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_STRUCTURED_FORMAT = (
    "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"
)


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> AbmcpConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _configure_logging(config: LoggingConfig) -> None:
    """Send logs to stderr (stdout carries MCP stdio) and optionally a file."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        _error(f"Unknown log level: {config.level}")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=_STRUCTURED_FORMAT if config.structured else _PLAIN_FORMAT,
        handlers=handlers,
        force=True,
    )


def _build_runtime(config: AbmcpConfig) -> Runtime:
    from abmcp.runtime import build_runtime

    try:
        return build_runtime(config)
    except AbmcpError as e:
        _error(str(e))
        raise  # unreachable


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="abmcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """abmcp - Abstract chain tools for AI agents over MCP."""
    load_dotenv(find_dotenv(usecwd=True))
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── mcp ──────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def mcp(ctx: click.Context) -> None:
    """Start the MCP server for AI agent integration."""
    from abmcp.mcp.server import run_server

    config = _load_config(ctx.obj["config_path"])
    _configure_logging(config.logging)
    try:
        asyncio.run(run_server(config))
    except AbmcpError as e:
        _error(str(e))


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option("--tokens", "show_tokens", is_flag=True, help="Also list known tokens.")
@click.pass_context
def tools(ctx: click.Context, show_tokens: bool) -> None:
    """List registered tools and their annotations."""
    from abmcp.cli.display import ToolDisplay

    config = _load_config(ctx.obj["config_path"])
    runtime = _build_runtime(config)
    display = ToolDisplay()
    display.tools(runtime.registry.list_definitions())
    if show_tokens:
        display.tokens(list(runtime.tokens))


# ── balance ──────────────────────────────────────────────────────


@cli.command()
@click.argument("address")
@click.option("--token-address", default=None, help="ERC-20 contract address.")
@click.option("--token-symbol", default=None, help="Token symbol from the registry.")
@click.pass_context
def balance(
    ctx: click.Context,
    address: str,
    token_address: str | None,
    token_symbol: str | None,
) -> None:
    """Show the balance of ADDRESS (hex address or ENS name)."""
    from abmcp.tools.base import ToolCall

    config = _load_config(ctx.obj["config_path"])
    _configure_logging(config.logging)
    runtime = _build_runtime(config)

    arguments = {"address": address}
    if token_address:
        arguments["tokenAddress"] = token_address
    if token_symbol:
        arguments["tokenSymbol"] = token_symbol

    result = asyncio.run(
        runtime.registry.execute(
            ToolCall(id="cli", name="ab_get_balance", arguments=arguments)
        )
    )
    if result.is_error:
        _error(result.content)
    unit = token_symbol or ("tokens" if token_address else "ETH")
    click.echo(f"{result.content} {unit}")


# ── generate-wallet ──────────────────────────────────────────────


@cli.command("generate-wallet")
def generate_wallet_cmd() -> None:
    """Generate a fresh EOA and print it as JSON."""
    from abmcp.tools.generate_wallet import generate_wallet

    click.echo(json.dumps(generate_wallet(), indent=2))
