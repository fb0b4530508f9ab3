#!/usr/bin/env python3
"""
Entry point for the Marketing Analytics MCP server.

Serves read-only GA4, Search Console, Meta Ads and Google Ads reports over
stdio. Credentials come from the environment, optionally seeded from a
.env file.
"""
import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

import structlog
from dotenv import load_dotenv
from mcp.server.stdio import stdio_server

from marketing_analytics_mcp import __version__
from marketing_analytics_mcp.auth import ProviderClients
from marketing_analytics_mcp.config import AppConfig, load_config
from marketing_analytics_mcp.coordinator import ToolRegistry, create_server
from marketing_analytics_mcp.tools import register_all_tools

logger = structlog.get_logger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """structlog to stderr; stdout carries the MCP protocol"""
    level_value = logging.getLevelName((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def build_registry(config: AppConfig) -> ToolRegistry:
    """All tools wired to clients for the configured providers"""
    clients = ProviderClients.from_config(config)
    return register_all_tools(ToolRegistry(config), clients)


async def main(config: AppConfig) -> None:
    """Run the MCP server"""
    registry = build_registry(config)
    server = create_server(registry)

    logger.info("starting_marketing_analytics_mcp", version=__version__, tools=len(registry.tools))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Marketing Analytics MCP server (stdio)")
    parser.add_argument("--env-file", type=str, help="Path to a .env file (default: ./.env)")
    return parser.parse_args(argv)


def run_server(argv: Optional[Sequence[str]] = None) -> None:
    """
    Runs the MCP server.

    Serves as the entrypoint for the 'marketing-analytics-mcp' command.
    """
    args = parse_args(argv)
    configure_logging()

    # Existing environment variables win over the file
    if args.env_file:
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    config = load_config()
    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("server_stopped")


if __name__ == "__main__":
    run_server()
