"""Command-line entry point: MCP over stdio (default) or SSE (`--sse`)."""

from __future__ import annotations

import asyncio
import logging
import argparse

import uvicorn
from mcp.server.stdio import stdio_server

from sync_bridge.tools import build_mcp_server
from sync_bridge.state.settings import AppSettings
from sync_bridge.runtime.logging import configure_logging
from sync_bridge.runtime.settings_loader import load_settings
from sync_bridge.runtime.dependencies import build_runtime_deps

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sync-bridge", description="Sync Assistant MCP server and extension bridge")
    p.add_argument("--sse", action="store_true", help="Serve MCP over SSE on SYNC_HTTP_PORT instead of stdio")
    return p.parse_args(argv)


async def run_stdio(settings: AppSettings) -> None:
    # stdout carries the MCP stream; logs go to stderr.
    runtime_deps = await build_runtime_deps(settings)
    server = build_mcp_server(runtime_deps.dispatcher)
    logger.info("mcp: serving over stdio; extension socket on port %s", runtime_deps.bridge.endpoint.port)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await runtime_deps.shutdown()


def run_sse(settings: AppSettings) -> None:
    logger.info("mcp: serving over SSE at http://%s:%s/sse", settings.http.host, settings.http.port)
    uvicorn.run("sync_bridge.server:app", host=settings.http.host, port=settings.http.port, log_config=None)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging()
    settings = load_settings()
    if args.sse:
        run_sse(settings)
    else:
        asyncio.run(run_stdio(settings))


__all__ = ["main", "parse_args", "run_sse", "run_stdio"]
