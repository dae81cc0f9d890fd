"""MCP server wiring: stdio transport, tool listing and tool calls."""

import logging
import os
import time
from typing import Any, Dict, List

import aiohttp
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .config import GitHubConfig
from .constants import SERVER_NAME
from .core.tools import ToolRegistry, ToolRouter
from .github.client import GitHubClient

logger = logging.getLogger(__name__)


def create_server(router: ToolRouter) -> Server:
    """Build the MCP server around an already configured router."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return router.registry.list_tools()

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        request_id = os.urandom(4).hex()
        start_time = time.time()
        logger.info(
            f"🔧 [{request_id}] Tool call: {name}",
            extra={"tool": name, "request_id": request_id},
        )

        try:
            result = await router.route_tool_call(name, arguments)
        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000)
            logger.error(
                f"❌ [{request_id}] Tool '{name}' failed after {duration_ms}ms: {e}",
                extra={"tool": name, "request_id": request_id, "duration_ms": duration_ms},
            )
            # The MCP server turns the exception into an error result for the caller
            raise

        duration_ms = round((time.time() - start_time) * 1000)
        logger.info(
            f"✅ [{request_id}] Tool '{name}' completed in {duration_ms}ms",
            extra={"tool": name, "request_id": request_id, "duration_ms": duration_ms},
        )
        return result

    return server


async def serve(config: GitHubConfig) -> None:
    """Serve GitHub tools over stdio until the client disconnects."""
    logger.info(f"🚀 Starting {SERVER_NAME} against {config.api_url}")

    async with aiohttp.ClientSession() as session:
        client = GitHubClient(config=config, session=session)
        registry = ToolRegistry()
        registry.initialize_default_tools()
        server = create_server(ToolRouter(registry, client))

        options = server.create_initialization_options()
        async with stdio_server() as (read_stream, write_stream):
            logger.info("🔗 STDIO server connected, waiting for requests...")
            await server.run(read_stream, write_stream, options)

    logger.info(f"{SERVER_NAME} shutting down.")
