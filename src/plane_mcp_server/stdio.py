"""Stdio transport for local MCP hosts.

Reads newline-delimited JSON-RPC messages from stdin and writes one
JSON line per response to stdout. stdout carries protocol traffic only,
so logging must go to stderr.
"""

import asyncio
import json
import logging
import sys
from typing import TextIO

from plane_mcp_server.mcp.handlers import McpMethodHandler

logger = logging.getLogger(__name__)


class StdioTransport:
    """Serve an ``McpMethodHandler`` over a pair of text streams.

    Messages are handled one at a time, in arrival order.
    """

    def __init__(
        self,
        handler: McpMethodHandler,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self._handler = handler
        self._input = input_stream or sys.stdin
        self._output = output_stream or sys.stdout

    async def _read_line(self) -> str:
        return await asyncio.to_thread(self._input.readline)

    def _write(self, payload: dict) -> None:
        self._output.write(json.dumps(payload, separators=(",", ":")) + "\n")
        self._output.flush()

    async def serve(self) -> None:
        """Process messages until the input stream reaches EOF."""
        logger.info("Plane MCP Server running on stdio")
        while True:
            line = await self._read_line()
            if not line:
                logger.info("stdin closed; stopping stdio transport")
                return

            line = line.strip()
            if not line:
                continue

            response = await self._handler.handle_message(line)
            if response is not None:
                self._write(response.model_dump())


async def run_stdio(handler: McpMethodHandler) -> None:
    """Serve MCP over the process's stdin/stdout."""
    await StdioTransport(handler).serve()
