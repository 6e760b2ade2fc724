#!/usr/bin/env python3
"""
MCP stdio bridge for desktop clients.

Spawned by the client as a stdio MCP server; forwards every call to the HTTP
MCP endpoint in REMOTE_MCP_URL. Extra request headers come from HTTP_HEADER_*
variables, e.g. HTTP_HEADER_AUTHORIZATION="Bearer ...".
"""
import sys
import asyncio
import logging

from config import load_forwarder_config
from http_client import HTTPMCPClient


def main():
    """Main entry point"""
    config = load_forwarder_config()

    # stdout is reserved for protocol frames
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )

    client = HTTPMCPClient.from_config(config)
    try:
        asyncio.run(client.start())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
