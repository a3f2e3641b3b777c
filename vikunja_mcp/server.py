"""FastMCP server initialization for Vikunja MCP."""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from vikunja_mcp.config import load_config

# Initialize the MCP server
mcp = FastMCP("vikunja_mcp")


def _configure_logging() -> None:
    # stdout carries the MCP stdio protocol, so logs go to stderr
    ok, config = load_config()
    level = config.log_level if ok else "WARNING"
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run() -> None:
    """Run the MCP server."""
    # Register tools with the server before serving
    import vikunja_mcp.tools  # noqa: F401

    _configure_logging()
    mcp.run()


if __name__ == "__main__":
    run()
