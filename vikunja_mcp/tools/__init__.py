"""MCP tool definitions for Vikunja."""

# Import all tools to register them with the MCP server
from vikunja_mcp.tools.core import (
    vikunja_add,
    vikunja_complete,
    vikunja_delete,
    vikunja_get,
    vikunja_list,
    vikunja_projects,
    vikunja_relate,
    vikunja_update,
)
from vikunja_mcp.tools.intelligence import (
    vikunja_blocked,
    vikunja_breakdown,
    vikunja_dependencies,
    vikunja_ready,
    vikunja_suggest,
    vikunja_top,
)

__all__ = [
    # Core tools
    "vikunja_list",
    "vikunja_get",
    "vikunja_add",
    "vikunja_update",
    "vikunja_complete",
    "vikunja_delete",
    "vikunja_relate",
    "vikunja_projects",
    # Intelligence tools
    "vikunja_suggest",
    "vikunja_top",
    "vikunja_breakdown",
    "vikunja_ready",
    "vikunja_blocked",
    "vikunja_dependencies",
]
