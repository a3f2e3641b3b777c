"""Enums for Vikunja MCP."""

from enum import Enum, IntEnum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task status filter options."""

    UNDONE = "undone"
    DONE = "done"
    ALL = "all"


class TaskPriority(IntEnum):
    """Vikunja priority levels."""

    UNSET = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4
    DO_NOW = 5

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class RelationKind(str, Enum):
    """Vikunja task relation kinds. Only BLOCKING and BLOCKED affect scoring."""

    UNKNOWN = "unknown"
    SUBTASK = "subtask"
    PARENTTASK = "parenttask"
    RELATED = "related"
    DUPLICATEOF = "duplicateof"
    DUPLICATES = "duplicates"
    BLOCKING = "blocking"
    BLOCKED = "blocked"
    PRECEDES = "precedes"
    FOLLOWS = "follows"
    COPIEDFROM = "copiedfrom"
    COPIEDTO = "copiedto"
