"""Utility functions for Vikunja MCP."""

from vikunja_mcp.utils.api import (
    _api_request,
    _fetch_tasks,
    _get_project_tasks,
    _get_projects,
    _get_task,
    _get_users,
)
from vikunja_mcp.utils.formatters import (
    _format_breakdown_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from vikunja_mcp.utils.parsers import _parse_projects, _parse_task, _parse_tasks
from vikunja_mcp.utils.priority import (
    age_score,
    calculate_priorities,
    calculate_priority_breakdown,
    calculate_task_priority,
    evaluate_due_date,
    get_blockers,
    get_dependents,
    get_top_priority_task,
    is_task_blocked,
    sort_by_priority,
    start_date_score,
)

__all__ = [
    "_api_request",
    "_fetch_tasks",
    "_get_project_tasks",
    "_get_task",
    "_get_projects",
    "_get_users",
    "_parse_task",
    "_parse_tasks",
    "_parse_projects",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    "_format_breakdown_markdown",
    "age_score",
    "calculate_priorities",
    "calculate_priority_breakdown",
    "calculate_task_priority",
    "evaluate_due_date",
    "get_blockers",
    "get_dependents",
    "get_top_priority_task",
    "is_task_blocked",
    "sort_by_priority",
    "start_date_score",
]
