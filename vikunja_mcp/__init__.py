"""
MCP Server for Vikunja.

This server provides tools to manage tasks in a Vikunja instance over its
REST API, and ranks open work by a derived priority that accounts for
deadlines, start dates and blocking relations between tasks.
"""

# Re-export enums
from vikunja_mcp.enums import RelationKind, ResponseFormat, TaskPriority, TaskStatus

# Re-export models
from vikunja_mcp.models import (
    AddTaskInput,
    BlockedInput,
    BlockedTaskInfo,
    BottleneckInfo,
    BreakdownInput,
    CompleteTaskInput,
    DeleteTaskInput,
    DependenciesInput,
    GetTaskInput,
    ListProjectsInput,
    ListTasksInput,
    PriorityBreakdown,
    ProjectModel,
    ReadyInput,
    RelateTasksInput,
    ScoredTask,
    SuggestInput,
    TaskModel,
    TaskRelation,
    TopTaskInput,
    UpdateTaskInput,
)

# Re-export MCP server instance
from vikunja_mcp.server import mcp

# Re-export tools
from vikunja_mcp.tools import (
    vikunja_add,
    vikunja_blocked,
    vikunja_breakdown,
    vikunja_complete,
    vikunja_delete,
    vikunja_dependencies,
    vikunja_get,
    vikunja_list,
    vikunja_projects,
    vikunja_ready,
    vikunja_relate,
    vikunja_suggest,
    vikunja_top,
    vikunja_update,
)

# Re-export utilities (including private functions used by tests)
from vikunja_mcp.utils import (
    _api_request,
    _fetch_tasks,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
    _get_project_tasks,
    _parse_task,
    _parse_tasks,
    calculate_priorities,
    calculate_priority_breakdown,
    calculate_task_priority,
    get_top_priority_task,
    sort_by_priority,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "TaskPriority",
    "RelationKind",
    # Task models
    "TaskModel",
    "TaskRelation",
    "ProjectModel",
    # Core input models
    "ListTasksInput",
    "GetTaskInput",
    "AddTaskInput",
    "UpdateTaskInput",
    "CompleteTaskInput",
    "DeleteTaskInput",
    "RelateTasksInput",
    "ListProjectsInput",
    # Agent intelligence input models
    "SuggestInput",
    "TopTaskInput",
    "BreakdownInput",
    "ReadyInput",
    "BlockedInput",
    "DependenciesInput",
    # Intelligence output models
    "PriorityBreakdown",
    "ScoredTask",
    "BlockedTaskInfo",
    "BottleneckInfo",
    # Utility functions
    "_api_request",
    "_fetch_tasks",
    "_get_project_tasks",
    "_parse_task",
    "_parse_tasks",
    "_format_task_concise",
    "_format_task_markdown",
    "_format_tasks_concise",
    "_format_tasks_markdown",
    # Priority engine
    "calculate_priorities",
    "calculate_priority_breakdown",
    "calculate_task_priority",
    "get_top_priority_task",
    "sort_by_priority",
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
    # MCP server instance
    "mcp",
]
