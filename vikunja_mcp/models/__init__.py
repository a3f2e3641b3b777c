"""Pydantic models for Vikunja MCP."""

from vikunja_mcp.models.inputs import (
    AddTaskInput,
    BlockedInput,
    BreakdownInput,
    CompleteTaskInput,
    DeleteTaskInput,
    DependenciesInput,
    GetTaskInput,
    ListProjectsInput,
    ListTasksInput,
    ReadyInput,
    RelateTasksInput,
    SuggestInput,
    TopTaskInput,
    UpdateTaskInput,
)
from vikunja_mcp.models.intelligence import (
    BlockedTaskInfo,
    BottleneckInfo,
    PriorityBreakdown,
    ScoredTask,
)
from vikunja_mcp.models.task import ProjectModel, TaskModel, TaskRelation

__all__ = [
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
]
