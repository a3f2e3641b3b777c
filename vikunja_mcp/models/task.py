"""Core task models for Vikunja MCP."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vikunja_mcp.enums import TaskPriority


class TaskRelation(BaseModel):
    """A directed edge from a task to another task.

    ``relation_kind`` is kept as a plain string so that kinds unknown to this
    package survive parsing; only ``blocking`` and ``blocked`` are scored.
    """

    other_task_id: int
    relation_kind: str


class TaskModel(BaseModel):
    """Model representing a Vikunja task, normalized at the API boundary."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    description: str = ""
    done: bool = False
    priority: TaskPriority = TaskPriority.UNSET
    due_date: str | None = None
    start_date: str | None = None
    created: str | None = None
    updated: str | None = None
    project_id: int | None = None
    identifier: str | None = None
    assignee: str | None = None
    tags: list[str] = Field(default_factory=list)
    related_tasks: list[TaskRelation] = Field(default_factory=list)

    # Populated by the priority engine on the copies it returns
    calculated_priority: float | None = None
    is_blocked: bool | None = None


class ProjectModel(BaseModel):
    """Model representing a Vikunja project."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    description: str = ""
    is_archived: bool = False
