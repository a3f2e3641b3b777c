"""Input models for Vikunja MCP tools."""

from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from vikunja_mcp.enums import RelationKind, ResponseFormat, TaskPriority, TaskStatus


def _to_vikunja_date(value: str | None) -> str | None:
    """
    Validate a date input and convert it to the RFC 3339 form Vikunja expects.

    Accepts 'YYYY-MM-DD' (midnight UTC) or a full ISO 8601 timestamp. An empty
    string is kept as-is and means "clear this date".
    """
    if value is None or value == "":
        return value

    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            parsed = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD or ISO 8601") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.isoformat().replace("+00:00", "Z")


# ============================================================================
# Core Tool Input Models
# ============================================================================


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    status: TaskStatus = Field(
        default=TaskStatus.UNDONE,
        description="Filter by task status: undone, done, or all",
    )
    search: str | None = Field(default=None, description="Case-insensitive keyword matched against title and description")
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise', or 'json'",
    )


class GetTaskInput(BaseModel):
    """Input model for getting a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to retrieve", ge=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise', or 'json'",
    )


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (required)", min_length=1, max_length=250)
    description: str | None = Field(default=None, description="Detailed description of the task")
    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    priority: TaskPriority | None = Field(
        default=None,
        description="Priority: 0=unset, 1=low, 2=medium, 3=high, 4=urgent, 5=do now",
    )
    due_date: str | None = Field(default=None, description="Due date (YYYY-MM-DD or ISO 8601)")
    start_date: str | None = Field(default=None, description="Start date (YYYY-MM-DD or ISO 8601)")
    assignee: str | None = Field(
        default=None, description="Username or display name of the user to assign", min_length=1
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("due_date", "start_date")
    @classmethod
    def validate_dates(cls, v: str | None) -> str | None:
        return _to_vikunja_date(v) or None


class UpdateTaskInput(BaseModel):
    """Input model for updating an existing task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to update", ge=1)
    title: str | None = Field(default=None, description="New title", min_length=1, max_length=250)
    description: str | None = Field(default=None, description="New description")
    done: bool | None = Field(default=None, description="Mark the task done or not done")
    priority: TaskPriority | None = Field(default=None, description="New priority, 0-5")
    due_date: str | None = Field(default=None, description="New due date (use empty string to remove)")
    start_date: str | None = Field(default=None, description="New start date (use empty string to remove)")
    assignee: str | None = Field(
        default=None, description="Username or display name to assign (use empty string to unassign)"
    )

    @field_validator("due_date", "start_date")
    @classmethod
    def validate_dates(cls, v: str | None) -> str | None:
        return _to_vikunja_date(v)


class CompleteTaskInput(BaseModel):
    """Input model for completing a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to complete", ge=1)


class DeleteTaskInput(BaseModel):
    """Input model for deleting a task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to delete", ge=1)


class RelateTasksInput(BaseModel):
    """Input model for creating a relation between two tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task the relation starts from", ge=1)
    other_task_id: int = Field(..., description="Task the relation points to", ge=1)
    relation_kind: RelationKind = Field(
        default=RelationKind.BLOCKED,
        description="Relation kind, e.g. 'blocked' (task_id waits on other_task_id) or 'blocking'",
    )

    @field_validator("other_task_id")
    @classmethod
    def validate_other_task(cls, v: int, info: ValidationInfo) -> int:
        if info.data.get("task_id") == v:
            raise ValueError("A task cannot be related to itself")
        return v


class ListProjectsInput(BaseModel):
    """Input model for listing projects."""

    model_config = ConfigDict(str_strip_whitespace=True)

    include_archived: bool = Field(default=False, description="Include archived projects")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise', or 'json'",
    )


# ============================================================================
# Agent Intelligence Input Models
# ============================================================================


class SuggestInput(BaseModel):
    """Input model for ranked task suggestions."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    limit: int = Field(default=5, description="Maximum number of suggestions to return", ge=1, le=20)
    context: str | None = Field(
        default=None,
        description="Context: 'blockers', 'deadlines', or None for balanced",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise', or 'json'"
    )

    @field_validator("context")
    @classmethod
    def validate_context(cls, v: str | None) -> str | None:
        if not v:
            return None
        if v not in ("blockers", "deadlines"):
            raise ValueError("Context must be 'blockers', 'deadlines', or None")
        return v


class TopTaskInput(BaseModel):
    """Input model for the single most urgent task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise', or 'json'"
    )


class BreakdownInput(BaseModel):
    """Input model for a task's priority breakdown."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int = Field(..., description="Task ID to explain", ge=1)
    project_id: int | None = Field(
        default=None,
        description="Project whose tasks resolve relations, defaults to the task's own project",
        ge=1,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )


class ReadyInput(BaseModel):
    """Input model for listing ready (unblocked) tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    limit: int = Field(default=10, description="Maximum number of tasks to return", ge=1, le=50)
    min_priority: TaskPriority | None = Field(default=None, description="Only tasks with at least this priority")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise', or 'json'"
    )


class BlockedInput(BaseModel):
    """Input model for listing blocked tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    limit: int = Field(default=10, description="Maximum number of blocked tasks to return", ge=1, le=50)
    show_blockers: bool = Field(default=True, description="Show which tasks are blocking each blocked task")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown', 'concise', or 'json'"
    )


class DependenciesInput(BaseModel):
    """Input model for dependency analysis."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: int | None = Field(default=None, description="Specific task ID to analyze, or None for overview", ge=1)
    project_id: int | None = Field(default=None, description="Project ID, defaults to VIKUNJA_PROJECT_ID", ge=1)
    direction: str = Field(default="both", description="Direction: 'blocks', 'blocked_by', or 'both'")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN, description="Output format: 'markdown' or 'json'"
    )

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, v: str) -> str:
        if v not in ("blocks", "blocked_by", "both"):
            raise ValueError("Direction must be 'blocks', 'blocked_by', or 'both'")
        return v
