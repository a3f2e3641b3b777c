"""Core MCP tool definitions for Vikunja."""

import json
from typing import Any

from mcp.types import ToolAnnotations
from pydantic import ValidationError

from vikunja_mcp.config import VikunjaConfig, build_task_link, load_config
from vikunja_mcp.enums import ResponseFormat, TaskStatus
from vikunja_mcp.models.inputs import (
    AddTaskInput,
    CompleteTaskInput,
    DeleteTaskInput,
    GetTaskInput,
    ListProjectsInput,
    ListTasksInput,
    RelateTasksInput,
    UpdateTaskInput,
)
from vikunja_mcp.models.task import TaskModel
from vikunja_mcp.server import mcp
from vikunja_mcp.utils.api import _api_request, _fetch_tasks, _get_projects, _get_task, _get_users
from vikunja_mcp.utils.formatters import (
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
    _format_tasks_markdown,
)
from vikunja_mcp.utils.parsers import _parse_projects, _parse_task
from vikunja_mcp.utils.priority import sort_by_priority

# ============================================================================
# Shared Helpers
# ============================================================================


def _load_task_with_snapshot(
    task_id: int,
    config: VikunjaConfig,
    project_id: int | None = None,
) -> tuple[bool, tuple[TaskModel, list[TaskModel]] | str]:
    """
    Fetch a task and the snapshot of its project.

    The single-task endpoint carries the full relation data, so the fetched
    task replaces its own entry in the snapshot. If the snapshot cannot be
    read, the task is scored against itself alone.

    Returns:
        Tuple of (success: bool, (task, snapshot) | error: str)
    """
    success, raw = _get_task(task_id, config)
    if not success:
        return False, str(raw)

    try:
        task = _parse_task(raw)
    except (ValidationError, KeyError) as e:
        return False, f"Error: Vikunja returned an invalid task - {e}"

    ok, snapshot = _fetch_tasks(project_id or task.project_id, config)
    tasks = snapshot if ok and isinstance(snapshot, list) else []

    merged = [task if t.id == task.id else t for t in tasks]
    if not any(t.id == task.id for t in merged):
        merged.append(task)

    return True, (task, merged)


def _rank_summary(task_id: int, project_id: int | None, config: VikunjaConfig) -> str:
    """Describe where a task now ranks among the open tasks of its project."""
    success, result = _fetch_tasks(project_id, config)
    if not success or not isinstance(result, list):
        return ""

    open_tasks = [t for t in sort_by_priority(result) if not t.done]
    for position, task in enumerate(open_tasks, 1):
        if task.id == task_id:
            return f"Now ranked #{position} of {len(open_tasks)} open task(s) (score {task.calculated_priority:.1f})."
    return ""


def _resolve_assignee(name: str, config: VikunjaConfig) -> tuple[bool, int | str]:
    """
    Find the user ID for a username or display name, ignoring case.

    Returns:
        Tuple of (success: bool, user_id: int | error: str)
    """
    success, result = _get_users(name, config)
    if not success:
        return False, str(result)

    wanted = name.strip().lower()
    for user in result if isinstance(result, list) else []:
        if not isinstance(user, dict) or not isinstance(user.get("id"), int):
            continue
        names = (user.get("username") or "", user.get("name") or "")
        if wanted in (n.lower() for n in names if n):
            return True, user["id"]

    return False, (
        f"Error: No Vikunja user named '{name}'.\n"
        "Tip: Use the exact username or display name of a user who can see the project."
    )


def _merge_and_save(task_id: int, changes: dict[str, Any], config: VikunjaConfig) -> tuple[bool, TaskModel | str]:
    """
    Apply changes to a task and save it.

    Vikunja replaces the whole task on update, so the current task is read
    first and the changes are merged into it.
    """
    success, raw = _get_task(task_id, config)
    if not success:
        return False, str(raw)

    payload = {**raw, **changes}
    success, data = _api_request("POST", f"/tasks/{task_id}", payload=payload, config=config)
    if not success:
        return False, str(data)

    try:
        return True, _parse_task(data if isinstance(data, dict) else payload)
    except (ValidationError, KeyError) as e:
        return False, f"Error: Vikunja returned an invalid task - {e}"


# ============================================================================
# Core Tool Definitions
# ============================================================================


@mcp.tool(
    name="vikunja_list",
    annotations=ToolAnnotations(
        title="List Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_list(params: ListTasksInput) -> str:
    """
    List a project's tasks ranked by derived priority.

    USE THIS WHEN:
    - Getting the current list of tasks to analyze or summarize
    - Searching for tasks by keyword
    - Exploring tasks you don't know the IDs of

    DO NOT USE WHEN:
    - You have a specific task ID → use vikunja_get instead
    - You want the single most urgent task → use vikunja_top instead
    - You want reasons for the ranking → use vikunja_suggest or vikunja_breakdown

    ORDERING: open tasks first, highest derived score first. The score combines
    declared priority, due date, start date, age and what the task blocks.

    Args:
        params: ListTasksInput containing project_id, status, search, limit and response_format

    Returns:
        Formatted list of tasks (markdown, concise or JSON)

    Examples:
        - List open tasks: params with default values
        - Search tasks: params with search="invoice"
        - Include done tasks: params with status="all"
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    # Score against the full snapshot so completed blockers resolve
    all_tasks = result if isinstance(result, list) else []
    tasks = sort_by_priority(all_tasks)

    if params.status == TaskStatus.UNDONE:
        tasks = [t for t in tasks if not t.done]
    elif params.status == TaskStatus.DONE:
        tasks = [t for t in tasks if t.done]

    if params.search:
        needle = params.search.lower()
        tasks = [t for t in tasks if needle in t.title.lower() or needle in t.description.lower()]

    total_count = len(tasks)
    if params.limit and len(tasks) > params.limit:
        tasks = tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"total": total_count, "count": len(tasks), "tasks": [t.model_dump(mode="json") for t in tasks]},
            indent=2,
        )

    title = "Tasks"
    if params.search:
        title = f"Tasks matching '{params.search}'"
    if params.status != TaskStatus.UNDONE:
        title += f" ({params.status.value})"

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(tasks, params.search)

    return _format_tasks_markdown(tasks, title, config.url)


@mcp.tool(
    name="vikunja_get",
    annotations=ToolAnnotations(
        title="Get Task Details",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_get(params: GetTaskInput) -> str:
    """
    Retrieve full details for a single task by ID, including its score.

    USE THIS WHEN:
    - You have a specific task ID (e.g., from a previous list call)
    - You want to inspect a task before updating it

    DO NOT USE WHEN:
    - You want to search tasks → use vikunja_list
    - You want to know why a task ranks where it does → use vikunja_breakdown

    Args:
        params: GetTaskInput containing task_id and response_format

    Returns:
        Detailed task information (markdown, concise or JSON)

    Examples:
        - Get task #5: params with task_id=5
        - Get task as JSON: params with task_id=5, response_format="json"
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _load_task_with_snapshot(params.task_id, config)
    if not success:
        return f"{result}\nTip: Use vikunja_list to find valid task IDs."

    task, snapshot = result
    scored = next(t for t in sort_by_priority(snapshot) if t.id == task.id)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(scored.model_dump(mode="json"), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(scored)

    return _format_task_markdown(scored, config.url)


@mcp.tool(
    name="vikunja_add",
    annotations=ToolAnnotations(
        title="Add Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    ),
)
async def vikunja_add(params: AddTaskInput) -> str:
    """
    Create a new task in Vikunja.

    USE THIS WHEN:
    - Adding a new task to track
    - Creating tasks with metadata (priority, due date, start date, assignee)

    DO NOT USE WHEN:
    - Updating an existing task → use vikunja_update instead
    - Declaring that one task waits on another → use vikunja_relate after creating both

    Args:
        params: AddTaskInput containing title and optional attributes

    Returns:
        Confirmation message with the created task ID and its new rank

    Examples:
        - Simple task: params with title="Buy groceries"
        - Urgent task: params with title="Fix outage", priority=4
        - Task with due date: params with title="Submit report", due_date="2025-03-01"
        - Assigned task: params with title="Review PR", assignee="alex"
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    project_id = params.project_id or config.default_project_id
    payload: dict[str, Any] = {"title": params.title}
    if params.description is not None:
        payload["description"] = params.description
    if params.priority is not None:
        payload["priority"] = int(params.priority)
    if params.due_date:
        payload["due_date"] = params.due_date
    if params.start_date:
        payload["start_date"] = params.start_date
    if params.assignee:
        found, user_id = _resolve_assignee(params.assignee, config)
        if not found:
            return str(user_id)
        payload["assignees"] = [{"id": user_id}]

    success, data = _api_request("PUT", f"/projects/{project_id}/tasks", payload=payload, config=config)
    if not success:
        return str(data)

    try:
        task = _parse_task(data)
    except (ValidationError, KeyError, TypeError) as e:
        return f"Task created, but the response could not be read - {e}"

    lines = ["Task created successfully.", _format_task_concise(task)]
    if rank := _rank_summary(task.id, project_id, config):
        lines.append(rank)
    if link := build_task_link(config.url, task.project_id or project_id, task.id):
        lines.append(link)
    return "\n".join(lines)


@mcp.tool(
    name="vikunja_update",
    annotations=ToolAnnotations(
        title="Update Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_update(params: UpdateTaskInput) -> str:
    """
    Update an existing task's attributes.

    USE THIS WHEN:
    - Changing title, description, priority, dates or assignee
    - Reopening a task (done=False)

    DO NOT USE WHEN:
    - Creating a new task → use vikunja_add instead
    - Marking a task complete → use vikunja_complete instead

    CLEARING VALUES: Use empty string to clear a date or the assignee (e.g., due_date="" removes the due date)

    Args:
        params: UpdateTaskInput containing task_id and attributes to change

    Returns:
        Confirmation message with updated task info and its new rank

    Examples:
        - Raise priority: params with task_id=5, priority=4
        - Move deadline: params with task_id=5, due_date="2025-03-01"
        - Remove due date: params with task_id=5, due_date=""
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    changes: dict[str, Any] = {}
    if params.title is not None:
        changes["title"] = params.title
    if params.description is not None:
        changes["description"] = params.description
    if params.done is not None:
        changes["done"] = params.done
    if params.priority is not None:
        changes["priority"] = int(params.priority)
    if params.due_date is not None:
        changes["due_date"] = params.due_date or None
    if params.start_date is not None:
        changes["start_date"] = params.start_date or None
    if params.assignee == "":
        changes["assignees"] = []
    elif params.assignee is not None:
        found, user_id = _resolve_assignee(params.assignee, config)
        if not found:
            return str(user_id)
        changes["assignees"] = [{"id": user_id}]

    if not changes:
        return "Error: No changes given.\nTip: Set at least one of title, description, done, priority, due_date, start_date, assignee."

    success, result = _merge_and_save(params.task_id, changes, config)
    if not success:
        return str(result)

    lines = [f"Task {params.task_id} updated successfully.", _format_task_concise(result)]
    if rank := _rank_summary(params.task_id, result.project_id, config):
        lines.append(rank)
    return "\n".join(lines)


@mcp.tool(
    name="vikunja_complete",
    annotations=ToolAnnotations(
        title="Complete Task",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_complete(params: CompleteTaskInput) -> str:
    """
    Mark a task as done.

    Completing a task unblocks every task that was waiting only on it, so the
    response reports the new top priority task of the project.

    Args:
        params: CompleteTaskInput containing the task_id to complete

    Returns:
        Confirmation message

    Examples:
        - Complete task #5: params with task_id=5
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _merge_and_save(params.task_id, {"done": True}, config)
    if not success:
        return str(result)

    lines = [f"Task {params.task_id} marked as done."]

    ok, snapshot = _fetch_tasks(result.project_id, config)
    if ok and isinstance(snapshot, list):
        open_tasks = [t for t in sort_by_priority(snapshot) if not t.done]
        if open_tasks:
            lines.append(f"Next up: {_format_task_concise(open_tasks[0])}")
        else:
            lines.append("No open tasks left in this project.")

    return "\n".join(lines)


@mcp.tool(
    name="vikunja_delete",
    annotations=ToolAnnotations(
        title="Delete Task",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_delete(params: DeleteTaskInput) -> str:
    """
    Permanently delete a task from Vikunja.

    This cannot be undone. Prefer vikunja_complete for finished work.

    Args:
        params: DeleteTaskInput containing the task_id to delete

    Returns:
        Confirmation message

    Examples:
        - Delete task #5: params with task_id=5
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, output = _api_request("DELETE", f"/tasks/{params.task_id}", config=config)

    if success:
        return f"Task {params.task_id} deleted."
    return str(output)


@mcp.tool(
    name="vikunja_relate",
    annotations=ToolAnnotations(
        title="Relate Tasks",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_relate(params: RelateTasksInput) -> str:
    """
    Create a relation between two tasks, e.g. a dependency.

    USE THIS WHEN:
    - One task cannot start before another is done
    - Linking related, duplicate, or parent/sub tasks

    RELATION KINDS THAT AFFECT RANKING:
    - "blocked": task_id waits on other_task_id (task_id is dampened until other_task_id is done)
    - "blocking": task_id must be done before other_task_id (task_id inherits urgency from it)
    Vikunja creates the reverse relation on the other task automatically.

    Args:
        params: RelateTasksInput with task_id, other_task_id and relation_kind

    Returns:
        Confirmation message

    Examples:
        - Task 7 depends on task 3: params with task_id=7, other_task_id=3, relation_kind="blocked"
        - Task 3 blocks task 7: params with task_id=3, other_task_id=7, relation_kind="blocking"
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    payload = {"other_task_id": params.other_task_id, "relation_kind": params.relation_kind.value}
    success, output = _api_request("PUT", f"/tasks/{params.task_id}/relations", payload=payload, config=config)

    if success:
        return f"Relation created: #{params.task_id} {params.relation_kind.value} #{params.other_task_id}."
    return str(output)


@mcp.tool(
    name="vikunja_projects",
    annotations=ToolAnnotations(
        title="List Projects",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_projects(params: ListProjectsInput) -> str:
    """
    List the projects visible to the configured API token.

    Use this to find a project_id for the other tools.

    Args:
        params: ListProjectsInput with include_archived and response_format

    Returns:
        List of projects with their IDs
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _get_projects(config)
    if not success:
        return str(result)

    try:
        projects = _parse_projects(result if isinstance(result, list) else [])
    except ValidationError as e:
        return f"Error: Vikunja returned an invalid project - {e}"
    if not params.include_archived:
        projects = [p for p in projects if not p.is_archived]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"projects": [p.model_dump() for p in projects], "count": len(projects)}, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        return "\n".join([f"{len(projects)} project(s)"] + [f"#{p.id}: {p.title}" for p in projects])

    if not projects:
        return "# Projects\n\nNo projects found."

    lines = ["# Projects", ""]
    for p in projects:
        marker = " (default)" if p.id == config.default_project_id else ""
        archived = " [archived]" if p.is_archived else ""
        lines.append(f"- **#{p.id}** {p.title}{marker}{archived}")

    return "\n".join(lines)
