"""Parser helpers for Vikunja data."""

from typing import Any

from vikunja_mcp.models.task import ProjectModel, TaskModel, TaskRelation

# Vikunja serializes unset dates as the zero time instead of null
_ZERO_DATE_PREFIXES = ("0001-01-01", "1970-01-01")


def _normalize_date(value: Any) -> str | None:
    """Map empty values and zero-date sentinels to None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.startswith(_ZERO_DATE_PREFIXES):
        return None
    return value


def _parse_relations(task_dict: dict[str, Any]) -> list[TaskRelation]:
    """
    Flatten a task's relations into directed edges.

    Vikunja returns ``related_tasks`` as ``{kind: [task, ...]}``. A list of
    ``{other_task_id, relation_kind}`` objects (under ``related_tasks`` or
    ``relations``) is accepted too. Anything else yields no edges.
    """
    raw = task_dict.get("related_tasks")
    if raw is None:
        raw = task_dict.get("relations")

    relations: list[TaskRelation] = []

    if isinstance(raw, dict):
        for kind, others in raw.items():
            for other in others or []:
                other_id = other.get("id") if isinstance(other, dict) else other
                if isinstance(other_id, int):
                    relations.append(TaskRelation(other_task_id=other_id, relation_kind=str(kind)))
    elif isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                continue
            other_id = entry.get("other_task_id")
            kind = entry.get("relation_kind")
            if isinstance(other_id, int) and kind:
                relations.append(TaskRelation(other_task_id=other_id, relation_kind=str(kind)))

    return relations


def _parse_assignee(task_dict: dict[str, Any]) -> str | None:
    assignees = task_dict.get("assignees") or []
    if not assignees or not isinstance(assignees[0], dict):
        return None
    return assignees[0].get("username") or assignees[0].get("name") or None


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    """
    Parse a raw Vikunja task dictionary into a TaskModel.

    Zero-date sentinels become None, labels become tag names and relations
    are flattened. Priorities outside 0-5 raise a pydantic ValidationError.

    Args:
        task_dict: Dictionary from the Vikunja API

    Returns:
        TaskModel instance with validated data
    """
    labels = task_dict.get("labels") or []
    tags = [label.get("title", "") if isinstance(label, dict) else str(label) for label in labels]

    return TaskModel.model_validate(
        {
            "id": task_dict["id"],
            "title": task_dict.get("title") or "",
            "description": task_dict.get("description") or "",
            "done": bool(task_dict.get("done", False)),
            "priority": task_dict.get("priority") or 0,
            "due_date": _normalize_date(task_dict.get("due_date")),
            "start_date": _normalize_date(task_dict.get("start_date")),
            "created": _normalize_date(task_dict.get("created")),
            "updated": _normalize_date(task_dict.get("updated")),
            "project_id": task_dict.get("project_id"),
            "identifier": task_dict.get("identifier") or None,
            "assignee": _parse_assignee(task_dict),
            "tags": [t for t in tags if t],
            "related_tasks": _parse_relations(task_dict),
        }
    )


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[TaskModel]:
    """
    Parse a list of raw Vikunja task dictionaries into TaskModel instances.

    Args:
        tasks: List of dictionaries from the Vikunja API

    Returns:
        List of TaskModel instances
    """
    return [_parse_task(t) for t in tasks]


def _parse_projects(projects: list[dict[str, Any]]) -> list[ProjectModel]:
    return [ProjectModel.model_validate(p) for p in projects]
