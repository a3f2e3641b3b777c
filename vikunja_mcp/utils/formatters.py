"""Formatting utilities for task output."""

from vikunja_mcp.config import build_task_link
from vikunja_mcp.enums import TaskPriority
from vikunja_mcp.models.intelligence import PriorityBreakdown
from vikunja_mcp.models.task import TaskModel


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#5: Title (High, due:2024-12-31, score:412.5, blocked)"
    """
    title = task.title[:50] if task.title else "Untitled"

    meta = []
    if task.priority != TaskPriority.UNSET:
        meta.append(task.priority.label)
    if task.due_date:
        meta.append(f"due:{task.due_date[:10]}")
    if task.calculated_priority is not None:
        meta.append(f"score:{task.calculated_priority:.1f}")
    if task.is_blocked:
        meta.append("blocked")
    if task.done:
        meta.append("done")

    if meta:
        return f"#{task.id}: {title} ({', '.join(meta)})"
    return f"#{task.id}: {title}"


def _format_tasks_concise(tasks: list[TaskModel], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format for token efficiency.

    Output:
    2 task(s) | project 1
    #1: Task one (High, due:2024-12-31)
    #2: Task two (Low)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"

    lines = [header]
    lines.extend(_format_task_concise(task) for task in tasks)
    return "\n".join(lines)


def _format_task_markdown(task: TaskModel, base_url: str | None = None) -> str:
    """Format a single task as markdown."""
    lines = []

    icon = "[x]" if task.done else "[ ]"
    title = task.title or "Untitled"
    lines.append(f"### {icon} #{task.id} {title}")

    details = []
    if task.priority != TaskPriority.UNSET:
        details.append(f"**Priority**: {task.priority.label}")
    if task.due_date:
        details.append(f"**Due**: {task.due_date}")
    if task.start_date:
        details.append(f"**Start**: {task.start_date}")
    if task.assignee:
        details.append(f"**Assignee**: {task.assignee}")
    if task.tags:
        details.append(f"**Tags**: {', '.join(task.tags)}")
    if task.calculated_priority is not None:
        details.append(f"**Score**: {task.calculated_priority:.1f}")
    if task.is_blocked:
        details.append("**Blocked**")

    if details:
        lines.append(" | ".join(details))

    if task.description:
        lines.append(task.description.strip())

    if task.related_tasks:
        relations = ", ".join(f"{r.relation_kind} #{r.other_task_id}" for r in task.related_tasks)
        lines.append(f"**Relations**: {relations}")

    if base_url:
        link = build_task_link(base_url, task.project_id, task.id)
        if link:
            lines.append(f"[Open in Vikunja]({link})")

    return "\n".join(lines)


def _format_tasks_markdown(tasks: list[TaskModel], title: str = "Tasks", base_url: str | None = None) -> str:
    """Format a list of tasks as markdown."""
    if not tasks:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", f"*{len(tasks)} task(s)*", ""]

    for task in tasks:
        lines.append(_format_task_markdown(task, base_url))
        lines.append("")

    return "\n".join(lines)


def _format_breakdown_markdown(task: TaskModel, breakdown: PriorityBreakdown) -> str:
    """Format a priority breakdown as a markdown table."""
    title = task.title or "Untitled"
    lines = [f"# Priority Breakdown: #{task.id} {title}", ""]

    if task.done:
        lines.append("Task is completed, so its priority score is 0.")
        return "\n".join(lines)

    due_label = f"{breakdown.due_date_score:+.1f}" if breakdown.has_due_date else "no due date"

    lines.append("| Component | Points |")
    lines.append("|-----------|--------|")
    lines.append(f"| Priority ({task.priority.label}) | {breakdown.base_score:+.1f} |")
    lines.append(f"| Due date | {due_label} |")
    lines.append(f"| Start date | {breakdown.start_date_score:+.1f} |")
    lines.append(f"| Age | {breakdown.age_score:+.1f} |")
    lines.append(f"| Blocking bonus | {breakdown.blocking_bonus:+.1f} |")
    lines.append(f"| **Total before blocked** | {breakdown.total_before_blocked:.1f} |")
    lines.append(f"| **Final score** | {breakdown.final_score:.1f} |")
    lines.append("")

    if breakdown.is_blocked:
        lines.append("Blocked by unfinished work: score is dampened until its blockers are done.")
    else:
        lines.append("Not blocked.")

    return "\n".join(lines)
