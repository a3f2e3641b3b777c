"""Agent intelligence MCP tools for Vikunja."""

import json
from datetime import datetime, timezone

from mcp.types import ToolAnnotations

from vikunja_mcp.config import load_config
from vikunja_mcp.enums import ResponseFormat
from vikunja_mcp.models.inputs import (
    BlockedInput,
    BreakdownInput,
    DependenciesInput,
    ReadyInput,
    SuggestInput,
    TopTaskInput,
)
from vikunja_mcp.models.intelligence import (
    BlockedTaskInfo,
    BottleneckInfo,
    PriorityBreakdown,
    ScoredTask,
)
from vikunja_mcp.models.task import TaskModel
from vikunja_mcp.server import mcp
from vikunja_mcp.tools.core import _load_task_with_snapshot
from vikunja_mcp.utils.api import _fetch_tasks
from vikunja_mcp.utils.formatters import (
    _format_breakdown_markdown,
    _format_task_concise,
    _format_task_markdown,
    _format_tasks_concise,
)
from vikunja_mcp.utils.priority import (
    DUE_DATE_OVERDUE,
    DUE_DATE_URGENT,
    calculate_priorities,
    calculate_priority_breakdown,
    get_blockers,
    get_dependents,
    get_top_priority_task,
    is_task_blocked,
    sort_by_priority,
)

# ============================================================================
# Agent Intelligence Helper Functions
# ============================================================================


def _build_reasons(task: TaskModel, breakdown: PriorityBreakdown, blocks_count: int) -> list[str]:
    """Turn a priority breakdown into short human-readable reasons."""
    reasons: list[str] = []

    if breakdown.due_date_score >= DUE_DATE_OVERDUE:
        reasons.append("Overdue")
    elif breakdown.due_date_score >= DUE_DATE_URGENT:
        reasons.append("Due within 24h")
    elif breakdown.due_date_score > 0:
        reasons.append("Due soon")

    if task.priority >= 3:
        reasons.append(f"{task.priority.label} priority")

    if blocks_count > 0:
        reasons.append(f"Blocks {blocks_count} task(s)")

    if breakdown.start_date_score > 0:
        reasons.append("Already started")
    elif breakdown.start_date_score < 0:
        reasons.append("Starts later")

    if breakdown.is_blocked:
        reasons.append("Blocked")

    return reasons


def _score_open_tasks(all_tasks: list[TaskModel], now: datetime) -> list[ScoredTask]:
    """Score every open task against the snapshot, highest priority first."""
    scored: list[ScoredTask] = []
    for task in sort_by_priority(all_tasks, now):
        if task.done:
            continue
        breakdown = calculate_priority_breakdown(task, all_tasks, now)
        blocks_count = len([t for t in get_dependents(task, all_tasks) if not t.done])
        scored.append(
            ScoredTask(
                task=task,
                score=breakdown.final_score,
                breakdown=breakdown,
                reasons=_build_reasons(task, breakdown, blocks_count),
            )
        )
    return scored


def _get_blocked_tasks(tasks: list[TaskModel]) -> list[TaskModel]:
    """Get open tasks waiting on at least one open blocker."""
    return [t for t in tasks if not t.done and is_task_blocked(t, tasks)]


def _get_ready_tasks(tasks: list[TaskModel]) -> list[TaskModel]:
    """Get open tasks with no open blockers."""
    return [t for t in tasks if not t.done and not is_task_blocked(t, tasks)]


# ============================================================================
# Agent Intelligence Tool Definitions
# ============================================================================


@mcp.tool(
    name="vikunja_suggest",
    annotations=ToolAnnotations(
        title="Suggest Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_suggest(params: SuggestInput) -> str:
    """
    Get ranked recommendations for what to work on next, with reasons.

    USE THIS WHEN:
    - User asks "what should I work on?" or "what's important?"
    - Planning a work session and need prioritized suggestions
    - Need reasoning for why tasks are important (overdue, blocks others, etc.)

    DO NOT USE WHEN:
    - You only want the single most urgent task → use vikunja_top
    - You want a plain task list → use vikunja_list
    - You want the full score arithmetic for one task → use vikunja_breakdown

    CONTEXT OPTIONS:
    - None (default): Balanced suggestions by derived score
    - "blockers": Tasks that unblock other open work
    - "deadlines": Tasks that are overdue or due within a week

    Args:
        params: SuggestInput with project_id, limit, context and format

    Returns:
        Prioritized list of task suggestions with reasons (e.g., "Blocks 3 task(s)", "Overdue")
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    all_tasks = result if isinstance(result, list) else []
    scored_tasks = _score_open_tasks(all_tasks, datetime.now(timezone.utc))
    if not scored_tasks:
        return "# Suggestions\n\nNo open tasks found. Nothing to suggest!"

    total_open = len(scored_tasks)

    if params.context == "blockers":
        scored_tasks = [s for s in scored_tasks if any(r.startswith("Blocks") for r in s.reasons)]
    elif params.context == "deadlines":
        scored_tasks = [s for s in scored_tasks if s.breakdown.due_date_score > 0]

    scored_tasks = scored_tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "suggestions": [s.model_dump(mode="json") for s in scored_tasks],
                "total_open": total_open,
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        if not scored_tasks:
            return "0 suggestions"
        lines = [f"{len(scored_tasks)} suggestion(s)"]
        for s in scored_tasks:
            reason_short = s.reasons[0] if s.reasons else ""
            lines.append(f"{_format_task_concise(s.task)} [{reason_short}]")
        return "\n".join(lines)

    if not scored_tasks:
        return "# Suggestions\n\nNo tasks match your criteria."

    lines = ["# Suggested: What to Work On", ""]

    for i, s in enumerate(scored_tasks, 1):
        task = s.task
        indicator = ""
        if "Overdue" in s.reasons:
            indicator = "OVERDUE"
        elif "Due within 24h" in s.reasons:
            indicator = "DUE TODAY"
        elif "Blocked" in s.reasons:
            indicator = "BLOCKED"

        lines.append(f"{i}. **[#{task.id}] {task.title or 'Untitled'}** {indicator}".rstrip())

        details = [f"Score: {s.score:.1f}"]
        if task.due_date:
            details.append(f"Due: {task.due_date[:10]}")
        details.append(f"Priority: {task.priority.label}")
        lines.append(f"   {' | '.join(details)}")

        if s.reasons:
            lines.append(f"   → Reason: {', '.join(s.reasons)}")

        lines.append("")

    return "\n".join(lines)


@mcp.tool(
    name="vikunja_top",
    annotations=ToolAnnotations(
        title="Top Priority Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_top(params: TopTaskInput) -> str:
    """
    Get the single most urgent open task and why it ranks first.

    USE THIS WHEN:
    - User asks "what is the one thing I should do now?"
    - Picking the next task after completing one

    DO NOT USE WHEN:
    - You want several options → use vikunja_suggest

    Args:
        params: TopTaskInput with project_id and format

    Returns:
        The top task with its priority breakdown, or a note that nothing is open
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    all_tasks = result if isinstance(result, list) else []
    now = datetime.now(timezone.utc)
    top = get_top_priority_task(all_tasks, now)

    if top is None:
        if params.response_format == ResponseFormat.JSON:
            return json.dumps({"task": None, "breakdown": None}, indent=2)
        return "# Top Priority\n\nNo open tasks. All done!"

    breakdown = calculate_priority_breakdown(top, all_tasks, now)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"task": top.model_dump(mode="json"), "breakdown": breakdown.model_dump()},
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_task_concise(top)

    lines = ["# Top Priority", "", _format_task_markdown(top, config.url), ""]
    lines.append(_format_breakdown_markdown(top, breakdown).replace("# Priority Breakdown", "## Why"))
    return "\n".join(lines)


@mcp.tool(
    name="vikunja_breakdown",
    annotations=ToolAnnotations(
        title="Priority Breakdown",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_breakdown(params: BreakdownInput) -> str:
    """
    Explain a task's derived priority component by component.

    USE THIS WHEN:
    - User asks "why is this task ranked so high/low?"
    - Deciding which attribute to change to move a task up or down

    COMPONENTS:
    - Priority: 100 points per Vikunja priority level
    - Due date: +500 overdue, +300 within 24h, +150 within 3 days, +75 within a week
    - Start date: +50 once started, -50 before its start date
    - Age: +2 per day since the last update, up to +30
    - Blocking bonus: +25 if it blocks open tasks, plus half of each blocked task's score
    - Blocked: the total is multiplied by 0.1 while an open task blocks it

    Args:
        params: BreakdownInput with task_id, optional project_id and format

    Returns:
        Score breakdown (markdown table or JSON)
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _load_task_with_snapshot(params.task_id, config, params.project_id)
    if not success:
        return f"{result}\nTip: Use vikunja_list to find valid task IDs."

    task, snapshot = result
    breakdown = calculate_priority_breakdown(task, snapshot, datetime.now(timezone.utc))

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"task_id": task.id, "title": task.title, "breakdown": breakdown.model_dump()},
            indent=2,
        )

    return _format_breakdown_markdown(task, breakdown)


@mcp.tool(
    name="vikunja_ready",
    annotations=ToolAnnotations(
        title="Ready Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_ready(params: ReadyInput) -> str:
    """
    List open tasks that can be started now (no open blockers), ranked.

    USE THIS WHEN:
    - Answering "what can I actually work on right now?"
    - Looking for tasks that don't wait on other tasks

    DO NOT USE WHEN:
    - You want to see waiting tasks → use vikunja_blocked
    - You want reasons for the ranking → use vikunja_suggest

    Args:
        params: ReadyInput with project_id, limit, min_priority and format

    Returns:
        List of unblocked tasks ready to start
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    all_tasks = result if isinstance(result, list) else []
    ready_ids = {t.id for t in _get_ready_tasks(all_tasks)}
    ready_tasks = [t for t in sort_by_priority(all_tasks) if t.id in ready_ids]

    if params.min_priority is not None:
        ready_tasks = [t for t in ready_tasks if t.priority >= params.min_priority]

    ready_tasks = ready_tasks[: params.limit]

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "tasks": [t.model_dump(mode="json") for t in ready_tasks],
                "count": len(ready_tasks),
                "total_open": len([t for t in all_tasks if not t.done]),
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(ready_tasks, "ready")

    if not ready_tasks:
        return "# Ready to Work\n\nNo unblocked tasks found."

    lines = [f"# Ready to Work ({len(ready_tasks)} tasks)", ""]
    lines.append("| ID | Task | Priority | Due | Score |")
    lines.append("|----|------|----------|-----|-------|")

    for task in ready_tasks:
        title = task.title[:40] if task.title else ""
        due = task.due_date[:10] if task.due_date else "-"
        lines.append(f"| {task.id} | {title} | {task.priority.label} | {due} | {task.calculated_priority:.1f} |")

    return "\n".join(lines)


@mcp.tool(
    name="vikunja_blocked",
    annotations=ToolAnnotations(
        title="Blocked Tasks",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_blocked(params: BlockedInput) -> str:
    """
    List open tasks that are waiting on other open tasks.

    A task whose blockers are all done is not blocked and is not listed.

    USE THIS WHEN:
    - Understanding what's holding up progress
    - Identifying dependency chains

    DO NOT USE WHEN:
    - You want tasks you CAN work on → use vikunja_ready
    - You want bottleneck analysis → use vikunja_dependencies

    Args:
        params: BlockedInput with project_id, limit, show_blockers and format

    Returns:
        List of blocked tasks with their open blockers
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    all_tasks = result if isinstance(result, list) else []
    blocked_tasks = _get_blocked_tasks(calculate_priorities(all_tasks))[: params.limit]

    blocked_info: list[BlockedTaskInfo] = []
    for task in blocked_tasks:
        blockers = [b for b in get_blockers(task, all_tasks) if not b.done] if params.show_blockers else []
        blocked_info.append(BlockedTaskInfo(task=task, blockers=blockers))

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "blocked": [b.model_dump(mode="json") for b in blocked_info],
                "count": len(blocked_info),
                "total_open": len([t for t in all_tasks if not t.done]),
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        return _format_tasks_concise(blocked_tasks, "blocked")

    if not blocked_info:
        return "# Blocked Tasks\n\nNo blocked tasks found. All tasks are ready to work on!"

    lines = [f"# Blocked Tasks ({len(blocked_info)} waiting)", ""]

    for i, info in enumerate(blocked_info, 1):
        lines.append(f"{i}. **[#{info.task.id}] {info.task.title or 'Untitled'}**")
        if info.blockers:
            blockers_list = [f"#{b.id} ({b.title[:30]})" for b in info.blockers]
            lines.append(f"   Blocked by: {', '.join(blockers_list)}")
        lines.append("")

    return "\n".join(lines)


@mcp.tool(
    name="vikunja_dependencies",
    annotations=ToolAnnotations(
        title="Task Dependencies",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def vikunja_dependencies(params: DependenciesInput) -> str:
    """
    Analyze blocking relationships and identify bottlenecks.

    MODES:
    - Overview (task_id=None): bottlenecks ranked by how much open work they block
    - Specific task: what the task blocks and what blocks it

    DIRECTION OPTIONS (for specific task):
    - "both": Show tasks it blocks AND tasks blocking it
    - "blocks": Only show tasks waiting on this one
    - "blocked_by": Only show tasks this one waits on

    Args:
        params: DependenciesInput with optional task_id, project_id, direction and format

    Returns:
        Dependency analysis (overview or specific task)
    """
    ok, config = load_config()
    if not ok:
        return str(config)

    now = datetime.now(timezone.utc)

    if params.task_id:
        success, result = _load_task_with_snapshot(params.task_id, config, params.project_id)
        if not success:
            return f"{result}\nTip: Use vikunja_list to find valid task IDs."

        task, snapshot = result
        blocks = get_dependents(task, snapshot) if params.direction in ("both", "blocks") else []
        blocked_by = get_blockers(task, snapshot) if params.direction in ("both", "blocked_by") else []
        open_blockers = [b for b in get_blockers(task, snapshot) if not b.done]
        open_blocks = [b for b in get_dependents(task, snapshot) if not b.done]
        breakdown = calculate_priority_breakdown(task, snapshot, now)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps(
                {
                    "task": task.model_dump(mode="json"),
                    "blocks": [b.model_dump(mode="json") for b in blocks],
                    "blocked_by": [b.model_dump(mode="json") for b in blocked_by],
                    "ready": not open_blockers and not task.done,
                    "blocking_bonus": breakdown.blocking_bonus,
                },
                indent=2,
            )

        lines = [f"# Dependencies for #{task.id}: {task.title or 'Untitled'}", ""]

        if params.direction in ("both", "blocks"):
            lines.append(f"### Blocks ({len(blocks)} task(s))")
            lines.extend(f"- #{b.id}: {b.title}{' (done)' if b.done else ''}" for b in blocks)
            if not blocks:
                lines.append("(None)")
            lines.append("")

        if params.direction in ("both", "blocked_by"):
            lines.append(f"### Blocked By ({len(blocked_by)} task(s))")
            lines.extend(f"- #{b.id}: {b.title}{' (done)' if b.done else ''}" for b in blocked_by)
            if not blocked_by:
                lines.append("(None)")
            lines.append("")

        impact = "HIGH" if len(open_blocks) >= 2 else "MEDIUM" if len(open_blocks) == 1 else "LOW"
        status_text = "READY TO START" if not open_blockers else f"BLOCKED by {len(open_blockers)} open task(s)"

        lines.append("### Assessment")
        lines.append(f"- Status: {status_text}")
        lines.append(f"- Impact: {impact} (unblocks {len(open_blocks)} open task(s))")
        lines.append(f"- Blocking bonus: {breakdown.blocking_bonus:.1f}")

        return "\n".join(lines)

    success, result = _fetch_tasks(params.project_id, config)
    if not success:
        return str(result)

    all_tasks = result if isinstance(result, list) else []
    scores = {t.id: t.calculated_priority or 0.0 for t in sort_by_priority(all_tasks, now)}

    bottlenecks: list[BottleneckInfo] = []
    for task in all_tasks:
        if task.done:
            continue
        open_blocks = [t for t in get_dependents(task, all_tasks) if not t.done]
        if open_blocks:
            bottlenecks.append(BottleneckInfo(task=task, blocks_count=len(open_blocks), score=scores[task.id]))

    bottlenecks.sort(key=lambda b: (b.blocks_count, b.score), reverse=True)

    blocked_tasks = _get_blocked_tasks(all_tasks)
    ready_tasks = _get_ready_tasks(all_tasks)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                "bottlenecks": [b.model_dump(mode="json") for b in bottlenecks[:10]],
                "blocked": [t.id for t in blocked_tasks[:10]],
                "ready": [t.id for t in ready_tasks[:10]],
                "stats": {
                    "total_open": len([t for t in all_tasks if not t.done]),
                    "blocked_count": len(blocked_tasks),
                    "ready_count": len(ready_tasks),
                },
            },
            indent=2,
        )

    lines = ["# Dependency Overview", ""]

    lines.append("### Critical Bottlenecks")
    if bottlenecks:
        for b in bottlenecks[:5]:
            lines.append(f"- #{b.task.id} blocks {b.blocks_count} open task(s) (score {b.score:.1f})")
    else:
        lines.append("(No bottlenecks)")
    lines.append("")

    lines.append(f"### Blocked Tasks ({len(blocked_tasks)} cannot start)")
    if blocked_tasks:
        lines.extend(f"- #{t.id}: {t.title[:40]}" for t in blocked_tasks[:5])
    else:
        lines.append("(None)")
    lines.append("")

    lines.append(f"### Ready to Work ({len(ready_tasks)} unblocked)")
    if ready_tasks:
        lines.append(", ".join(f"#{t.id}" for t in ready_tasks[:5]))
    else:
        lines.append("(None)")

    return "\n".join(lines)
