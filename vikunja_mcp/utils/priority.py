"""
Derived priority scoring for Vikunja tasks.

A task's score combines several signals:
- Declared Vikunja priority (0-5)
- Due date urgency (overdue, within 24 hours, 3 days, 7 days)
- Start date (already started ranks higher, not yet startable ranks lower)
- Age since the last update (small, capped bonus)
- Position in the blocking graph: a task inherits part of the score of every
  incomplete task it blocks, recursively, and is dampened while it is itself
  blocked by incomplete work.

Every function here is pure: it reads a snapshot of tasks and never mutates
it. Graph walks carry the set of ids on the current path, so cyclic or
self-referential relations always terminate.
"""

from datetime import datetime, timedelta, timezone

from vikunja_mcp.enums import RelationKind
from vikunja_mcp.models.intelligence import PriorityBreakdown
from vikunja_mcp.models.task import TaskModel

BASE_PRIORITY_WEIGHT = 100  # Vikunja priority 1-5 becomes 100-500
DUE_DATE_OVERDUE = 500
DUE_DATE_URGENT = 300  # due within 24 hours
DUE_DATE_SOON = 150  # due within 3 days
DUE_DATE_THIS_WEEK = 75  # due within 7 days
START_DATE_PAST_BONUS = 50
START_DATE_FUTURE_PENALTY = 50
AGE_POINTS_PER_DAY = 2
AGE_SCORE_CAP = 30
BLOCKING_FLAT_BONUS = 25  # applied once if the task blocks any incomplete task
INHERITANCE_RATIO = 0.5  # share of each blocked task's score passed upstream
BLOCKED_DAMPING = 0.1  # multiplier for tasks waiting on incomplete blockers

# Upper bound of time remaining (inclusive) -> score. Checked nearest first.
_DUE_DATE_BANDS = (
    (timedelta(0), DUE_DATE_OVERDUE),
    (timedelta(days=1), DUE_DATE_URGENT),
    (timedelta(days=3), DUE_DATE_SOON),
    (timedelta(days=7), DUE_DATE_THIS_WEEK),
)


# ============================================================================
# Date Signals
# ============================================================================


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or invalid."""
    if not value:
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except (ValueError, TypeError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def evaluate_due_date(due_date: str | None, now: datetime | None = None) -> tuple[float, bool]:
    """
    Evaluate due date presence and urgency.

    Bands are inclusive at the nearer edge: a task due exactly now is overdue,
    a task due in exactly 24 hours is urgent.

    Returns:
        Tuple of (score, has_due_date). An unparsable date counts as no date.
    """
    due = _parse_timestamp(due_date)
    if due is None:
        return 0.0, False

    remaining = due - _resolve_now(now)
    for limit, score in _DUE_DATE_BANDS:
        if remaining <= limit:
            return float(score), True

    return 0.0, True


def start_date_score(start_date: str | None, now: datetime | None = None) -> float:
    """Negative for a future start date, positive once started, 0 without one."""
    start = _parse_timestamp(start_date)
    if start is None:
        return 0.0

    if start > _resolve_now(now):
        return float(-START_DATE_FUTURE_PENALTY)
    return float(START_DATE_PAST_BONUS)


def age_score(updated: str | None, now: datetime | None = None) -> float:
    """Small bonus growing with time since the last update, capped."""
    last_update = _parse_timestamp(updated)
    if last_update is None:
        return 0.0

    age = _resolve_now(now) - last_update
    if age <= timedelta(0):
        return 0.0

    days = age / timedelta(days=1)
    return min(days * AGE_POINTS_PER_DAY, float(AGE_SCORE_CAP))


# ============================================================================
# Relation Queries
# ============================================================================


def _index_tasks(tasks: list[TaskModel]) -> dict[int, TaskModel]:
    return {t.id: t for t in tasks}


def _related(task: TaskModel, index: dict[int, TaskModel], kind: RelationKind) -> list[TaskModel]:
    """Tasks named by this task's own relations of the given kind.

    Edge order is kept; duplicate edges, self-references and ids missing from
    the snapshot are skipped.
    """
    related: list[TaskModel] = []
    seen: set[int] = set()

    for relation in task.related_tasks:
        other_id = relation.other_task_id
        if relation.relation_kind != kind.value or other_id == task.id or other_id in seen:
            continue
        if other := index.get(other_id):
            seen.add(other_id)
            related.append(other)

    return related


def get_blockers(task: TaskModel, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """Get tasks that block this task (its own ``blocked`` relations)."""
    return _related(task, _index_tasks(all_tasks), RelationKind.BLOCKED)


def get_dependents(task: TaskModel, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """Get tasks that this task blocks (its own ``blocking`` relations)."""
    return _related(task, _index_tasks(all_tasks), RelationKind.BLOCKING)


def is_task_blocked(task: TaskModel, all_tasks: list[TaskModel]) -> bool:
    """Check if a task is blocked by at least one incomplete task."""
    if task.done:
        return False
    return any(not blocker.done for blocker in get_blockers(task, all_tasks))


# ============================================================================
# Scoring
# ============================================================================


def _walk(
    task: TaskModel,
    index: dict[int, TaskModel],
    visited: set[int],
    now: datetime,
) -> PriorityBreakdown | None:
    """
    Build the priority breakdown of a task, inheriting from what it blocks.

    ``visited`` holds the ids on the current path from the top-level task.
    A task reached again along the same path (a cycle) returns None and
    contributes nothing. A task shared by two branches is scored in each,
    so the result does not depend on the order of the relations.
    """
    if task.id in visited:
        return None

    if task.done:
        return PriorityBreakdown()

    base_score = float(task.priority * BASE_PRIORITY_WEIGHT)
    due_date_score, has_due_date = evaluate_due_date(task.due_date, now)
    start_score = start_date_score(task.start_date, now)
    age = age_score(task.updated, now)

    is_blocked = any(not blocker.done for blocker in _related(task, index, RelationKind.BLOCKED))

    blocking_bonus = 0.0
    dependents = [t for t in _related(task, index, RelationKind.BLOCKING) if not t.done]
    if dependents:
        blocking_bonus = float(BLOCKING_FLAT_BONUS)
        visited.add(task.id)
        for dependent in dependents:
            inherited = _walk(dependent, index, visited, now)
            if inherited is not None:
                # A not-yet-startable dependent never drags its blocker down
                blocking_bonus += max(inherited.final_score, 0.0) * INHERITANCE_RATIO
        visited.discard(task.id)

    total_before_blocked = base_score + due_date_score + start_score + age + blocking_bonus
    final_score = total_before_blocked
    if is_blocked and total_before_blocked > 0:
        final_score = total_before_blocked * BLOCKED_DAMPING

    return PriorityBreakdown(
        base_score=base_score,
        due_date_score=due_date_score,
        has_due_date=has_due_date,
        start_date_score=start_score,
        age_score=age,
        blocking_bonus=blocking_bonus,
        is_blocked=is_blocked,
        total_before_blocked=total_before_blocked,
        final_score=final_score,
    )


def calculate_priority_breakdown(
    task: TaskModel,
    all_tasks: list[TaskModel],
    now: datetime | None = None,
) -> PriorityBreakdown:
    """
    Calculate the priority breakdown for a single task.

    Args:
        task: Task to score
        all_tasks: Snapshot used to resolve relations
        now: Reference instant, defaults to the current UTC time

    Returns:
        PriorityBreakdown whose final_score is the task's derived priority
    """
    breakdown = _walk(task, _index_tasks(all_tasks), set(), _resolve_now(now))
    if breakdown is None:
        return PriorityBreakdown()
    return breakdown


def calculate_task_priority(
    task: TaskModel,
    all_tasks: list[TaskModel],
    now: datetime | None = None,
) -> float:
    """Calculate the derived priority score of a single task."""
    return calculate_priority_breakdown(task, all_tasks, now).final_score


def calculate_priorities(tasks: list[TaskModel], now: datetime | None = None) -> list[TaskModel]:
    """
    Calculate derived priorities for all tasks.

    Returns:
        Copies of the tasks, in input order, with calculated_priority and
        is_blocked set
    """
    current = _resolve_now(now)
    index = _index_tasks(tasks)

    scored: list[TaskModel] = []
    for task in tasks:
        breakdown = _walk(task, index, set(), current)
        score = breakdown.final_score if breakdown is not None else 0.0
        is_blocked = breakdown.is_blocked if breakdown is not None else False
        scored.append(task.model_copy(update={"calculated_priority": score, "is_blocked": is_blocked}))

    return scored


def _score_of(task: TaskModel) -> float:
    return task.calculated_priority or 0.0


def get_top_priority_task(tasks: list[TaskModel], now: datetime | None = None) -> TaskModel | None:
    """Get the highest priority incomplete task, first in input order on ties."""
    top: TaskModel | None = None

    for task in calculate_priorities(tasks, now):
        if task.done:
            continue
        if top is None or _score_of(task) > _score_of(top):
            top = task

    return top


def sort_by_priority(tasks: list[TaskModel], now: datetime | None = None) -> list[TaskModel]:
    """
    Sort tasks by derived priority, highest first.

    Completed tasks always go last. Equal scores fall back to the task id,
    newest first, so the order is reproducible.
    """
    scored = calculate_priorities(tasks, now)
    return sorted(scored, key=lambda t: (t.done, -_score_of(t), -t.id))
