"""Output/intermediate models for priority scoring and agent intelligence."""

from pydantic import BaseModel, ConfigDict, Field

from vikunja_mcp.models.task import TaskModel


class PriorityBreakdown(BaseModel):
    """Component-by-component account of one task's derived priority."""

    model_config = ConfigDict(frozen=True)

    base_score: float = 0.0
    due_date_score: float = 0.0
    has_due_date: bool = False
    start_date_score: float = 0.0
    age_score: float = 0.0
    blocking_bonus: float = 0.0
    is_blocked: bool = False
    total_before_blocked: float = 0.0
    final_score: float = 0.0


class ScoredTask(BaseModel):
    """A task with its derived priority, breakdown and human-readable reasons."""

    task: TaskModel
    score: float
    breakdown: PriorityBreakdown
    reasons: list[str] = Field(default_factory=list)


class BlockedTaskInfo(BaseModel):
    """Information about a blocked task and what blocks it."""

    task: TaskModel
    blockers: list[TaskModel] = Field(default_factory=list)


class BottleneckInfo(BaseModel):
    """Information about a bottleneck task and how many tasks it blocks."""

    task: TaskModel
    blocks_count: int
    score: float
