"""Risk scoring for tasks.

Fixed weights, no configuration:

- priority weight: high 30, medium 20, low 10, anything else 0
- (100 - progress) * 0.3, a missing progress counts as 0
- deadline: overdue +50, under 7 days +30, under 14 days +15
- past_delay_days * 5
- +10 when the task depends on something

The total is rounded half up and never clamped.
"""
from __future__ import annotations
import datetime as dt
import math
from typing import Iterable, List, Optional

from core.models import RiskLevel, ScoredTask, Task, normalize_priority

PRIORITY_WEIGHTS = {"high": 30, "medium": 20, "low": 10}
PROGRESS_WEIGHT = 0.3
DELAY_WEIGHT = 5
DEPENDENCY_PENALTY = 10

OVERDUE_PENALTY = 50
WEEK_PENALTY = 30
FORTNIGHT_PENALTY = 15

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 50

_DAY_SECONDS = 24 * 60 * 60


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def days_until(due: Optional[dt.date], now: Optional[dt.datetime] = None) -> Optional[int]:
    """Whole days from ``now`` to midnight UTC of ``due``, floored. None without a due date."""
    if due is None:
        return None
    if now is None:
        now = _utcnow()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    deadline = dt.datetime(due.year, due.month, due.day, tzinfo=dt.timezone.utc)
    return math.floor((deadline - now).total_seconds() / _DAY_SECONDS)


def deadline_penalty(days: Optional[int]) -> int:
    if days is None:
        return 0
    if days < 0:
        return OVERDUE_PENALTY
    if days < 7:
        return WEEK_PENALTY
    if days < 14:
        return FORTNIGHT_PENALTY
    return 0


def score(task: Task, now: Optional[dt.datetime] = None) -> int:
    total = float(PRIORITY_WEIGHTS.get(normalize_priority(task.priority), 0))
    total += (100 - (task.progress or 0)) * PROGRESS_WEIGHT
    total += deadline_penalty(days_until(task.due_date, now))
    total += (task.past_delay_days or 0) * DELAY_WEIGHT
    if task.has_dependencies:
        total += DEPENDENCY_PENALTY
    return math.floor(total + 0.5)


def classify(value: int) -> RiskLevel:
    if value >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if value >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def evaluate(task: Task, now: Optional[dt.datetime] = None) -> ScoredTask:
    s = score(task, now)
    return ScoredTask(task=task, risk_score=s, risk_level=classify(s))


def evaluate_all(tasks: Iterable[Task], now: Optional[dt.datetime] = None) -> List[ScoredTask]:
    """Score every task and sort by risk descending (stable for ties)."""
    if now is None:
        now = _utcnow()
    scored = [evaluate(t, now) for t in tasks]
    scored.sort(key=lambda s: s.risk_score, reverse=True)
    return scored
