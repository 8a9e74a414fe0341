from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from core.models import PRIORITIES, RiskLevel, ScoredTask, normalize_priority

ALL = "all"

# [lo, hi) except the last band, which includes 100
PROGRESS_BANDS = (
    ("0-25%", 0, 25),
    ("25-50%", 25, 50),
    ("50-75%", 50, 75),
    ("75-100%", 75, 101),
)


@dataclass(frozen=True)
class TaskFilter:
    priority: str = ALL
    assignee: str = ALL
    search: str = ""


@dataclass(frozen=True)
class RiskStats:
    total: int
    high: int
    medium: int
    low: int
    avg_progress: int


def has_active_filter(flt: TaskFilter) -> bool:
    return flt.priority != ALL or flt.assignee != ALL or bool(flt.search)


def apply_filters(tasks: Sequence[ScoredTask], flt: TaskFilter) -> List[ScoredTask]:
    """AND of the three predicates; input order is kept."""
    needle = flt.search.lower()
    out = []
    for s in tasks:
        t = s.task
        if flt.priority != ALL and t.priority != flt.priority:
            continue
        if flt.assignee != ALL and t.assignee != flt.assignee:
            continue
        if needle and needle not in (t.task_name or "").lower():
            continue
        out.append(s)
    return out


def risk_stats(tasks: Sequence[ScoredTask]) -> RiskStats:
    high = sum(1 for s in tasks if s.risk_level is RiskLevel.HIGH)
    medium = sum(1 for s in tasks if s.risk_level is RiskLevel.MEDIUM)
    low = sum(1 for s in tasks if s.risk_level is RiskLevel.LOW)
    if tasks:
        avg = math.floor(sum(s.task.progress or 0 for s in tasks) / len(tasks) + 0.5)
    else:
        avg = 0
    return RiskStats(total=len(tasks), high=high, medium=medium, low=low, avg_progress=avg)


def assignees(tasks: Sequence[ScoredTask]) -> List[str]:
    seen: Dict[str, None] = {}
    for s in tasks:
        if s.task.assignee:
            seen.setdefault(s.task.assignee, None)
    return list(seen)


def priority_breakdown(tasks: Sequence[ScoredTask]) -> Dict[str, int]:
    counts = {p: 0 for p in PRIORITIES}
    for s in tasks:
        p = normalize_priority(s.task.priority)
        if p:
            counts[p] += 1
    return counts


def progress_distribution(tasks: Sequence[ScoredTask]) -> List[tuple]:
    """(label, count) per progress band. Bands don't overlap and cover 0-100.

    Tasks without a progress value are left out.
    """
    known = [s.task.progress for s in tasks if s.task.progress is not None]
    out = []
    for label, lo, hi in PROGRESS_BANDS:
        n = sum(1 for p in known if lo <= p < hi)
        out.append((label, n))
    return out
