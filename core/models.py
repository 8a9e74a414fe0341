from __future__ import annotations
import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from core.exceptions import ValidationError


PRIORITIES = ("high", "medium", "low")
# Japanese labels found in existing tasks tables
PRIORITY_ALIASES = {"高": "high", "中": "medium", "低": "low"}

NO_DEPENDENCIES = "none"
DEPENDENCY_SENTINELS = frozenset({"none", "なし"})

WRITABLE_FIELDS = (
    "task_name",
    "assignee",
    "due_date",
    "priority",
    "progress",
    "past_delay_days",
    "dependencies",
    "risk_factors",
)


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def normalize_priority(value: Any) -> Optional[str]:
    """Map a stored priority (English or Japanese label) to high/medium/low, else None."""
    if value is None:
        return None
    text = str(value).strip()
    if text in PRIORITY_ALIASES:
        return PRIORITY_ALIASES[text]
    text = text.lower()
    return text if text in PRIORITIES else None


def parse_date(value: Any) -> Optional[dt.date]:
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    # store sends "YYYY-MM-DD" or a full ISO timestamp
    return dt.date.fromisoformat(str(value)[:10])


def _opt_number(value: Any) -> Optional[float]:
    """Numeric store value as int when whole, float otherwise; None when missing or unparsable."""
    if value is None or value == "":
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(n):
        return None
    return int(n) if n.is_integer() else n


@dataclass
class Task:
    id: Any
    task_name: str
    assignee: Optional[str] = None
    due_date: Optional[dt.date] = None
    priority: Optional[str] = None
    progress: Optional[float] = None
    past_delay_days: Optional[float] = None
    dependencies: Optional[str] = NO_DEPENDENCIES
    risk_factors: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # columns we don't consume

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Task":
        known = set(WRITABLE_FIELDS) | {"id"}
        try:
            due = parse_date(record.get("due_date"))
        except ValueError:
            due = None
        return cls(
            id=record.get("id"),
            task_name=record.get("task_name") or "",
            assignee=record.get("assignee") or None,
            due_date=due,
            priority=record.get("priority"),
            progress=_opt_number(record.get("progress")),
            past_delay_days=_opt_number(record.get("past_delay_days")),
            dependencies=record.get("dependencies"),
            risk_factors=record.get("risk_factors"),
            extra={k: v for k, v in record.items() if k not in known},
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "task_name": self.task_name,
            "assignee": self.assignee,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority,
            "progress": self.progress,
            "past_delay_days": self.past_delay_days,
            "dependencies": self.dependencies,
            "risk_factors": self.risk_factors,
        }

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies) and self.dependencies.strip() not in DEPENDENCY_SENTINELS


@dataclass(frozen=True)
class ScoredTask:
    """A task plus its derived risk. Recomputed on every fetch, never written back."""
    task: Task
    risk_score: int
    risk_level: RiskLevel

    @property
    def id(self):
        return self.task.id


# ---------- forms ----------
def default_form() -> Dict[str, Any]:
    return {
        "task_name": "",
        "assignee": "",
        "due_date": "",
        "past_delay_days": 0,
        "priority": "medium",
        "progress": 0,
        "dependencies": NO_DEPENDENCIES,
        "risk_factors": "",
    }


def form_from_task(task: Task) -> Dict[str, Any]:
    return {
        "task_name": task.task_name,
        "assignee": task.assignee or "",
        "due_date": task.due_date.isoformat() if task.due_date else "",
        "past_delay_days": task.past_delay_days or 0,
        "priority": task.priority or "medium",
        "progress": task.progress or 0,
        "dependencies": task.dependencies or NO_DEPENDENCIES,
        "risk_factors": task.risk_factors or "",
    }


def _lenient_int(value: Any) -> int:
    # whole part only, so "50.7" becomes 50
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


def build_payload(form: Dict[str, Any]) -> Dict[str, Any]:
    """Turn raw form values into a writable store payload."""
    name = str(form.get("task_name") or "").strip()
    if not name:
        raise ValidationError("task_name is required")

    due_raw = str(form.get("due_date") or "").strip()
    try:
        due = parse_date(due_raw)
    except ValueError:
        raise ValidationError(f"invalid due_date: {due_raw!r}") from None

    progress = min(max(_lenient_int(form.get("progress")), 0), 100)
    delay = max(_lenient_int(form.get("past_delay_days")), 0)
    deps = str(form.get("dependencies") or "").strip() or NO_DEPENDENCIES

    return {
        "task_name": name,
        "assignee": str(form.get("assignee") or "").strip() or None,
        "due_date": due.isoformat() if due else None,
        "priority": str(form.get("priority") or "medium").strip(),
        "progress": progress,
        "past_delay_days": delay,
        "dependencies": deps,
        "risk_factors": str(form.get("risk_factors") or "").strip() or None,
    }
