from __future__ import annotations
import datetime as dt
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from core import filters, risk
from core.config import Capabilities
from core.exceptions import EmptyResultWarning, StoreError, ValidationError
from core.models import ScoredTask, Task, build_payload

logger = logging.getLogger(__name__)

EMPTY_TABLE_MESSAGE = "No tasks found"
NO_MATCH_MESSAGE = "No tasks match the current filters"


@dataclass
class DashboardState:
    tasks: List[ScoredTask] = field(default_factory=list)
    filters: filters.TaskFilter = field(default_factory=filters.TaskFilter)
    loading: bool = False
    error: Optional[str] = None
    notice: Optional[str] = None
    last_updated: Optional[dt.datetime] = None


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: Optional[str] = None


class DashboardController:
    """Holds the task snapshot and filters; talks to the store gateway.

    The gateway only needs fetch_all / insert / update / delete.
    """
    def __init__(self, client, capabilities: Optional[Capabilities] = None,
                 now: Optional[Callable[[], dt.datetime]] = None):
        self.client = client
        self.capabilities = capabilities or Capabilities()
        self._now = now or (lambda: dt.datetime.now(dt.timezone.utc))
        self.state = DashboardState()

    # ---- fetch ----
    def refresh(self) -> int:
        """Refetch everything and re-score. Errors leave the previous snapshot alone."""
        st = self.state
        st.loading = True
        st.error = None
        try:
            rows = self.client.fetch_all()
            if not rows:
                st.tasks = []
                st.notice = str(EmptyResultWarning(EMPTY_TABLE_MESSAGE))
                st.last_updated = self._now()
                return 0
            st.tasks = risk.evaluate_all((Task.from_record(r) for r in rows), self._now())
            st.notice = None
            st.last_updated = self._now()
            logger.info("Fetched %d tasks", len(rows))
            return len(rows)
        except StoreError as e:
            logger.warning("Fetch failed: %s", e)
            st.error = str(e) or "Failed to fetch tasks"
            return len(st.tasks)
        finally:
            st.loading = False

    # ---- filtering / aggregation ----
    def set_filters(self, **kw) -> filters.TaskFilter:
        self.state.filters = replace(self.state.filters, **kw)
        return self.state.filters

    def visible_tasks(self) -> List[ScoredTask]:
        return filters.apply_filters(self.state.tasks, self.state.filters)

    def stats(self) -> filters.RiskStats:
        return filters.risk_stats(self.visible_tasks())

    def assignees(self) -> List[str]:
        return filters.assignees(self.state.tasks)

    def priority_breakdown(self) -> Dict[str, int]:
        return filters.priority_breakdown(self.state.tasks)

    def progress_distribution(self):
        return filters.progress_distribution(self.state.tasks)

    def empty_message(self) -> str:
        if filters.has_active_filter(self.state.filters):
            return NO_MATCH_MESSAGE
        return self.state.notice or EMPTY_TABLE_MESSAGE

    def find(self, task_id: Any) -> Optional[ScoredTask]:
        for s in self.state.tasks:
            if s.id == task_id:
                return s
        return None

    # ---- mutations ----
    def add_task(self, form: Dict[str, Any]) -> ActionResult:
        return self._mutate("add", lambda: self.client.insert(build_payload(form)))

    def edit_task(self, task_id: Any, form: Dict[str, Any]) -> ActionResult:
        return self._mutate("edit", lambda: self.client.update(task_id, build_payload(form)))

    def delete_task(self, task_id: Any) -> ActionResult:
        return self._mutate("delete", lambda: self.client.delete(task_id))

    def patch_task(self, task_id: Any, **fields) -> ActionResult:
        """Toggle-style update: write to the store, then patch the local copy without refetching."""
        if not self.capabilities.can_edit:
            return ActionResult(False, "Editing is disabled")
        try:
            self.client.update(task_id, fields)
        except StoreError as e:
            logger.warning("Patch of %s failed: %s", task_id, e)
            return ActionResult(False, f"Failed to update task: {e}")

        tasks = []
        for s in self.state.tasks:
            if s.id == task_id:
                record = {"id": s.id, **s.task.to_payload(), **s.task.extra, **fields}
                tasks.append(Task.from_record(record))
            else:
                tasks.append(s.task)
        self.state.tasks = risk.evaluate_all(tasks, self._now())
        return ActionResult(True)

    def mark_done(self, task_id: Any) -> ActionResult:
        return self.patch_task(task_id, progress=100)

    def _mutate(self, action: str, call: Callable[[], Any]) -> ActionResult:
        if not self.capabilities.can_edit:
            return ActionResult(False, "Editing is disabled")
        try:
            call()
        except ValidationError as e:
            return ActionResult(False, f"Invalid task: {e}")
        except StoreError as e:
            logger.warning("Failed to %s task: %s", action, e)
            return ActionResult(False, f"Failed to {action} task: {e}")
        self.refresh()
        return ActionResult(True)
