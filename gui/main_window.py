from __future__ import annotations
import datetime as dt
import logging
import threading
from typing import Any, Callable, Dict, Optional
import tkinter as tk
from tkinter import ttk, messagebox as mb

from controller.app_controller import ActionResult, DashboardController
from core.config import Settings
from core.exceptions import ValidationError
from core.filters import ALL
from core.models import PRIORITIES, build_payload, form_from_task
from gui.charts import ChartsPanel
from gui.task_form import TaskFormDialog
from gui.task_list import ScrollableTaskList

logger = logging.getLogger(__name__)


class DashboardWindow(tk.Tk):
    """Risk dashboard. Edit and chart features come from ``controller.capabilities``."""
    def __init__(self, controller: DashboardController, settings: Settings):
        super().__init__()
        self.controller = controller
        self.caps = controller.capabilities
        self.sync_interval_ms = settings.sync_interval_ms
        self.title("Task Risk Dashboard")
        self.geometry(settings.window_geometry)
        self.configure(padx=8, pady=8)
        if settings.topmost:
            self.attributes("-topmost", True)

        # Top bar: search + filters + actions
        top = ttk.Frame(self)
        top.pack(fill="x", pady=(0, 6))
        self.search_var = tk.StringVar(value="")
        self.search_var.trace_add("write", lambda *_: self._on_filter_change())
        ttk.Label(top, text="Search:").pack(side="left")
        ttk.Entry(top, textvariable=self.search_var, width=28).pack(side="left", padx=(4, 8))

        self.priority_var = tk.StringVar(value=ALL)
        self.priority_box = ttk.Combobox(top, textvariable=self.priority_var, state="readonly", width=10,
                                         values=[ALL, *PRIORITIES])
        self.priority_box.pack(side="left", padx=(0, 6))
        self.priority_box.bind("<<ComboboxSelected>>", lambda e: self._on_filter_change())

        self.assignee_var = tk.StringVar(value=ALL)
        self.assignee_box = ttk.Combobox(top, textvariable=self.assignee_var, state="readonly", width=16,
                                         values=[ALL])
        self.assignee_box.pack(side="left", padx=(0, 6))
        self.assignee_box.bind("<<ComboboxSelected>>", lambda e: self._on_filter_change())

        if self.caps.can_edit:
            ttk.Button(top, text="Add task", command=self._on_add).pack(side="right", padx=(6, 0))
        self.refresh_btn = ttk.Button(top, text="Refresh", command=self.refresh)
        self.refresh_btn.pack(side="right", padx=(6, 0))
        self._charts_shown = False
        if self.caps.can_chart:
            self.charts_btn = ttk.Button(top, text="Show charts", command=self._toggle_charts)
            self.charts_btn.pack(side="right")

        # Stats strip
        strip = ttk.Frame(self)
        strip.pack(fill="x", pady=(0, 6))
        self.stat_vars: Dict[str, tk.StringVar] = {}
        for key, label, color in (
            ("total", "Total tasks", "#111827"),
            ("high", "High risk", "#DC2626"),
            ("medium", "Medium risk", "#CA8A04"),
            ("low", "Low risk", "#16A34A"),
            ("avg_progress", "Avg progress", "#2563EB"),
        ):
            box = ttk.Frame(strip, padding=(10, 4))
            box.pack(side="left", fill="x", expand=True)
            ttk.Label(box, text=label).pack(anchor="w")
            var = tk.StringVar(value="0")
            tk.Label(box, textvariable=var, fg=color, font=("Segoe UI", 16, "bold")).pack(anchor="w")
            self.stat_vars[key] = var

        self.status_var = tk.StringVar(value="Ready")
        ttk.Label(self, textvariable=self.status_var).pack(fill="x")

        self.charts = ChartsPanel(self) if self.caps.can_chart else None

        self.task_list = ScrollableTaskList(
            self,
            on_edit=self._on_edit if self.caps.can_edit else None,
            on_delete=self._on_delete if self.caps.can_edit else None,
            on_complete=self._on_complete if self.caps.can_edit else None,
        )
        self.task_list.pack(fill="both", expand=True)

        self.bind("<F5>", lambda e: self.refresh())
        self.after(0, self.refresh)
        if self.sync_interval_ms > 0:
            self.after(self.sync_interval_ms, self._auto_sync)

    # ---------- background work ----------
    def _run_in_background(self, work: Callable[[], Any], done: Callable[[Any], None]):
        """Run a store call off the Tk thread, then hand the result back via after()."""
        def runner():
            try:
                result = work()
            except Exception:
                logger.exception("Background task failed")
                result = ActionResult(False, "Unexpected error, see log")
            try:
                self.after(0, lambda: done(result))
            except (tk.TclError, RuntimeError):
                pass  # window already gone

        threading.Thread(target=runner, daemon=True).start()

    # ---------- sync ----------
    def refresh(self):
        if self.controller.state.loading:
            return
        self.controller.state.loading = True
        self.refresh_btn.state(["disabled"])
        self.status_var.set("Loading…")
        self._run_in_background(self.controller.refresh, lambda _: self._on_refreshed())

    def _on_refreshed(self):
        self.refresh_btn.state(["!disabled"])
        self._render()

    def _auto_sync(self):
        try:
            self.refresh()
        finally:
            self.after(self.sync_interval_ms, self._auto_sync)

    # ---------- rendering ----------
    def _render(self):
        ctl = self.controller
        st = ctl.state

        priorities = [ALL, *PRIORITIES]
        for s in st.tasks:
            if s.task.priority and s.task.priority not in priorities:
                priorities.append(s.task.priority)
        self.priority_box.configure(values=priorities)
        self.assignee_box.configure(values=[ALL, *ctl.assignees()])

        stats = ctl.stats()
        self.stat_vars["total"].set(str(stats.total))
        self.stat_vars["high"].set(str(stats.high))
        self.stat_vars["medium"].set(str(stats.medium))
        self.stat_vars["low"].set(str(stats.low))
        self.stat_vars["avg_progress"].set(f"{stats.avg_progress}%")

        status = []
        if st.last_updated:
            status.append(f"Last updated {st.last_updated.astimezone().strftime('%H:%M:%S')}")
        if st.error:
            status.append(f"Error: {st.error}")
        elif st.notice:
            status.append(st.notice)
        self.status_var.set(" · ".join(status) or "Ready")

        if self.charts is not None and self._charts_shown:
            self.charts.update_data(ctl.priority_breakdown(), ctl.progress_distribution(), len(st.tasks))

        visible = ctl.visible_tasks()
        empty = "" if st.error else ctl.empty_message()
        self.task_list.set_tasks(visible, now=dt.datetime.now(dt.timezone.utc), empty_text=empty)

    def _on_filter_change(self):
        self.controller.set_filters(
            priority=self.priority_var.get() or ALL,
            assignee=self.assignee_var.get() or ALL,
            search=self.search_var.get(),
        )
        self._render()

    def _toggle_charts(self):
        self._charts_shown = not self._charts_shown
        if self._charts_shown:
            self.charts.pack(fill="x", pady=(0, 6), before=self.task_list)
            self.charts_btn.configure(text="Hide charts")
        else:
            self.charts.pack_forget()
            self.charts_btn.configure(text="Show charts")
        self._render()

    # ---------- actions ----------
    def _on_add(self):
        TaskFormDialog(self, "New task", on_submit=lambda form: self._submit(
            form, lambda: self.controller.add_task(form)), submit_text="Add")

    def _on_edit(self, task_id):
        scored = self.controller.find(task_id)
        if scored is None:
            return
        TaskFormDialog(self, "Edit task", initial=form_from_task(scored.task), on_submit=lambda form: self._submit(
            form, lambda: self.controller.edit_task(task_id, form)), submit_text="Update")

    def _on_complete(self, task_id):
        self._run_in_background(lambda: self.controller.mark_done(task_id), self._on_action_done)

    def _on_delete(self, task_id):
        if not mb.askyesno("Delete task", "Delete this task?", parent=self):
            return
        self._run_in_background(lambda: self.controller.delete_task(task_id), self._on_action_done)

    def _submit(self, form: Dict[str, Any], call: Callable[[], ActionResult]) -> Optional[str]:
        try:
            build_payload(form)
        except ValidationError as e:
            return str(e)
        self._run_in_background(call, self._on_action_done)
        return None

    def _on_action_done(self, result: ActionResult):
        if not result.ok:
            if self.caps.alert_on_error:
                mb.showerror("Task", result.message or "Operation failed", parent=self)
            else:
                logger.info("Action failed: %s", result.message)
        self._render()
