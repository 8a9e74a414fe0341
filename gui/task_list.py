"""
Scrollable list of task risk cards for Tkinter
----------------------------------------------
Each task renders as its own card (a Frame) inside a scrollable Canvas, with:
- the task name and a colored risk badge
- assignee, due date and days left / overdue
- the risk score and two bars (risk and progress)
- priority, past delay, dependencies, risk factors
- done (progress 100), edit and delete buttons when editing is enabled

The widget only renders. All state changes go through the callbacks
given to the constructor.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional
import datetime as dt
import tkinter as tk
from tkinter import ttk

from core.models import RiskLevel, ScoredTask
from core.risk import days_until

RISK_COLORS = {
    RiskLevel.HIGH: ("#EF4444", "#FEF2F2"),
    RiskLevel.MEDIUM: ("#EAB308", "#FEFCE8"),
    RiskLevel.LOW: ("#22C55E", "#F0FDF4"),
}


def deadline_label(days: Optional[int]) -> str:
    if days is None:
        return ""
    if days < 0:
        return f"{abs(days)} days overdue"
    return f"{days} days left"


class TaskCard(tk.Frame):
    """A single task card: header, meta line, bars and detail grid."""
    def __init__(
        self,
        master,
        scored: ScoredTask,
        now: Optional[dt.datetime] = None,
        on_edit: Optional[Callable[[object], None]] = None,
        on_delete: Optional[Callable[[object], None]] = None,
        on_complete: Optional[Callable[[object], None]] = None,
        wrap: int = 600,
    ):
        accent, background = RISK_COLORS[scored.risk_level]
        super().__init__(master, bg=background, highlightthickness=0, padx=10, pady=8)
        self.task_id = scored.id
        self._on_edit = on_edit
        self._on_delete = on_delete
        self._on_complete = on_complete
        task = scored.task

        self.columnconfigure(1, weight=1)

        # Left accent stripe
        tk.Frame(self, bg=accent, width=4).grid(row=0, column=0, rowspan=5, sticky="ns", padx=(0, 10))

        # Header: name + badge
        header = tk.Frame(self, bg=background)
        header.grid(row=0, column=1, sticky="we")
        self.lbl = tk.Label(header, text=task.task_name, bg=background, fg="#1F2937",
                            font=("Segoe UI", 13, "bold"), anchor="w", wraplength=wrap, justify="left")
        self.lbl.pack(side="left")
        tk.Label(header, text=f"Risk: {scored.risk_level.value}", bg=accent, fg=_ideal_text_color(accent),
                 padx=6, pady=1).pack(side="left", padx=(8, 0))

        # Score + actions
        side = tk.Frame(self, bg=background)
        side.grid(row=0, column=2, rowspan=2, sticky="ne")
        tk.Label(side, text=str(scored.risk_score), bg=background, fg="#1F2937",
                 font=("Segoe UI", 18, "bold")).pack(side="left", padx=(0, 8))
        if on_complete and (task.progress or 0) < 100:
            ttk.Button(side, text="Done", width=5, command=self._complete).pack(side="left", padx=(0, 4))
        if on_edit:
            ttk.Button(side, text="Edit", width=5, command=self._edit).pack(side="left", padx=(0, 4))
        if on_delete:
            ttk.Button(side, text="Delete", width=6, command=self._delete).pack(side="left")

        # Meta line
        meta = []
        if task.assignee:
            meta.append(task.assignee)
        if task.due_date:
            left = deadline_label(days_until(task.due_date, now))
            meta.append(f"Due {task.due_date.isoformat()} ({left})")
        tk.Label(self, text="  ·  ".join(meta), bg=background, fg="#4B5563", anchor="w").grid(
            row=1, column=1, sticky="w")

        # Bars
        self._bar(2, "Risk level", f"{scored.risk_score}/100", min(scored.risk_score, 100), background)
        self._bar(3, "Progress", f"{task.progress or 0}%", task.progress or 0, background)

        # Details
        details = tk.Frame(self, bg=background)
        details.grid(row=4, column=1, columnspan=2, sticky="we", pady=(4, 0))
        rows = [("Priority", task.priority or "-")]
        if (task.past_delay_days or 0) > 0:
            rows.append(("Past delay", f"{task.past_delay_days} days"))
        rows.append(("Dependencies", task.dependencies or "none"))
        rows.append(("Risk factors", task.risk_factors or "none"))
        for i, (label, value) in enumerate(rows):
            tk.Label(details, text=f"{label}:", bg=background, fg="#6B7280").grid(row=i, column=0, sticky="w")
            tk.Label(details, text=value, bg=background, fg="#1F2937", anchor="w",
                     wraplength=wrap, justify="left").grid(row=i, column=1, sticky="w", padx=(6, 0))

    def _bar(self, row: int, label: str, value_text: str, value: int, background: str):
        frame = tk.Frame(self, bg=background)
        frame.grid(row=row, column=1, columnspan=2, sticky="we", pady=(2, 0))
        frame.columnconfigure(1, weight=1)
        tk.Label(frame, text=label, bg=background, fg="#4B5563", width=12, anchor="w").grid(row=0, column=0)
        ttk.Progressbar(frame, maximum=100, value=value).grid(row=0, column=1, sticky="we", padx=6)
        tk.Label(frame, text=value_text, bg=background, fg="#4B5563", width=8, anchor="e").grid(row=0, column=2)

    def _edit(self):
        if self._on_edit:
            self._on_edit(self.task_id)

    def _delete(self):
        if self._on_delete:
            self._on_delete(self.task_id)

    def _complete(self):
        if self._on_complete:
            self._on_complete(self.task_id)


class ScrollableTaskList(ttk.Frame):
    """Canvas + interior Frame pattern with mousewheel support."""
    def __init__(
        self,
        master,
        on_edit: Optional[Callable[[object], None]] = None,
        on_delete: Optional[Callable[[object], None]] = None,
        on_complete: Optional[Callable[[object], None]] = None,
        row_wrap: int = 600,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._on_edit = on_edit
        self._on_delete = on_delete
        self._on_complete = on_complete
        self._row_wrap = row_wrap
        self._rows: Dict[object, TaskCard] = {}

        self.canvas = tk.Canvas(self, highlightthickness=0)
        self.vbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=self.vbar.set)

        self.canvas.grid(row=0, column=0, sticky="nsew")
        self.vbar.grid(row=0, column=1, sticky="ns")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.interior = ttk.Frame(self.canvas)
        self._win_id = self.canvas.create_window(0, 0, window=self.interior, anchor="nw")

        self.empty_var = tk.StringVar(value="")
        self._empty = ttk.Label(self.interior, textvariable=self.empty_var, foreground="#9CA3AF")

        self.interior.bind("<Configure>", self._on_interior_configure)
        self.canvas.bind("<Configure>", self._on_canvas_configure)

        self._bind_mousewheel(self.canvas)

    # --- Public API ---
    def set_tasks(self, tasks: List[ScoredTask], now: Optional[dt.datetime] = None, empty_text: str = ""):
        """Replace all cards, keeping the given order."""
        for row in list(self._rows.values()):
            row.destroy()
        self._rows.clear()
        self._empty.grid_forget()

        for i, scored in enumerate(tasks):
            card = TaskCard(
                self.interior,
                scored,
                now=now,
                on_edit=self._on_edit,
                on_delete=self._on_delete,
                on_complete=self._on_complete,
                wrap=self._row_wrap,
            )
            card.grid(row=i, column=0, sticky="we", padx=8, pady=4)
            self._rows[scored.id] = card
        self.interior.columnconfigure(0, weight=1)

        if not tasks and empty_text:
            self.empty_var.set(empty_text)
            self._empty.grid(row=0, column=0, pady=40)
        self._update_scrollregion()

    # --- Internals ---
    def _update_scrollregion(self):
        self.update_idletasks()
        self.canvas.configure(scrollregion=self.canvas.bbox("all"))

    def _on_interior_configure(self, _):
        self._update_scrollregion()

    def _on_canvas_configure(self, event):
        self.canvas.itemconfigure(self._win_id, width=event.width)
        for row in self._rows.values():
            row.lbl.configure(wraplength=max(event.width - 260, 200))

    def _bind_mousewheel(self, widget):
        widget.bind_all("<MouseWheel>", self._on_mousewheel_windows_mac, add="+")
        widget.bind_all("<Button-4>", self._on_mousewheel_linux, add="+")
        widget.bind_all("<Button-5>", self._on_mousewheel_linux, add="+")

    def _on_mousewheel_windows_mac(self, event):
        delta = int(-1 * (event.delta / 120))
        self.canvas.yview_scroll(delta, "units")

    def _on_mousewheel_linux(self, event):
        if event.num == 4:
            self.canvas.yview_scroll(-1, "units")
        elif event.num == 5:
            self.canvas.yview_scroll(1, "units")


def _ideal_text_color(bg_hex: str) -> str:
    """Black or white depending on background brightness."""
    bg_hex = bg_hex.strip().lstrip('#')
    if len(bg_hex) == 3:
        bg_hex = ''.join(c*2 for c in bg_hex)
    try:
        r = int(bg_hex[0:2], 16)
        g = int(bg_hex[2:4], 16)
        b = int(bg_hex[4:6], 16)
    except ValueError:
        return "black"
    luminance = 0.299*r + 0.587*g + 0.114*b
    return "black" if luminance > 186 else "white"
