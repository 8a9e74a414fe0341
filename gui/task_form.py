from __future__ import annotations
from typing import Any, Callable, Dict, Optional
import tkinter as tk
from tkinter import ttk

from core.models import PRIORITIES, default_form

TEXT_FIELDS = (
    ("task_name", "Task name *"),
    ("assignee", "Assignee"),
    ("due_date", "Due date (YYYY-MM-DD)"),
    ("dependencies", "Dependencies"),
)
INT_FIELDS = (
    ("progress", "Progress (%)", 0, 100),
    ("past_delay_days", "Past delay (days)", 0, 3650),
)


class TaskFormDialog(tk.Toplevel):
    """Modal add/edit form. ``on_submit`` gets the raw form dict and returns an error message or None."""
    def __init__(self, master, title: str, on_submit: Callable[[Dict[str, Any]], Optional[str]],
                 initial: Optional[Dict[str, Any]] = None, submit_text: str = "Save"):
        super().__init__(master)
        self.title(title)
        self.transient(master)
        self.resizable(False, False)
        self.configure(padx=12, pady=12)
        self._on_submit = on_submit
        values = {**default_form(), **(initial or {})}
        self.vars: Dict[str, tk.Variable] = {}

        row = 0
        for key, label in TEXT_FIELDS:
            ttk.Label(self, text=label).grid(row=row, column=0, sticky="w", pady=2)
            var = tk.StringVar(value=str(values.get(key) or ""))
            entry = ttk.Entry(self, textvariable=var, width=40)
            entry.grid(row=row, column=1, sticky="we", pady=2)
            if key == "task_name":
                entry.focus_set()
            self.vars[key] = var
            row += 1

        ttk.Label(self, text="Priority").grid(row=row, column=0, sticky="w", pady=2)
        self.vars["priority"] = tk.StringVar(value=str(values.get("priority") or "medium"))
        choices = list(PRIORITIES)
        if self.vars["priority"].get() not in choices:
            choices.append(self.vars["priority"].get())
        ttk.Combobox(self, textvariable=self.vars["priority"], values=choices, state="readonly",
                     width=12).grid(row=row, column=1, sticky="w", pady=2)
        row += 1

        for key, label, lo, hi in INT_FIELDS:
            ttk.Label(self, text=label).grid(row=row, column=0, sticky="w", pady=2)
            var = tk.StringVar(value=str(values.get(key) or 0))
            ttk.Spinbox(self, from_=lo, to=hi, textvariable=var, width=8).grid(row=row, column=1, sticky="w", pady=2)
            self.vars[key] = var
            row += 1

        ttk.Label(self, text="Risk factors").grid(row=row, column=0, sticky="nw", pady=2)
        self.risk_text = tk.Text(self, width=40, height=4)
        self.risk_text.insert("1.0", str(values.get("risk_factors") or ""))
        self.risk_text.grid(row=row, column=1, sticky="we", pady=2)
        row += 1

        self.error_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self.error_var, foreground="#B00020").grid(
            row=row, column=0, columnspan=2, sticky="w")
        row += 1

        buttons = ttk.Frame(self)
        buttons.grid(row=row, column=0, columnspan=2, sticky="e", pady=(8, 0))
        ttk.Button(buttons, text=submit_text, command=self._submit).pack(side="left", padx=(0, 6))
        ttk.Button(buttons, text="Cancel", command=self.destroy).pack(side="left")

        self.bind("<Escape>", lambda e: self.destroy())
        self.grab_set()

    def values(self) -> Dict[str, Any]:
        form = {k: v.get() for k, v in self.vars.items()}
        form["risk_factors"] = self.risk_text.get("1.0", "end").strip()
        return form

    def _submit(self):
        error = self._on_submit(self.values())
        if error:
            self.error_var.set(error)
            return
        self.destroy()
