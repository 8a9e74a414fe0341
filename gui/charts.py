from __future__ import annotations
from typing import Dict, List, Tuple
import tkinter as tk
from tkinter import ttk

PRIORITY_LABELS = (("high", "High priority"), ("medium", "Medium priority"), ("low", "Low priority"))


class ChartsPanel(ttk.Frame):
    """Two bar groups: tasks per priority and the progress distribution."""
    def __init__(self, master, **kwargs):
        super().__init__(master, **kwargs)
        self.columnconfigure(0, weight=1)
        self.columnconfigure(1, weight=1)
        self.priority_box = ttk.LabelFrame(self, text="Tasks by priority", padding=8)
        self.priority_box.grid(row=0, column=0, sticky="nsew", padx=(0, 4))
        self.progress_box = ttk.LabelFrame(self, text="Progress distribution", padding=8)
        self.progress_box.grid(row=0, column=1, sticky="nsew", padx=(4, 0))

    def update_data(self, priority: Dict[str, int], progress: List[Tuple[str, int]], total: int):
        rows = [(label, priority.get(key, 0)) for key, label in PRIORITY_LABELS]
        _fill(self.priority_box, rows, total)
        _fill(self.progress_box, progress, total)


def _fill(box: ttk.LabelFrame, rows: List[Tuple[str, int]], total: int):
    for child in box.winfo_children():
        child.destroy()
    box.columnconfigure(1, weight=1)
    for i, (label, count) in enumerate(rows):
        ttk.Label(box, text=label, width=16).grid(row=i, column=0, sticky="w")
        pct = (count / total * 100) if total else 0
        ttk.Progressbar(box, maximum=100, value=pct).grid(row=i, column=1, sticky="we", padx=6, pady=2)
        tk.Label(box, text=f"{count}").grid(row=i, column=2, sticky="e")
