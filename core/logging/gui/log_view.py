"""
log_view.py

Tkinter view listing the event log with feature/level filters.
"""

import tkinter as tk
from tkinter import Frame, Label, Button, ttk

from core.logging.logic.logger import LOG_LEVELS, Logger, logger as default_logger

FEATURES = ["Signature", "Catalog", "Documents", "GovConnector"]


class LogView(tk.Frame):
    def __init__(self, parent, logger: Logger = None):
        super().__init__(parent)
        self.logger = logger or default_logger

        self._build_ui()
        self.refresh()

    def _build_ui(self):
        filter_frame = Frame(self)
        filter_frame.pack(fill="x", padx=5, pady=5)

        self.filter_feature_var = tk.StringVar()
        self.filter_level_var = tk.StringVar()

        Label(filter_frame, text="Feature:").pack(side="left")
        ttk.Combobox(filter_frame, textvariable=self.filter_feature_var,
                     values=[""] + FEATURES).pack(side="left", padx=5)

        Label(filter_frame, text="Level:").pack(side="left")
        ttk.Combobox(filter_frame, textvariable=self.filter_level_var,
                     values=[""] + list(LOG_LEVELS), state="readonly").pack(side="left", padx=5)

        Button(filter_frame, text="Apply filter", command=self.refresh).pack(side="left", padx=10)
        Button(filter_frame, text="Clear log", command=self._clear).pack(side="right")

        self.tree = ttk.Treeview(self, columns=("timestamp", "log_level", "feature", "event", "message"),
                                 show="headings")
        self.tree.heading("timestamp", text="Time")
        self.tree.heading("log_level", text="Level")
        self.tree.heading("feature", text="Feature")
        self.tree.heading("event", text="Event")
        self.tree.heading("message", text="Message")
        self.tree.pack(fill="both", expand=True, padx=5, pady=5)

    def refresh(self):
        logs = self.logger.query_logs(
            feature=self.filter_feature_var.get() or None,
            level=self.filter_level_var.get() or None,
            limit=500,
        )

        for i in self.tree.get_children():
            self.tree.delete(i)

        for log in logs:
            self.tree.insert("", "end", values=(log.timestamp, log.log_level, log.feature, log.event,
                                                log.message or ""))

    def _clear(self):
        self.logger.clear_logs()
        self.refresh()
