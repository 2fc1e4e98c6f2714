# signature/gui/capture_view.py
from __future__ import annotations
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from typing import Callable, List, Optional

from ..exceptions.errors import SignpadError
from ..logic.capture_engine import SignatureCaptureEngine
from ..models.signature_record import SignatureRecord


class CaptureView(ttk.Frame):
    """
    Signature tab:
      • Freehand canvas (mouse) forwarding pointer events to the engine
      • Name entry + Save / Clear / Import PNG/GIF
      • List of saved signatures with Download and Delete
    """

    def __init__(self, parent: tk.Misc, *, engine: SignatureCaptureEngine,
                 on_catalog_changed: Optional[Callable[[], None]] = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._engine = engine
        self._on_catalog_changed = on_catalog_changed
        self._line: Optional[int] = None
        self._current: List[float] = []
        self._records: List[SignatureRecord] = []
        self._name = tk.StringVar(value="")
        self._make_ui()
        self.refresh()

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        w, h = self._engine.size

        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 4))
        ttk.Label(bar, text="Signature name").pack(side="left")
        ttk.Entry(bar, textvariable=self._name, width=32).pack(side="left", padx=(6, 12))
        ttk.Button(bar, text="Clear", command=self._clear).pack(side="left")
        ttk.Button(bar, text="Import PNG/GIF", command=self._import).pack(side="left", padx=(6, 0))
        ttk.Button(bar, text="Save signature", command=self._save).pack(side="right")

        self.canvas = tk.Canvas(
            self, width=w, height=h, bg="white",
            highlightthickness=1, highlightbackground="#888", cursor="crosshair"
        )
        self.canvas.grid(row=1, column=0, padx=10, pady=4)
        self.canvas.bind("<ButtonPress-1>", self._on_down)
        self.canvas.bind("<B1-Motion>", self._on_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_up)

        lst = ttk.LabelFrame(self, text="Saved signatures")
        lst.grid(row=2, column=0, sticky="nsew", padx=10, pady=(8, 10))
        lst.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)

        self._tree = ttk.Treeview(lst, columns=("name", "hash"), show="headings", height=6)
        self._tree.heading("name", text="Name")
        self._tree.heading("hash", text="Fingerprint")
        self._tree.column("hash", width=220)
        self._tree.grid(row=0, column=0, sticky="nsew", padx=6, pady=6)

        btns = ttk.Frame(lst)
        btns.grid(row=1, column=0, sticky="e", padx=6, pady=(0, 6))
        ttk.Button(btns, text="Download", command=self._download).pack(side="left")
        ttk.Button(btns, text="Delete", command=self._delete).pack(side="left", padx=(6, 0))

    def refresh(self) -> None:
        self._records = self._engine.list_signatures()
        self._tree.delete(*self._tree.get_children())
        for rec in self._records:
            self._tree.insert("", "end", iid=rec.id, values=(rec.display_name, rec.fingerprint))

    # ------------------------------------------------------------------ Canvas handlers
    def _on_down(self, e) -> None:
        self._engine.begin_stroke((e.x, e.y))
        self._current = [e.x, e.y, e.x + 1, e.y + 1]
        self._line = self.canvas.create_line(
            *self._current, fill=self._engine.config.stroke_color, width=self._engine.config.stroke_width,
            capstyle="round", joinstyle="round", smooth=True, splinesteps=24,
        )

    def _on_move(self, e) -> None:
        if self._engine.continue_stroke((e.x, e.y)) and self._line is not None:
            self._current.extend((e.x, e.y))
            self.canvas.coords(self._line, *self._current)

    def _on_up(self, e) -> None:
        self._engine.end_stroke()
        self._line = None
        self._current = []

    # ------------------------------------------------------------------ Actions
    def _clear(self) -> None:
        self.canvas.delete("all")
        self._engine.clear()

    def _import(self) -> None:
        p = filedialog.askopenfilename(parent=self, title="Import signature image",
                                       filetypes=[("Images", "*.png *.gif")])
        if not p:
            return
        with open(p, "rb") as f:
            data = f.read()
        try:
            self._engine.import_image(data)
        except SignpadError as exc:
            messagebox.showerror("Error", str(exc), parent=self)
            return
        self.canvas.delete("all")
        w, h = self._engine.size
        self.canvas.create_text(w // 2, h // 2, text="Image loaded (will be stored).", fill="black")

    def _save(self) -> None:
        try:
            rec = self._engine.save(self._name.get())
        except SignpadError as exc:
            messagebox.showerror("Error", str(exc), parent=self)
            return
        self.canvas.delete("all")
        self._name.set("")
        self.refresh()
        if self._on_catalog_changed:
            self._on_catalog_changed()
        messagebox.showinfo("Saved", f"Signature '{rec.display_name}' saved.", parent=self)

    def _selected(self) -> Optional[SignatureRecord]:
        sel = self._tree.selection()
        if not sel:
            return None
        return next((r for r in self._records if r.id == sel[0]), None)

    def _download(self) -> None:
        rec = self._selected()
        if rec is None:
            return
        try:
            name, data = self._engine.export_png(rec)
        except SignpadError as exc:
            messagebox.showerror("Error", str(exc), parent=self)
            return
        target = filedialog.asksaveasfilename(parent=self, initialfile=name, defaultextension=".png",
                                              filetypes=[("PNG", "*.png")])
        if target:
            with open(target, "wb") as f:
                f.write(data)

    def _delete(self) -> None:
        rec = self._selected()
        if rec is None:
            return
        if not messagebox.askyesno("Delete signature?", f"Delete '{rec.display_name}'?", parent=self):
            return
        self._engine.delete(rec.id)
        self.refresh()
        if self._on_catalog_changed:
            self._on_catalog_changed()
