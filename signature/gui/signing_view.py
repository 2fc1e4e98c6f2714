# signature/gui/signing_view.py
from __future__ import annotations
import io
import tkinter as tk
import webbrowser
from tkinter import ttk, filedialog, messagebox
from typing import List, Optional

from PIL import Image, ImageTk

from documents.logic.document_intake import DocumentIntake
from documents.logic.document_registry import DocumentRegistry
from documents.models.document_models import DocumentRecord, DocumentType

from ..exceptions.errors import SignpadError
from ..logic.catalog_store import CatalogStore
from ..logic.composition_engine import DocumentCompositionEngine
from ..logic.image_codec import data_url_to_bytes
from ..logic.signing_session import SigningSession
from ..models.signature_enums import PlacementMode
from ..models.signature_placement import SurfaceRect
from ..models.signature_record import SignatureRecord


class SigningView(ttk.Frame):
    """
    Document signing tab:
      • Upload a PDF (name + type) and pick it from the list
      • Pick a saved signature, click "Position" and click on the page
      • Dashed preview until applied; Apply / Reposition / Reset
      • Download the signed artifact
    """

    CANVAS_MAX_W = 450
    CANVAS_MAX_H = 600

    def __init__(self, parent: tk.Misc, *, store: CatalogStore, composer: DocumentCompositionEngine,
                 registry: DocumentRegistry, intake: Optional[DocumentIntake] = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._store = store
        self._composer = composer
        self._registry = registry
        self._intake = intake or DocumentIntake()
        self._session: Optional[SigningSession] = None
        self._signatures: List[SignatureRecord] = []
        self._documents: List[DocumentRecord] = []
        self._sig_tk: Optional[ImageTk.PhotoImage] = None
        self._surface = SurfaceRect(0, 0, 1, 1)

        self._doc_name = tk.StringVar(value="")
        self._doc_type = tk.StringVar(value=DocumentType.OTHER.value)
        self._sig_choice = tk.StringVar(value="")
        self._status = tk.StringVar(value="")

        self._make_ui()
        self.refresh()
        self.bind("<Destroy>", self._on_destroy, add="+")

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        self.columnconfigure(1, weight=1)
        self.rowconfigure(0, weight=1)

        left = ttk.Frame(self)
        left.grid(row=0, column=0, sticky="nsw", padx=10, pady=10)

        up = ttk.LabelFrame(left, text="Upload document")
        up.grid(row=0, column=0, sticky="ew")
        ttk.Label(up, text="Name").grid(row=0, column=0, sticky="w", padx=6, pady=(6, 0))
        ttk.Entry(up, textvariable=self._doc_name, width=28).grid(row=0, column=1, padx=6, pady=(6, 0))
        ttk.Label(up, text="Type").grid(row=1, column=0, sticky="w", padx=6)
        ttk.Combobox(up, textvariable=self._doc_type, values=[t.value for t in DocumentType],
                     state="readonly", width=26).grid(row=1, column=1, padx=6, pady=4)
        ttk.Button(up, text="Choose PDF…", command=self._upload).grid(row=2, column=1, sticky="e", padx=6, pady=(0, 6))

        docs = ttk.LabelFrame(left, text="Documents")
        docs.grid(row=1, column=0, sticky="nsew", pady=(8, 0))
        self._doc_tree = ttk.Treeview(docs, columns=("name", "type", "signed"), show="headings", height=8)
        for col, label, width in (("name", "Name", 150), ("type", "Type", 80), ("signed", "Signed", 60)):
            self._doc_tree.heading(col, text=label)
            self._doc_tree.column(col, width=width)
        self._doc_tree.grid(row=0, column=0, padx=6, pady=6)
        self._doc_tree.bind("<<TreeviewSelect>>", lambda e: self._open_selected())
        ttk.Button(docs, text="Remove", command=self._remove_document).grid(row=1, column=0, sticky="e", padx=6, pady=(0, 6))

        sig = ttk.LabelFrame(left, text="Signature")
        sig.grid(row=2, column=0, sticky="ew", pady=(8, 0))
        self._sig_combo = ttk.Combobox(sig, textvariable=self._sig_choice, state="readonly", width=30)
        self._sig_combo.grid(row=0, column=0, columnspan=3, padx=6, pady=6)
        self._sig_combo.bind("<<ComboboxSelected>>", lambda e: self._on_signature_selected())
        ttk.Button(sig, text="Position", command=self._start_positioning).grid(row=1, column=0, padx=6, pady=(0, 6))
        ttk.Button(sig, text="Apply", command=self._apply).grid(row=1, column=1, pady=(0, 6))
        ttk.Button(sig, text="Reset", command=self._reset).grid(row=1, column=2, padx=6, pady=(0, 6))
        ttk.Button(sig, text="Download signed PDF", command=self._download).grid(
            row=2, column=0, columnspan=2, sticky="w", padx=6, pady=(0, 6))
        ttk.Button(sig, text="Open PDF", command=self._open_pdf).grid(row=2, column=2, padx=6, pady=(0, 6))

        hist = ttk.LabelFrame(left, text="History")
        hist.grid(row=3, column=0, sticky="ew", pady=(8, 0))
        self._hist_tree = ttk.Treeview(hist, columns=("ts", "sig", "pos"), show="headings", height=5)
        for col, label, width in (("ts", "Applied", 130), ("sig", "Signature", 100), ("pos", "Position", 70)):
            self._hist_tree.heading(col, text=label)
            self._hist_tree.column(col, width=width)
        self._hist_tree.grid(row=0, column=0, padx=6, pady=6)

        right = ttk.Frame(self)
        right.grid(row=0, column=1, sticky="nsew", padx=(0, 10), pady=10)
        self._canvas = tk.Canvas(right, width=self.CANVAS_MAX_W, height=self.CANVAS_MAX_H, bg="#f8f8f8",
                                 highlightthickness=1, highlightbackground="#888")
        self._canvas.grid(row=0, column=0)
        self._canvas.bind("<Button-1>", self._on_click)
        ttk.Label(right, textvariable=self._status, anchor="w").grid(row=1, column=0, sticky="ew", pady=(6, 0))

    # ------------------------------------------------------------------ Data
    def refresh(self) -> None:
        self._signatures = self._store.load_signatures()
        self._sig_combo["values"] = [s.label for s in self._signatures]
        selected = self._session.controller.selected if self._session else None
        ids = [s.id for s in self._signatures]
        if selected is not None and selected.id in ids:
            self._sig_combo.current(ids.index(selected.id))
        else:
            self._sig_choice.set("")

        self._documents = self._registry.all()
        self._doc_tree.delete(*self._doc_tree.get_children())
        for doc in self._documents:
            self._doc_tree.insert("", "end", iid=doc.id, values=(
                doc.display_name, doc.document_type.label, "yes" if doc.is_signed else ""))

        self._hist_tree.delete(*self._hist_tree.get_children())
        for entry in reversed(self._store.load_history()):
            self._hist_tree.insert("", "end", values=(
                entry.timestamp.strftime("%Y-%m-%d %H:%M"), entry.signature_display_name,
                f"{entry.position.x:.0f}%, {entry.position.y:.0f}%"))
        self._redraw()

    def _error(self, exc: Exception) -> None:
        messagebox.showerror("Error", str(exc), parent=self)

    # ------------------------------------------------------------------ Documents
    def _upload(self) -> None:
        p = filedialog.askopenfilename(parent=self, title="Choose PDF", filetypes=[("PDF", "*.pdf")])
        if not p:
            return
        with open(p, "rb") as f:
            data = f.read()
        try:
            doc = self._intake.accept(p, data, display_name=self._doc_name.get(),
                                      document_type=self._doc_type.get())
        except SignpadError as exc:
            self._error(exc)
            return
        self._registry.add(doc)
        self._doc_name.set("")
        self._open_session(doc)
        self.refresh()
        self._doc_tree.selection_set(doc.id)

    def _open_selected(self) -> None:
        sel = self._doc_tree.selection()
        if not sel or (self._session and self._session.document.id == sel[0]):
            return
        doc = next((d for d in self._documents if d.id == sel[0]), None)
        if doc is not None:
            self._open_session(doc)
            self._redraw()

    def _open_session(self, doc: DocumentRecord) -> None:
        previous = self._session.controller.selected if self._session else None
        self._close_session()
        self._session = SigningSession(self._composer, self._registry, doc)
        if previous is not None:
            self._session.select_signature(previous)

    def _close_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def _remove_document(self) -> None:
        sel = self._doc_tree.selection()
        if not sel:
            return
        if self._session and self._session.document.id == sel[0]:
            self._close_session()
        self._registry.remove(sel[0])
        self.refresh()

    def _open_pdf(self) -> None:
        if self._session is None:
            return
        try:
            handle = self._session.document_preview()
        except SignpadError as exc:
            self._error(exc)
            return
        webbrowser.open(handle.path.as_uri())

    # ------------------------------------------------------------------ Placement
    def _on_signature_selected(self) -> None:
        idx = self._sig_combo.current()
        rec = self._signatures[idx] if 0 <= idx < len(self._signatures) else None
        if self._session is None:
            messagebox.showinfo("Info", "Please upload or select a document first.", parent=self)
            return
        try:
            self._session.select_signature(rec)
        except SignpadError as exc:
            self._error(exc)
        self._redraw()

    def _start_positioning(self) -> None:
        if self._session is None:
            messagebox.showinfo("Info", "Please upload or select a document first.", parent=self)
            return
        ctrl = self._session.controller
        try:
            if ctrl.mode is PlacementMode.POSITIONED:
                ctrl.reposition()
            else:
                ctrl.start_positioning()
        except SignpadError as exc:
            self._error(exc)
        self._redraw()

    def _on_click(self, e) -> None:
        if self._session is None:
            return
        try:
            if self._session.controller.click(e.x, e.y, self._surface):
                self._redraw()
        except SignpadError as exc:
            self._error(exc)

    def _apply(self) -> None:
        if self._session is None:
            messagebox.showinfo("Info", "Please upload or select a document first.", parent=self)
            return
        try:
            artifact = self._session.apply()
        except SignpadError as exc:
            self._error(exc)
            return
        self.refresh()
        self._status.set(f"Signed: {artifact.filename} ({len(artifact)} bytes)")

    def _reset(self) -> None:
        if self._session is not None:
            self._session.controller.reset()
        self._status.set("")
        self._redraw()

    def _download(self) -> None:
        artifact = self._session.controller.artifact if self._session else None
        if artifact is None:
            messagebox.showinfo("Info", "Apply the signature before downloading the document.", parent=self)
            return
        target = filedialog.asksaveasfilename(parent=self, initialfile=artifact.filename,
                                              defaultextension=".pdf", filetypes=[("PDF", "*.pdf")])
        if target:
            self._session.save_artifact(target)
            messagebox.showinfo("Saved", f"Saved {artifact.filename}.", parent=self)

    # ------------------------------------------------------------------ Render
    def _redraw(self) -> None:
        c = self._canvas
        c.delete("all")
        pw, ph = self._composer.PAGE_SIZE
        scale = min(self.CANVAS_MAX_W / pw, self.CANVAS_MAX_H / ph)
        cw, ch = pw * scale, ph * scale
        offx = (self.CANVAS_MAX_W - cw) / 2
        offy = (self.CANVAS_MAX_H - ch) / 2
        self._surface = SurfaceRect(offx, offy, cw, ch)
        c.create_rectangle(offx, offy, offx + cw, offy + ch, fill="white", outline="#666")

        if self._session is None:
            c.create_text(self.CANVAS_MAX_W / 2, self.CANVAS_MAX_H / 2,
                          text="Upload a PDF to start", fill="#888")
            return

        doc = self._session.document
        c.create_text(offx + 20, offy + 24, text=doc.display_name, anchor="w",
                      font=("Segoe UI", 12, "bold"))
        c.create_text(offx + 20, offy + 42, text=doc.document_type.label, anchor="w", fill="#555")
        y = offy + 70
        row = 0
        while y < offy + ch - 40:
            c.create_rectangle(offx + 20, y, offx + 20 + (cw - 40) * (0.6 if row % 5 == 4 else 1.0), y + 4,
                               fill="#e0e0e0", outline="")
            y += 10
            row += 1

        ctrl = self._session.controller
        if ctrl.prompt_visible:
            c.create_rectangle(offx, offy, offx + cw, offy + ch, fill="#0A84FF", stipple="gray25", outline="")
            c.create_text(offx + cw / 2, offy + ch / 2, text="Click on the document to place the signature",
                          fill="black", font=("Segoe UI", 11, "bold"))
            return

        preview = ctrl.preview()
        if preview is not None:
            self._draw_signature(preview.image_data, preview.position.x, preview.position.y, scale, dashed=True)
        elif ctrl.applied and ctrl.selected is not None:
            self._draw_signature(ctrl.selected.image_data, ctrl.position.x, ctrl.position.y, scale, dashed=False)
            self._status.set(f"Signed: {ctrl.artifact.filename}")

    def _draw_signature(self, image_data: str, x_pct: float, y_pct: float, scale: float, *, dashed: bool) -> None:
        cfg = self._composer.config
        w = cfg.signature_width_pt * scale
        h = cfg.signature_height_pt * scale
        s = self._surface
        cx = s.left + x_pct / 100.0 * s.width
        cy = s.top + y_pct / 100.0 * s.height
        x0, y0 = cx - w / 2, cy - h / 2
        try:
            img = Image.open(io.BytesIO(data_url_to_bytes(image_data))).convert("RGBA")
            img.thumbnail((max(1, int(w)), max(1, int(h))))
            self._sig_tk = ImageTk.PhotoImage(img)
            self._canvas.create_image(cx, cy, image=self._sig_tk, anchor="center")
        except (OSError, SignpadError):
            self._sig_tk = None
        if dashed:
            self._canvas.create_rectangle(x0, y0, x0 + w, y0 + h, outline="#0A84FF", dash=(4, 2))

    def _on_destroy(self, e) -> None:
        if e.widget is self:
            self._close_session()
