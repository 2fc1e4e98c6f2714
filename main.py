import logging
import tkinter as tk
from tkinter import Frame, Label, Button, X, LEFT, RIGHT, ttk

from core.config.config_service import config_service
from core.logging.gui.log_view import LogView
from core.logging.logic.logger import logger
from documents.logic.document_intake import DocumentIntake
from documents.logic.document_registry import DocumentRegistry
from signature.gui.capture_view import CaptureView
from signature.gui.signing_view import SigningView
from signature.logic.capture_engine import SignatureCaptureEngine
from signature.logic.catalog_store import CatalogStore
from signature.logic.composition_engine import DocumentCompositionEngine
from signature.logic.gov_connector import GovConnector
from signature.models.signature_config import SignatureConfig


class MainWindow(tk.Tk):
    def __init__(self):
        super().__init__()

        self.title("Signpad")
        self.geometry("1100x780")

        cfg = SignatureConfig.from_service(config_service)
        self.store = CatalogStore().open()
        self.capture = SignatureCaptureEngine(self.store, config=cfg)
        self.composer = DocumentCompositionEngine(self.store, config=cfg)
        self.registry = DocumentRegistry(self.store)
        self.connector = GovConnector(
            self.store,
            delay_ms=config_service.connector.gov_delay_ms,
            scheduler=lambda ms, cb: self.after(ms, cb),
        )

        # Top bar
        self.nav_frame = Frame(self, height=40, bg="#dddddd")
        self.nav_frame.pack(side="top", fill=X)
        Label(self.nav_frame, text="Signpad", bg="#dddddd", font=("Segoe UI", 12, "bold")).pack(side=LEFT, padx=10)
        self.gov_button = Button(self.nav_frame, command=self.toggle_gov)
        self.gov_button.pack(side=RIGHT, padx=10, pady=5)

        # Tabs
        self.tabs = ttk.Notebook(self)
        self.tabs.pack(fill="both", expand=True)
        self.signing_view = SigningView(self.tabs, store=self.store, composer=self.composer,
                                        registry=self.registry, intake=DocumentIntake())
        self.capture_view = CaptureView(self.tabs, engine=self.capture,
                                        on_catalog_changed=self.signing_view.refresh)
        self.log_view = LogView(self.tabs, logger=logger)
        self.tabs.add(self.capture_view, text="Signatures")
        self.tabs.add(self.signing_view, text="Sign documents")
        self.tabs.add(self.log_view, text="Log")
        self.tabs.bind("<<NotebookTabChanged>>", self._on_tab_changed)

        # Status bar
        self.status_bar = Label(self, text="", anchor="w", bg="#eeeeee")
        self.status_bar.pack(side="bottom", fill=X)

        self.refresh_gov()
        self.protocol("WM_DELETE_WINDOW", self.on_close)

    def _on_tab_changed(self, _event=None):
        current = self.nametowidget(self.tabs.select())
        if current is self.log_view:
            self.log_view.refresh()
        elif current is self.signing_view:
            self.signing_view.refresh()

    def toggle_gov(self):
        """Connect or disconnect the government signature stub."""
        if self.connector.is_connected:
            self.connector.disconnect()
            self.refresh_gov()
        elif self.connector.connect(on_done=lambda ok: self.refresh_gov()):
            self.gov_button.config(text="Connecting…", state="disabled")
            self.set_status("Connecting to government signature service…")

    def refresh_gov(self):
        connected = self.connector.is_connected
        self.gov_button.config(text="Disconnect gov.br" if connected else "Connect gov.br", state="normal")
        self.set_status("Government signature connected" if connected else "")

    def set_status(self, message):
        self.status_bar.config(text=message)

    def on_close(self):
        self.signing_view.destroy()
        self.store.close()
        logger.close()
        self.destroy()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = MainWindow()
    app.mainloop()


if __name__ == "__main__":
    main()
