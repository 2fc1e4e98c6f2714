# documents/logic/document_registry.py
"""
DocumentRegistry – the documents known to this session.

Records that were accepted in this session keep their bytes in memory.
Only metadata goes to the catalog (``documents`` key), so after a restart
every record comes back as ``MetadataOnly``.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.logging.logic.logger import Logger, logger as default_logger
from signature.logic.catalog_store import DOCUMENTS_KEY, CatalogStore

from ..models.document_models import DocumentRecord

log = logging.getLogger(__name__)


class DocumentRegistry:
    def __init__(self, store: CatalogStore, *, logger: Optional[Logger] = None) -> None:
        self._store = store
        self._logger = logger or default_logger
        self._live: Dict[str, DocumentRecord] = {}

    # -------- Persistence ----------------------------------------------------
    def _load(self) -> List[DocumentRecord]:
        raw = self._store.read_json(DOCUMENTS_KEY, list)
        if not isinstance(raw, list):
            return []
        records: List[DocumentRecord] = []
        for item in raw:
            try:
                records.append(DocumentRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("skipping malformed document entry: %r", exc)
        return records

    def _save(self, records: List[DocumentRecord]) -> None:
        self._store.write_json(DOCUMENTS_KEY, [r.to_dict() for r in records])

    # -------- API ------------------------------------------------------------
    def all(self) -> List[DocumentRecord]:
        """Persisted order; in-session records carry their payload."""
        return [self._live.get(r.id, r) for r in self._load()]

    def get(self, document_id: str) -> Optional[DocumentRecord]:
        return next((r for r in self.all() if r.id == document_id), None)

    def add(self, record: DocumentRecord) -> DocumentRecord:
        records = [r for r in self._load() if r.id != record.id]
        records.append(record)
        self._save(records)
        self._live[record.id] = record
        self._logger.log("Documents", "Uploaded", reference_id=record.id,
                         message=f"'{record.display_name}' ({record.document_type.value})")
        return record

    def mark_signed(self, document_id: str, artifact_ref: str) -> Optional[DocumentRecord]:
        records = self._load()
        for i, rec in enumerate(records):
            if rec.id == document_id:
                break
        else:
            log.warning("mark_signed: unknown document %s", document_id)
            return None
        records[i] = rec.with_signed(artifact_ref)
        self._save(records)
        live = self._live.get(document_id)
        updated = live.with_signed(artifact_ref) if live else records[i]
        if live:
            self._live[document_id] = updated
        self._logger.log("Documents", "Signed", reference_id=document_id, message=artifact_ref)
        return updated

    def remove(self, document_id: str) -> bool:
        records = self._load()
        kept = [r for r in records if r.id != document_id]
        self._live.pop(document_id, None)
        if len(kept) == len(records):
            return False
        self._save(kept)
        self._logger.log("Documents", "Deleted", reference_id=document_id)
        return True
