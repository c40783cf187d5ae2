"""JSON-file-backed unit of work.

The whole store is one JSON document. Entering the unit of work loads a
private working copy; repositories read and write that copy; ``commit()``
writes it to a temporary file and renames it over the store, so a commit
lands completely or not at all.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.infrastructure.persistence.json_booking_repository import (
    JsonBookingRepository,
)
from stockbook.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from stockbook.infrastructure.persistence.json_stock_event_repository import (
    JsonStockEventRepository,
)

logger = logging.getLogger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._document: dict | None = None
        self._ensure_file()

    def __enter__(self) -> JsonUnitOfWork:
        self._document = self._load()
        self.products = JsonProductRepository(self._document)
        self.stock_events = JsonStockEventRepository(self._document)
        self.bookings = JsonBookingRepository(self._document)
        return self

    def commit(self) -> None:
        if self._document is None:
            raise RuntimeError("Unit of work is not active")
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(self._document, indent=2) + "\n", encoding="utf-8"
        )
        os.replace(tmp_path, self._file_path)
        self._document = None
        logger.debug("Committed store %s", self._file_path)

    def rollback(self) -> None:
        self._document = None

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}\n", encoding="utf-8")
