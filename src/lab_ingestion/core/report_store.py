# ============================================================================
# src/lab_ingestion/core/report_store.py
# ============================================================================
"""
Upload and report repositories

Persist manual-entry uploads and generated reports so a report can be
fetched again by id. Two backends share one interface:
- InMemoryReportRepository: process-local, used by tests
- SQLiteReportRepository: raw sqlite3, full record stored as JSON

One repository instance serves one record kind ("uploads" or "reports").
"""

import json
import logging
import sqlite3
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import base_settings

logger = logging.getLogger(__name__)

_VALID_TABLES = ("uploads", "reports")


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class ReportRepository(ABC):
    """Stores JSON-serializable records keyed by a generated id."""

    @abstractmethod
    def save(self, record: Dict[str, Any]) -> str:
        """Persist a record and return its id (generated when missing)."""

    @abstractmethod
    def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the stored record, or None."""

    def _prepare(self, record: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(record)
        stored.setdefault("id", _new_id())
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return stored


class InMemoryReportRepository(ReportRepository):

    def __init__(self, name: str = "reports"):
        self.name = name
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save(self, record: Dict[str, Any]) -> str:
        stored = self._prepare(record)
        # Round-trip through JSON so callers cannot mutate what was stored
        payload = json.loads(json.dumps(stored, default=str))
        with self._lock:
            self._records[payload["id"]] = payload
        logger.info(f"Saved {self.name} record {payload['id']}")
        return payload["id"]

    def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(record_id)
        return json.loads(json.dumps(record)) if record is not None else None


class SQLiteReportRepository(ReportRepository):
    """
    SQLite-backed repository.

    Args:
        table: "uploads" or "reports"
        db_path: Database file; defaults to base_settings.REPORTS_DB_PATH
    """

    def __init__(self, table: str = "reports", db_path: Optional[Path] = None):
        if table not in _VALID_TABLES:
            raise ValueError(f"Unknown table: {table}")
        self.table = table
        self.db_path = Path(db_path or base_settings.REPORTS_DB_PATH)
        self._init_database()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def _init_database(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        cur = conn.cursor()

        cur.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id          TEXT PRIMARY KEY,
                created_at  TEXT NOT NULL,
                data        TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()
        logger.info(f"Report store initialized: {self.db_path} ({self.table})")

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------
    def save(self, record: Dict[str, Any]) -> str:
        stored = self._prepare(record)

        conn = sqlite3.connect(str(self.db_path))
        cur = conn.cursor()
        cur.execute(f"""
            INSERT OR REPLACE INTO {self.table} (id, created_at, data)
            VALUES (?, ?, ?)
        """, (
            stored["id"],
            stored["created_at"],
            json.dumps(stored, default=str),
        ))
        conn.commit()
        conn.close()

        logger.info(f"Saved {self.table} record {stored['id']}")
        return stored["id"]

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        conn = sqlite3.connect(str(self.db_path))
        cur = conn.cursor()
        cur.execute(f"SELECT data FROM {self.table} WHERE id = ?", (record_id,))
        row = cur.fetchone()
        conn.close()
        if row:
            return json.loads(row[0])
        logger.debug(f"{self.table} record {record_id} not found")
        return None


def create_repository(table: str) -> ReportRepository:
    """Build the repository configured by base_settings.STORE_BACKEND."""
    if base_settings.STORE_BACKEND == "memory":
        return InMemoryReportRepository(table)
    return SQLiteReportRepository(table)
