#!/usr/bin/env python3
"""
Training Store - Table storage for training examples, extraction patterns
and correction history v1.0.0

Three tables with auto-increment integer ids:
- trainingExamples
- extractionPatterns
- correctionHistory

With a path, every mutation is written through to a single JSON document
(temp file + replace). Without a path the store lives in memory only.
"""

import os
import json
import logging
import threading
import tempfile
from copy import deepcopy
from pathlib import Path
from typing import Dict, Any, Optional, List, Iterable

logger = logging.getLogger(__name__)

TRAINING_EXAMPLES = 'trainingExamples'
EXTRACTION_PATTERNS = 'extractionPatterns'
CORRECTION_HISTORY = 'correctionHistory'

TABLES = (TRAINING_EXAMPLES, EXTRACTION_PATTERNS, CORRECTION_HISTORY)

STORE_ENV_VAR = 'REFUND_TRAINING_STORE'


class TrainingStore:
    """Thread-safe record tables. Records are plain dicts keyed by their wire names."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self.lock = threading.RLock()
        self._tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self._next_ids: Dict[str, int] = {name: 1 for name in TABLES}

        if self.path is not None and self.path.exists():
            self._load()

        location = self.path if self.path is not None else 'memory'
        logger.info(f"✅ TrainingStore ready ({location})")

    @classmethod
    def from_env(cls) -> 'TrainingStore':
        return cls(os.getenv(STORE_ENV_VAR) or None)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self):
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        for name in TABLES:
            self._tables[name] = list(data.get(name, []))
            highest = max((r.get('id', 0) for r in self._tables[name]), default=0)
            self._next_ids[name] = max(data.get('nextIds', {}).get(name, 1), highest + 1)

        logger.info(f"Loaded training store from {self.path}: "
                    + ", ".join(f"{name}={len(self._tables[name])}" for name in TABLES))

    def _save(self):
        if self.path is None:
            return

        payload = dict(self._tables)
        payload['nextIds'] = self._next_ids
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # ------------------------------------------------------------------
    # Table operations
    # ------------------------------------------------------------------

    def _table(self, table: str) -> List[Dict[str, Any]]:
        if table not in self._tables:
            raise KeyError(f"Unknown table: {table}")
        return self._tables[table]

    def add(self, table: str, record: Dict[str, Any]) -> int:
        """Insert a copy of record and return its new id."""
        with self.lock:
            rows = self._table(table)
            new_record = deepcopy(record)
            new_record['id'] = self._next_ids[table]
            self._next_ids[table] += 1
            rows.append(new_record)
            self._save()
            return new_record['id']

    def bulk_add(self, table: str, records: Iterable[Dict[str, Any]]) -> List[int]:
        with self.lock:
            rows = self._table(table)
            ids = []
            for record in records:
                new_record = deepcopy(record)
                new_record['id'] = self._next_ids[table]
                self._next_ids[table] += 1
                rows.append(new_record)
                ids.append(new_record['id'])
            self._save()
            return ids

    def get(self, table: str, record_id: int) -> Optional[Dict[str, Any]]:
        with self.lock:
            for row in self._table(table):
                if row['id'] == record_id:
                    return deepcopy(row)
            return None

    def update(self, table: str, record_id: int, changes: Dict[str, Any]) -> bool:
        with self.lock:
            for row in self._table(table):
                if row['id'] == record_id:
                    row.update({k: v for k, v in changes.items() if k != 'id'})
                    self._save()
                    return True
            return False

    def delete(self, table: str, record_id: int) -> bool:
        with self.lock:
            rows = self._table(table)
            for i, row in enumerate(rows):
                if row['id'] == record_id:
                    del rows[i]
                    self._save()
                    return True
            return False

    def all(self, table: str) -> List[Dict[str, Any]]:
        """Copies of every record, in insertion order."""
        with self.lock:
            return deepcopy(self._table(table))

    def where(self, table: str, **criteria) -> List[Dict[str, Any]]:
        with self.lock:
            return [deepcopy(row) for row in self._table(table)
                    if all(row.get(k) == v for k, v in criteria.items())]

    def count(self, table: str) -> int:
        with self.lock:
            return len(self._table(table))

    def clear(self, table: str):
        with self.lock:
            self._table(table).clear()
            self._save()
