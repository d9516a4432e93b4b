#!/usr/bin/env python3
"""
Pattern Registry - Field-scoped extraction patterns with priority and success statistics v1.0.0

Holds the persisted pattern records and an in-memory snapshot of compiled
patterns per field type, ordered by priority (lower first). Every mutation
rebuilds the snapshot under the registry lock before returning, so readers
always see either the old or the new complete snapshot.
"""

import re
import json
import logging
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Pattern, Tuple

from .training_store import TrainingStore, EXTRACTION_PATTERNS, TRAINING_EXAMPLES
from ..extraction.document_fields.models.extraction_models import FieldType

logger = logging.getLogger(__name__)

KNOWLEDGE_DIR = Path(__file__).parent / "knowledge_base"
DEFAULT_PATTERNS_FILE = KNOWLEDGE_DIR / "default_patterns.json"
DEFAULT_TRAINING_EXAMPLES_FILE = KNOWLEDGE_DIR / "default_training_examples.json"


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class ExtractionPattern:
    """A stored regular expression for one field type."""
    id: Optional[int]
    field_type: str
    pattern_regex: str
    priority: int
    success_rate: float
    usage_count: int
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fieldType': self.field_type,
            'patternRegex': self.pattern_regex,
            'priority': self.priority,
            'successRate': self.success_rate,
            'usageCount': self.usage_count,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExtractionPattern':
        return cls(
            id=data.get('id'),
            field_type=data['fieldType'],
            pattern_regex=data['patternRegex'],
            priority=int(data.get('priority', 5)),
            success_rate=float(data.get('successRate', 0)),
            usage_count=int(data.get('usageCount', 0)),
            timestamp=data.get('timestamp') or _now()
        )


class PatternRegistry:
    """
    Pattern storage plus the compiled snapshot extractors read from.

    Seeding is idempotent and count based: defaults are inserted only into
    empty tables. If seeding fails the registry stays usable with an empty
    snapshot; extractors then rely on their built-in patterns.
    """

    def __init__(
        self,
        store: Optional[TrainingStore] = None,
        patterns_file: Optional[Path] = None,
        training_examples_file: Optional[Path] = None,
        auto_seed: bool = True
    ):
        self.store = store if store is not None else TrainingStore()
        self.patterns_file = Path(patterns_file) if patterns_file else DEFAULT_PATTERNS_FILE
        self.training_examples_file = (Path(training_examples_file) if training_examples_file
                                       else DEFAULT_TRAINING_EXAMPLES_FILE)
        self._snapshot: Dict[str, Tuple[Pattern, ...]] = {ft: () for ft in FieldType.ALL}

        if auto_seed:
            self.seed_defaults()
        self.rebuild()

    @property
    def lock(self):
        return self.store.lock

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def _read_seed_file(self, path: Path) -> List[Dict[str, Any]]:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"Seed file {path} must contain a list")
        timestamp = _now()
        return [dict(record, timestamp=record.get('timestamp') or timestamp) for record in records]

    def seed_defaults(self) -> bool:
        """Insert default patterns and training examples into empty tables."""
        try:
            with self.lock:
                if self.store.count(TRAINING_EXAMPLES) == 0:
                    examples = self._read_seed_file(self.training_examples_file)
                    self.store.bulk_add(TRAINING_EXAMPLES, examples)
                    logger.info(f"🌱 Seeded {len(examples)} training examples")
                if self.store.count(EXTRACTION_PATTERNS) == 0:
                    patterns = self._read_seed_file(self.patterns_file)
                    self.store.bulk_add(EXTRACTION_PATTERNS, patterns)
                    logger.info(f"🌱 Seeded {len(patterns)} extraction patterns")
            return True
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"⚠️ Pattern registry seeding failed, continuing with built-in patterns only: {e}")
            return False

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def rebuild(self):
        """Recompile every stored pattern into a fresh priority-ordered snapshot."""
        with self.lock:
            records = [ExtractionPattern.from_dict(r) for r in self.store.all(EXTRACTION_PATTERNS)]
            # stable: equal priorities keep insertion order
            records.sort(key=lambda p: p.priority)

            snapshot: Dict[str, List[Pattern]] = {ft: [] for ft in FieldType.ALL}
            for record in records:
                if record.field_type not in snapshot:
                    logger.warning(f"Skipping pattern {record.id} with unknown field type {record.field_type!r}")
                    continue
                try:
                    snapshot[record.field_type].append(re.compile(record.pattern_regex, re.IGNORECASE))
                except re.error as e:
                    logger.warning(f"⚠️ Excluding malformed pattern {record.id} "
                                   f"({record.pattern_regex!r}): {e}")

            self._snapshot = {ft: tuple(patterns) for ft, patterns in snapshot.items()}

        logger.info(f"✅ Pattern registry loaded: {sum(len(p) for p in self._snapshot.values())} patterns")

    def get_patterns(self, field_type: str) -> Tuple[Pattern, ...]:
        """Compiled patterns for a field type, highest precedence first."""
        return self._snapshot[FieldType.validate(field_type)]

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def get_extraction_patterns(self, field_type: Optional[str] = None) -> List[ExtractionPattern]:
        if field_type is None:
            rows = self.store.all(EXTRACTION_PATTERNS)
        else:
            rows = self.store.where(EXTRACTION_PATTERNS, fieldType=FieldType.validate(field_type))
        patterns = [ExtractionPattern.from_dict(r) for r in rows]
        patterns.sort(key=lambda p: p.priority)
        return patterns

    def get_pattern(self, pattern_id: int) -> Optional[ExtractionPattern]:
        row = self.store.get(EXTRACTION_PATTERNS, pattern_id)
        return ExtractionPattern.from_dict(row) if row else None

    def has_pattern(self, field_type: str, pattern_regex: str) -> bool:
        return bool(self.store.where(EXTRACTION_PATTERNS, fieldType=field_type, patternRegex=pattern_regex))

    def add_pattern(
        self,
        field_type: str,
        pattern_regex: str,
        priority: int = 5,
        success_rate: float = 60,
        usage_count: int = 0
    ) -> ExtractionPattern:
        """Store a pattern. A malformed regex is stored but left out of the snapshot."""
        pattern = ExtractionPattern(
            id=None,
            field_type=FieldType.validate(field_type),
            pattern_regex=pattern_regex,
            priority=priority,
            success_rate=success_rate,
            usage_count=usage_count,
            timestamp=_now()
        )
        with self.lock:
            record = pattern.to_dict()
            record.pop('id')
            pattern.id = self.store.add(EXTRACTION_PATTERNS, record)
            self.rebuild()
        return pattern

    def update_pattern(self, pattern_id: int, **changes) -> bool:
        """Update priority, success_rate, usage_count or pattern_regex of a stored pattern."""
        wire_names = {
            'pattern_regex': 'patternRegex',
            'priority': 'priority',
            'success_rate': 'successRate',
            'usage_count': 'usageCount',
        }
        unknown = set(changes) - set(wire_names)
        if unknown:
            raise ValueError(f"Cannot update pattern fields: {sorted(unknown)}")

        update = {wire_names[k]: v for k, v in changes.items()}
        update['timestamp'] = _now()
        with self.lock:
            updated = self.store.update(EXTRACTION_PATTERNS, pattern_id, update)
            if updated:
                self.rebuild()
        return updated

    def delete_pattern(self, pattern_id: int) -> bool:
        with self.lock:
            deleted = self.store.delete(EXTRACTION_PATTERNS, pattern_id)
            if deleted:
                self.rebuild()
        return deleted

    def reset(self):
        """Drop all patterns and training examples, then reseed."""
        with self.lock:
            self.store.clear(EXTRACTION_PATTERNS)
            self.store.clear(TRAINING_EXAMPLES)
            self.seed_defaults()
            self.rebuild()
        logger.warning("⚠️ Pattern registry reset to defaults")
