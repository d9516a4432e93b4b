#!/usr/bin/env python3
"""
Pattern Learner - Correction-driven learning for the pattern registry v1.0.0

Learns from user corrections:
- Appends every correction to the correction history
- Stores the corrected value as a training example
- Synthesizes a new pattern from the text preceding the value in its context line
- Moves success rates of patterns that would have matched the original value
  towards 100 (confirmed) or 0 (overwritten) with an exponential moving average

Also serves the read models used for feedback: insights, similar examples,
training examples and correction history.
"""

import re
import difflib
import logging
from datetime import datetime
from dataclasses import dataclass
from typing import Dict, Any, Optional, List

import pandas as pd

from .training_store import TrainingStore, TRAINING_EXAMPLES, EXTRACTION_PATTERNS, CORRECTION_HISTORY
from .pattern_registry import PatternRegistry, ExtractionPattern
from ..extraction.document_fields.models.extraction_models import FieldType
from ..extraction.document_fields.shared_utils.config_manager import ExtractionConfig

logger = logging.getLogger(__name__)

# Capture shape appended to a learned prefix, per field type
FIELD_SHAPES = {
    FieldType.CUSTOMER_NAME: r"\s*([A-Za-z .'\-]+)",
    FieldType.REFUND_AMOUNT: r"\s*(?:SAR|SR|ر.س.|﷼)?\s*([0-9,.]+)",
    FieldType.IBAN_NUMBER: r"\s*(SA\d{22})",
    FieldType.CUSTOMER_SERVICE_NUMBER: r"\s*(FTTH\d+)",
}


@dataclass
class TrainingExample:
    """A confirmed field value, optionally with the text it came from."""
    id: Optional[int]
    field_type: str
    pattern: str
    value: str
    confidence: float
    timestamp: str
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fieldType': self.field_type,
            'pattern': self.pattern,
            'value': self.value,
            'context': self.context,
            'confidence': self.confidence,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrainingExample':
        return cls(
            id=data.get('id'),
            field_type=data['fieldType'],
            pattern=data.get('pattern', ''),
            value=data.get('value', ''),
            confidence=float(data.get('confidence', 0)),
            timestamp=data.get('timestamp', ''),
            context=data.get('context')
        )


@dataclass
class CorrectionRecord:
    """Append-only record of one user correction."""
    id: Optional[int]
    field_type: str
    original_value: str
    corrected_value: str
    document_id: str
    confidence: float
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fieldType': self.field_type,
            'originalValue': self.original_value,
            'correctedValue': self.corrected_value,
            'documentId': self.document_id,
            'confidence': self.confidence,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CorrectionRecord':
        return cls(
            id=data.get('id'),
            field_type=data['fieldType'],
            original_value=data.get('originalValue', ''),
            corrected_value=data.get('correctedValue', ''),
            document_id=data.get('documentId', ''),
            confidence=float(data.get('confidence', 100)),
            timestamp=data.get('timestamp', '')
        )


class PatternLearner:
    """
    Feeds corrections back into the pattern registry.

    All writes go through the registry lock and finish with a snapshot
    rebuild, so the next extraction observes the complete update.
    """

    def __init__(self, registry: PatternRegistry, config: Optional[ExtractionConfig] = None):
        self.registry = registry
        self.store = registry.store
        self.config = config or ExtractionConfig()
        logger.info(f"✅ PatternLearner initialized (learning rate: {self.config.learning_rate})")

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def record_correction(
        self,
        field_type: str,
        original_value: str,
        corrected_value: str,
        document_id: str,
        context: Optional[str] = None
    ) -> CorrectionRecord:
        """Log a correction, learn from its context and update success rates."""
        FieldType.validate(field_type)
        record = CorrectionRecord(
            id=None,
            field_type=field_type,
            original_value=original_value,
            corrected_value=corrected_value,
            document_id=document_id,
            confidence=100,
            timestamp=datetime.now().isoformat()
        )

        with self.registry.lock:
            payload = record.to_dict()
            payload.pop('id')
            record.id = self.store.add(CORRECTION_HISTORY, payload)

            self.add_training_example(
                field_type=field_type,
                pattern=field_type,
                value=corrected_value,
                confidence=self.config.correction_example_confidence,
                context=context
            )
            self._update_success_rates(field_type, original_value, corrected_value)
            self.registry.rebuild()

        logger.info(f"📝 Correction recorded for {field_type} on document {document_id}")
        return record

    def add_training_example(
        self,
        field_type: str,
        pattern: str,
        value: str,
        confidence: float,
        context: Optional[str] = None
    ) -> TrainingExample:
        """Store an example; when it carries context, try to learn a pattern from it."""
        example = TrainingExample(
            id=None,
            field_type=FieldType.validate(field_type),
            pattern=pattern,
            value=value,
            confidence=confidence,
            timestamp=datetime.now().isoformat(),
            context=context
        )
        with self.registry.lock:
            payload = example.to_dict()
            payload.pop('id')
            example.id = self.store.add(TRAINING_EXAMPLES, payload)
            if context:
                self.learn_new_pattern(field_type, context, value)
        return example

    def learn_new_pattern(self, field_type: str, context: str, correct_value: str) -> Optional[ExtractionPattern]:
        """
        Synthesize "<escaped prefix>\\s*(<field shape>)" from the first context line
        containing the value. Returns the new pattern, or None when nothing was added.
        """
        shape = FIELD_SHAPES[FieldType.validate(field_type)]
        if not context or not correct_value:
            return None

        needle = re.compile(re.escape(correct_value), re.IGNORECASE)
        for line in context.split('\n'):
            found = needle.search(line)
            if found is None:
                continue

            prefix = line[:found.start()].strip()
            if not prefix:
                return None

            pattern_regex = re.escape(prefix) + shape
            with self.registry.lock:
                if self.registry.has_pattern(field_type, pattern_regex):
                    logger.debug(f"Pattern already known for {field_type}: {pattern_regex!r}")
                    return None
                learned = self.registry.add_pattern(
                    field_type=field_type,
                    pattern_regex=pattern_regex,
                    priority=self.config.learned_pattern_priority,
                    success_rate=self.config.learned_pattern_success_rate,
                    usage_count=1
                )
            logger.info(f"🎓 Learned new {field_type} pattern: {pattern_regex!r}")
            return learned

        return None

    def _update_success_rates(self, field_type: str, original_value: str, corrected_value: str):
        """EMA update for every pattern of field_type that matches the original value."""
        alpha = self.config.learning_rate
        outcome = 100.0 if original_value == corrected_value else 0.0

        for pattern in self.registry.get_extraction_patterns(field_type):
            try:
                compiled = re.compile(pattern.pattern_regex, re.IGNORECASE)
            except re.error as e:
                logger.warning(f"⚠️ Skipping malformed pattern {pattern.id} during success-rate update: {e}")
                continue

            if not compiled.search(original_value or ''):
                continue

            new_rate = pattern.success_rate * (1 - alpha) + outcome * alpha
            self.store.update(EXTRACTION_PATTERNS, pattern.id, {
                'successRate': max(0.0, min(100.0, new_rate)),
                'usageCount': pattern.usage_count + 1,
                'timestamp': datetime.now().isoformat()
            })
            logger.debug(f"Pattern {pattern.id} success rate {pattern.success_rate:.1f} -> {new_rate:.1f}")

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def get_training_examples(self, field_type: Optional[str] = None) -> List[TrainingExample]:
        if field_type is None:
            rows = self.store.all(TRAINING_EXAMPLES)
        else:
            rows = self.store.where(TRAINING_EXAMPLES, fieldType=FieldType.validate(field_type))
        return [TrainingExample.from_dict(r) for r in rows]

    def get_extraction_patterns(self, field_type: Optional[str] = None) -> List[ExtractionPattern]:
        return self.registry.get_extraction_patterns(field_type)

    def get_correction_history(self, limit: Optional[int] = None) -> List[CorrectionRecord]:
        """Corrections newest first."""
        rows = self.store.all(CORRECTION_HISTORY)
        # ids grow monotonically, so they break timestamp ties
        rows.sort(key=lambda r: (r.get('timestamp', ''), r['id']), reverse=True)
        if limit is not None:
            rows = rows[:limit]
        return [CorrectionRecord.from_dict(r) for r in rows]

    def find_similar_patterns(self, text: str, field_type: Optional[str] = None) -> List[TrainingExample]:
        """Fuzzy lookup of training examples by their pattern, value and context."""
        if not text:
            return []
        query = text.lower()

        scored = []
        for example in self.get_training_examples(field_type):
            best = 0.0
            for candidate in (example.pattern, example.value, example.context):
                if not candidate:
                    continue
                candidate = candidate.lower()
                if query in candidate:
                    best = 1.0
                    break
                best = max(best, difflib.SequenceMatcher(None, query, candidate).ratio())
            if best >= self.config.similar_pattern_threshold:
                scored.append((best, example))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [example for _, example in scored[:self.config.similar_pattern_limit]]

    def improve_confidence(self, example_id: int, increment: float) -> bool:
        """Raise a training example's confidence, capped at 100."""
        with self.registry.lock:
            row = self.store.get(TRAINING_EXAMPLES, example_id)
            if row is None:
                return False
            return self.store.update(TRAINING_EXAMPLES, example_id, {
                'confidence': min(100.0, float(row.get('confidence', 0)) + increment),
                'timestamp': datetime.now().isoformat()
            })

    def clear_all_training_data(self):
        """Empty all three tables and reseed the defaults."""
        with self.registry.lock:
            self.store.clear(CORRECTION_HISTORY)
            self.registry.reset()
        logger.warning("⚠️ All training data cleared")

    def generate_insights(self) -> Dict[str, Any]:
        """
        Aggregate statistics over recent corrections.

        improvementRate compares the share of "no change" corrections in the
        newer half of the history against the older half, in percentage points.
        """
        corrections = self.get_correction_history(self.config.insights_history_limit)
        field_corrections = {field_type: 0 for field_type in FieldType.ALL}
        improvement_rate = 0.0

        if corrections:
            df = pd.DataFrame([c.to_dict() for c in corrections])
            counts = df['fieldType'].value_counts()
            for field_type in FieldType.ALL:
                field_corrections[field_type] = int(counts.get(field_type, 0))

            df['unchanged'] = df['originalValue'] == df['correctedValue']
            midpoint = len(df) // 2
            newer = df.iloc[:midpoint]
            older = df.iloc[midpoint:]
            newer_rate = float(newer['unchanged'].mean()) if len(newer) else 0.0
            older_rate = float(older['unchanged'].mean()) if len(older) else 0.0
            improvement_rate = (newer_rate - older_rate) * 100

        # sorted() is stable, so equal counts keep field-type order
        problem_fields = [
            {'fieldType': field_type, 'count': count}
            for field_type, count in sorted(field_corrections.items(), key=lambda item: item[1], reverse=True)
            if count > 0
        ]

        patterns = self.registry.get_extraction_patterns()
        patterns.sort(key=lambda p: (p.timestamp, p.id or 0), reverse=True)

        return {
            'totalCorrections': len(corrections),
            'fieldCorrections': field_corrections,
            'improvementRate': improvement_rate,
            'problemFields': problem_fields,
            'recentPatterns': [p.to_dict() for p in patterns[:5]]
        }


def create_pattern_learner(store_path: Optional[str] = None,
                           config: Optional[ExtractionConfig] = None) -> PatternLearner:
    """Build a learner with its own registry and store."""
    store = TrainingStore(store_path) if store_path else TrainingStore.from_env()
    return PatternLearner(PatternRegistry(store), config)
