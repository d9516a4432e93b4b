#!/usr/bin/env python3
"""
Learning Module - Pattern Registry and Correction Feedback v1.0.0

Exports:
- TrainingStore: Table storage for examples, patterns and corrections
- PatternRegistry: Priority-ordered compiled patterns per field type
- ExtractionPattern: Stored pattern record
- PatternLearner: Correction-driven learning and insights
- TrainingExample, CorrectionRecord: Learning records
"""

from .training_store import TrainingStore
from .pattern_registry import PatternRegistry, ExtractionPattern
from .pattern_learner import (
    PatternLearner,
    TrainingExample,
    CorrectionRecord,
    create_pattern_learner
)

__all__ = [
    'TrainingStore',
    'PatternRegistry',
    'ExtractionPattern',
    'PatternLearner',
    'TrainingExample',
    'CorrectionRecord',
    'create_pattern_learner'
]
