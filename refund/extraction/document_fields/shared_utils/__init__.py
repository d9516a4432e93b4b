"""
Shared Utilities Package
"""
from .config_manager import ExtractionConfig, ConfigManager
from .pattern_matcher import PatternMatcher
from .confidence_scorer import ConfidenceScorer

__all__ = [
    'ExtractionConfig',
    'ConfigManager',
    'PatternMatcher',
    'ConfidenceScorer'
]
