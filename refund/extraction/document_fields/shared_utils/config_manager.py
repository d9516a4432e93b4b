"""
Configuration Manager - Tuning constants for positional extraction and learning
"""
import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'REFUND_EXTRACTION_CONFIG'


@dataclass
class ExtractionConfig:
    """Heuristic constants. Values are behaviour-defining; override only through a config file."""

    # Path configuration
    config_path: str = ""

    # Section division
    section_count: int = 10
    customer_info_scan_limit: float = 40.0
    signature_scan_start: float = 50.0

    # Band boundaries (percent of document)
    top_band_limit: float = 30.0
    middle_band_start: float = 30.0
    middle_band_end: float = 70.0
    document_fallback_position: float = 50.0

    # Band base confidences and per-pattern-index decay
    customer_info_base_confidence: float = 95
    customer_info_decay: float = 5
    top_base_confidence: float = 90
    top_decay: float = 5
    middle_base_confidence: float = 80
    middle_decay: float = 5
    any_section_base_confidence: float = 75
    any_section_decay: float = 7
    signature_base_confidence: float = 30
    signature_decay: float = 5
    document_base_confidence: float = 45
    document_decay: float = 5

    # Customer name
    name_title_customer_info_confidence: float = 98
    name_title_top_confidence: float = 95
    name_customer_info_bonus: float = 15
    name_top_bonus: float = 10
    name_signature_penalty: float = 50
    name_signature_cap: float = 40
    name_length_bonus: float = 5
    name_shape_bonus: float = 5
    name_compound_bonus: float = 8
    name_fallback_customer_info_confidence: float = 80
    name_fallback_top_confidence: float = 70
    name_fallback_confidence: float = 60

    # Refund amount
    amount_refund_context_bonus: float = 5
    amount_format_bonus: float = 5
    amount_fallback_keyword_confidence: float = 60
    amount_fallback_confidence: float = 40

    # IBAN
    iban_context_bonus: float = 5
    iban_format_bonus: float = 5
    iban_fallback_confidence: float = 60

    # Service number
    service_context_bonus: float = 5
    service_format_bonus: float = 5
    service_customer_info_bonus: float = 10
    service_fallback_customer_info_confidence: float = 85
    service_fallback_confidence: float = 70

    # Layout
    layout_boost_threshold: float = 70
    layout_boost: float = 5

    # Learning loop
    learning_rate: float = 0.1
    learned_pattern_priority: int = 5
    learned_pattern_success_rate: float = 60
    correction_example_confidence: float = 90
    insights_history_limit: int = 1000
    similar_pattern_threshold: float = 0.7
    similar_pattern_limit: int = 5

    def __post_init__(self):
        """Load overrides from the config file, if one is configured."""
        if not self.config_path:
            self.config_path = os.getenv(CONFIG_ENV_VAR, "")
        if self.config_path:
            self.load_config()

    def load_config(self):
        """Load overrides from JSON, or YAML when the suffix says so."""
        path = Path(self.config_path)
        if not path.exists():
            logger.warning(f"⚠️ Config file not found, using defaults: {path}")
            return

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix.lower() in ('.yaml', '.yml'):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config from {path}: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Config file {path} does not contain a mapping, ignoring it")
            return

        known = {f.name for f in fields(self)}
        for key, value in data.items():
            if key in known and key != 'config_path':
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        logger.info(f"✅ Extraction config loaded: {path}")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ConfigManager:
    """Holds the active ExtractionConfig and hands it to extractors."""

    def __init__(self, config_path: Optional[str] = None, config: Optional[ExtractionConfig] = None):
        if config is None:
            config = ExtractionConfig(config_path=config_path) if config_path else ExtractionConfig()
        self.config = config
        self.config_path = config.config_path

    def get(self, key: str):
        return getattr(self.config, key)
