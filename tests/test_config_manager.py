"""Tests for loading extraction config overrides."""
import json

from refund.extraction.document_fields.shared_utils.config_manager import ConfigManager, ExtractionConfig
from refund.extraction.refund_document_extractor import RefundDocumentExtractor


def test_defaults():
    config = ExtractionConfig()

    assert config.section_count == 10
    assert config.customer_info_base_confidence == 95
    assert config.any_section_decay == 7
    assert config.learning_rate == 0.1
    assert config.config_path == ""


def test_json_overrides(tmp_path):
    path = tmp_path / "extraction.json"
    path.write_text(json.dumps({'section_count': 5, 'layout_boost': 10}), encoding='utf-8')

    config = ExtractionConfig(config_path=str(path))

    assert config.section_count == 5
    assert config.layout_boost == 10
    assert config.top_base_confidence == 90


def test_yaml_overrides(tmp_path):
    path = tmp_path / "extraction.yaml"
    path.write_text("learning_rate: 0.25\nsignature_scan_start: 60\n", encoding='utf-8')

    config = ExtractionConfig(config_path=str(path))

    assert config.learning_rate == 0.25
    assert config.signature_scan_start == 60


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "extraction.json"
    path.write_text(json.dumps({'max_sections': 3, 'config_path': 'elsewhere.json'}), encoding='utf-8')

    config = ExtractionConfig(config_path=str(path))

    assert not hasattr(config, 'max_sections')
    assert config.config_path == str(path)
    assert "max_sections" in caplog.text


def test_missing_file_keeps_defaults(tmp_path, caplog):
    config = ExtractionConfig(config_path=str(tmp_path / "absent.json"))

    assert config.section_count == 10
    assert "not found" in caplog.text


def test_non_mapping_file_is_ignored(tmp_path):
    path = tmp_path / "extraction.json"
    path.write_text("[1, 2, 3]", encoding='utf-8')

    assert ExtractionConfig(config_path=str(path)).section_count == 10


def test_environment_variable(tmp_path, monkeypatch):
    path = tmp_path / "extraction.yml"
    path.write_text("section_count: 4\n", encoding='utf-8')
    monkeypatch.setenv("REFUND_EXTRACTION_CONFIG", str(path))

    assert ConfigManager().get('section_count') == 4


def test_extractor_uses_configured_section_count(tmp_path, registry):
    path = tmp_path / "extraction.json"
    path.write_text(json.dumps({'section_count': 4}), encoding='utf-8')

    extractor = RefundDocumentExtractor(config_path=str(path), pattern_registry=registry)
    data = extractor.process_document_text("Customer Name: Omar Al Harbi", "short.txt")

    assert data.metadata['sectionCount'] == 4
    assert data.customer_name.position == 87.5
