"""Tests for the text-extraction service client."""
from unittest.mock import Mock

import pytest
import requests

from refund.ingestion.text_extraction_client import TextExtractionClient, TextExtractionError

POST = "refund.ingestion.text_extraction_client.requests.post"
GET = "refund.ingestion.text_extraction_client.requests.get"


def response(json_body=None, text="", status_code=200):
    resp = Mock()
    resp.status_code = status_code
    resp.text = text
    resp.raise_for_status.return_value = None
    if json_body is None:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = json_body
    return resp


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "refund_form.pdf"
    path.write_bytes(b"%PDF-1.4 refund")
    return path


@pytest.fixture
def client():
    return TextExtractionClient(base_url="http://text-service:9000/")


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv("TEXT_EXTRACTION_URL", "http://ocr.internal:7000")
    assert TextExtractionClient().base_url == "http://ocr.internal:7000"


def test_default_base_url():
    assert TextExtractionClient().base_url == "http://localhost:8001"


def test_uploads_document_and_reads_json(client, document, monkeypatch):
    post = Mock(return_value=response({'text': "Refund Amount: SAR 379.50"}))
    monkeypatch.setattr(POST, post)

    assert client.extract_text(document) == "Refund Amount: SAR 379.50"

    args, kwargs = post.call_args
    assert args[0] == "http://text-service:9000/extract-text"
    assert kwargs['files']['file'] == ("refund_form.pdf", b"%PDF-1.4 refund", "application/pdf")
    assert kwargs['timeout'] == 120


def test_reads_yaml_response(client, document, monkeypatch):
    monkeypatch.setattr(POST, Mock(return_value=response(text="text: |\n  Name: MR. Ali Hassan\n")))

    assert client.extract_text(document, filename="scan.pdf") == "Name: MR. Ali Hassan\n"


def test_reads_nested_text(client, document, monkeypatch):
    body = {'text': {'raw': "IBAN: SA0380000000608010167519", 'normalized': "iban"}}
    monkeypatch.setattr(POST, Mock(return_value=response(body)))

    assert client.extract_text(document) == "IBAN: SA0380000000608010167519"


def test_response_without_text(client, document, monkeypatch):
    monkeypatch.setattr(POST, Mock(return_value=response({'pages': 2})))

    with pytest.raises(TextExtractionError):
        client.extract_text(document)


def test_timeout(client, document, monkeypatch):
    monkeypatch.setattr(POST, Mock(side_effect=requests.Timeout()))

    with pytest.raises(TimeoutError):
        client.extract_text(document)


def test_http_error(client, document, monkeypatch):
    resp = response({'text': ""}, status_code=503)
    resp.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
    monkeypatch.setattr(POST, Mock(return_value=resp))

    with pytest.raises(TextExtractionError):
        client.extract_text(document)


def test_missing_file(client, tmp_path):
    with pytest.raises(FileNotFoundError):
        client.extract_text(tmp_path / "missing.pdf")


def test_health_check(client, monkeypatch):
    monkeypatch.setattr(GET, Mock(return_value=response({'status': 'ok'})))
    assert client.health_check()

    monkeypatch.setattr(GET, Mock(side_effect=requests.ConnectionError()))
    assert not client.health_check()
