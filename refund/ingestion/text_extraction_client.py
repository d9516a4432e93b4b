#!/usr/bin/env python3
"""
Text Extraction Client - Document-to-text via external microservice v1.0.0

Sends Word/PDF/image refund documents to the text-extraction service and
returns the raw text the extraction core works on. The service may answer
in JSON or YAML; both carry the text under a "text" key.

Usage:
    from refund.ingestion.text_extraction_client import get_text_extraction_client

    client = get_text_extraction_client()
    text = client.extract_text("refund_form.pdf")
"""

import os
import logging
import mimetypes
from pathlib import Path
from typing import Dict, Any, Optional, Union

import requests
import yaml

logger = logging.getLogger(__name__)

URL_ENV_VAR = 'TEXT_EXTRACTION_URL'
DEFAULT_URL = 'http://localhost:8001'


class TextExtractionError(RuntimeError):
    """The text-extraction service failed or returned an unusable response."""


class TextExtractionClient:
    """HTTP client for the text-extraction service."""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 120):
        if base_url is None:
            base_url = os.getenv(URL_ENV_VAR) or DEFAULT_URL

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.extract_endpoint = "/extract-text"
        self.health_endpoint = "/health"

        logger.info(f"✅ TextExtractionClient initialized: {self.base_url}")

    def health_check(self) -> bool:
        """Check if the text-extraction service is healthy."""
        try:
            resp = requests.get(f"{self.base_url}{self.health_endpoint}", timeout=10)
            return resp.status_code == 200
        except requests.RequestException as e:
            logger.warning(f"Text extraction health check failed: {e}")
            return False

    def extract_text(self, document: Union[str, Path], filename: Optional[str] = None) -> str:
        """
        Send a document file to the service and return its text.

        Args:
            document: Path of the document to upload
            filename: Name reported to the service (defaults to the file name)

        Returns:
            The extracted text
        """
        path = Path(document)
        with open(path, 'rb') as f:
            payload = f.read()
        filename = filename or path.name

        files = {'file': (filename, payload, self._get_mime_type(filename))}

        try:
            logger.info(f"📤 Sending document for text extraction: {filename} ({len(payload)} bytes)")
            resp = requests.post(
                f"{self.base_url}{self.extract_endpoint}",
                files=files,
                timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.Timeout:
            logger.error("Text extraction request timed out")
            raise TimeoutError("Text extraction service timeout")
        except requests.RequestException as e:
            logger.error(f"Text extraction request failed: {e}")
            raise TextExtractionError(f"Text extraction service error: {e}") from e

        text = self._parse_response(resp)
        logger.info(f"✅ Text extracted from {filename}: {len(text.splitlines())} lines")
        return text

    def _parse_response(self, resp: requests.Response) -> str:
        """Accept a JSON body, falling back to YAML."""
        try:
            result: Any = resp.json()
        except ValueError:
            try:
                result = yaml.safe_load(resp.text)
            except yaml.YAMLError as e:
                raise TextExtractionError(
                    f"Text extraction service returned invalid response format "
                    f"(status {resp.status_code}): {str(e)[:200]}"
                ) from e

        if isinstance(result, str):
            return result
        if isinstance(result, dict):
            text = result.get('text')
            if isinstance(text, dict):
                text = text.get('raw') or text.get('normalized')
            if isinstance(text, str):
                return text
        raise TextExtractionError("Text extraction response has no 'text' field")

    @staticmethod
    def _get_mime_type(filename: str) -> str:
        mime_type, _ = mimetypes.guess_type(filename)
        return mime_type or 'application/octet-stream'


# Singleton instance
_text_client_instance = None


def get_text_extraction_client() -> TextExtractionClient:
    """Get singleton TextExtractionClient instance."""
    global _text_client_instance
    if _text_client_instance is None:
        _text_client_instance = TextExtractionClient()
    return _text_client_instance
