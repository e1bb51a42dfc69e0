"""Shared test fixtures for DocuExtract tests."""

import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setenv("API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture
def sample_text_bytes() -> bytes:
    return "Invoice 2024-17\nTotal: 120.00 EUR\nDue: 2024-05-01\n".encode("utf-8")


@pytest.fixture
def sample_png_bytes() -> bytes:
    """PNG signature plus padding; content is never decoded."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


@pytest.fixture
def mock_json_response() -> str:
    return json.dumps({"invoice_number": "2024-17", "total": 120.0, "currency": "EUR"})


@pytest.fixture
def mock_fenced_response() -> str:
    """Model response wrapped in a markdown code fence."""
    return '```json\n{"invoice_number": "2024-17", "total": 120.0}\n```'


@pytest.fixture
def mock_preamble_response() -> str:
    """Model response with text before the JSON."""
    return 'Here is the extracted data:\n\n{"invoice_number": "2024-17"}'


def gemini_body(*texts: str) -> dict:
    """A generateContent response body with one candidate."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": t} for t in texts]},
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def gemini_client():
    from gemini_client import GeminiClient

    client = GeminiClient(
        base_url="https://fake-gemini.test/v1beta",
        timeout=5,
        connect_timeout=2,
    )
    yield client
    asyncio.run(client.aclose())
