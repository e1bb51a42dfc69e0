"""Tests for prompt composition and request shaping."""

import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from classifier import load_document
from config import settings
from formats import lookup
from gemini_client import to_generate_content_payload
from models import Category, InlineDataPart, OutputFormat, TextPart
from request_builder import build_request, compose_prompt, select_model


class TestComposePrompt:
    def test_instructions_appended_trimmed(self):
        prompt = compose_prompt("Summarize X", "  focus on dates  ")
        assert prompt == "Summarize X\n\nAdditionally, consider the following: focus on dates"

    def test_empty_instructions(self):
        assert compose_prompt("Summarize X", "") == "Summarize X"

    def test_whitespace_only_instructions(self):
        assert compose_prompt("Summarize X", " \n\t ") == "Summarize X"

    def test_none_instructions(self):
        assert compose_prompt("Summarize X") == "Summarize X"


class TestSelectModel:
    def test_binary_uses_multimodal_model(self):
        with patch.object(settings, "GEMINI_MULTIMODAL_MODEL", "vision-model"), \
                patch.object(settings, "GEMINI_TEXT_MODEL", "text-model"):
            assert select_model(Category.IMAGE) == "vision-model"
            assert select_model(Category.PORTABLE_DOCUMENT) == "vision-model"
            assert select_model(Category.PLAIN_TEXT) == "text-model"

    def test_defaults_route_to_same_model(self):
        assert select_model(Category.IMAGE) == select_model(Category.PLAIN_TEXT)


class TestBuildRequest:
    def test_text_single_segment(self, sample_text_bytes: bytes):
        doc = load_document(sample_text_bytes, "text/plain")
        request = build_request(doc, lookup(OutputFormat.SUMMARY), "focus on totals")

        assert len(request.parts) == 1
        part = request.parts[0]
        assert isinstance(part, TextPart)
        assert part.text == f"{request.prompt}\n\nDocument Content:\n{doc.payload}"
        assert request.prompt.endswith("Additionally, consider the following: focus on totals")
        assert request.requires_structured_output is False

    def test_image_binary_precedes_prompt(self, sample_png_bytes: bytes):
        doc = load_document(sample_png_bytes, "image/png")
        request = build_request(doc, lookup(OutputFormat.KEY_VALUE_PAIRS))

        assert len(request.parts) == 2
        inline, text = request.parts
        assert isinstance(inline, InlineDataPart)
        assert inline.mime_type == "image/png"
        assert inline.data == doc.payload
        assert isinstance(text, TextPart)
        assert text.text == lookup(OutputFormat.KEY_VALUE_PAIRS).prompt_base

    def test_pdf_structured(self, sample_pdf_bytes: bytes):
        doc = load_document(sample_pdf_bytes, "application/pdf")
        request = build_request(doc, lookup(OutputFormat.JSON_EXTRACT))

        assert request.category is Category.PORTABLE_DOCUMENT
        assert request.requires_structured_output is True
        assert request.parts[0].mime_type == "application/pdf"
        assert request.model == settings.GEMINI_MULTIMODAL_MODEL


class TestGenerateContentPayload:
    def test_structured_sets_json_mime_type(self, sample_pdf_bytes: bytes):
        doc = load_document(sample_pdf_bytes, "application/pdf")
        payload = to_generate_content_payload(build_request(doc, lookup(OutputFormat.JSON_EXTRACT)))

        assert payload["generationConfig"] == {"responseMimeType": "application/json"}
        parts = payload["contents"][0]["parts"]
        assert parts[0] == {"inlineData": {"mimeType": "application/pdf", "data": doc.payload}}
        assert "text" in parts[1]

    def test_free_text_unconstrained(self, sample_text_bytes: bytes):
        doc = load_document(sample_text_bytes, "text/plain")
        payload = to_generate_content_payload(build_request(doc, lookup(OutputFormat.SUMMARY)))

        assert payload["generationConfig"] == {}
        assert len(payload["contents"][0]["parts"]) == 1
