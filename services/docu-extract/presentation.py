"""Display and clipboard text for an ExtractionOutcome."""

import json
from typing import Any

from models import ExtractionOutcome, ParseFailure, PlainTextContent, StructuredContent


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def display_text(outcome: ExtractionOutcome) -> str:
    """Text shown in the results pane."""
    content = outcome.content
    if isinstance(content, StructuredContent):
        return pretty_json(content.value)
    if isinstance(content, ParseFailure):
        # Show what the model said instead of the envelope itself
        return content.raw_response
    return content.text


def copy_text(outcome: ExtractionOutcome) -> str:
    """Clipboard text: raw response, else the failure's raw text, else the content."""
    if outcome.raw_text:
        return outcome.raw_text

    content = outcome.content
    if isinstance(content, ParseFailure):
        return content.raw_response
    if isinstance(content, PlainTextContent):
        return content.text
    return pretty_json(content.value)
