"""Turns raw model text into display-ready content.

Only structured requests are post-processed: an enclosing ```json fence is
stripped and the remainder parsed as JSON. A parse failure is returned as a
ParseFailure value, never raised.
"""

import json
import logging
import re

from models import (
    ExtractionOutcome,
    NormalizedContent,
    OutputFormatSpec,
    ParseFailure,
    PlainTextContent,
    StructuredContent,
)

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse JSON response from AI."

# Anchored at both ends: a fence in the middle of the text is not a wrapper
_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def strip_code_fence(text: str) -> str:
    """Trim, then unwrap a fence spanning the whole text. Other text is only trimmed."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match and match.group(1):
        return match.group(1).strip()
    return stripped


def normalize(raw_text: str, requires_structured_output: bool) -> NormalizedContent:
    if not requires_structured_output:
        return PlainTextContent(text=raw_text)

    json_str = strip_code_fence(raw_text)
    try:
        value = json.loads(json_str, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning("Failed to parse JSON response from model: %s", e)
        return ParseFailure(error=PARSE_FAILURE_MESSAGE, raw_response=json_str)

    return StructuredContent(value=value)


def normalize_outcome(format_spec: OutputFormatSpec, raw_text: str) -> ExtractionOutcome:
    """Normalize and keep the untouched response alongside for diagnostics."""
    return ExtractionOutcome(
        format=format_spec.id,
        content=normalize(raw_text, format_spec.requires_structured_output),
        raw_text=raw_text,
    )
