"""Builds the multi-part Gemini request for an uploaded document."""

from config import settings
from models import (
    Category,
    ContentPart,
    ExtractionRequest,
    InlineDataPart,
    OutputFormatSpec,
    TextPart,
    UploadedDocument,
)
from prompts import ADDITIONAL_INSTRUCTIONS_PREFIX, DOCUMENT_CONTENT_LABEL


def compose_prompt(prompt_base: str, user_instructions: str | None = None) -> str:
    """Base prompt first, then the user's instructions as an optional amendment."""
    extra = (user_instructions or "").strip()
    if not extra:
        return prompt_base
    return f"{prompt_base}\n\n{ADDITIONAL_INSTRUCTIONS_PREFIX}{extra}"


def select_model(category: Category) -> str:
    is_binary_upload = category.is_binary
    return settings.GEMINI_MULTIMODAL_MODEL if is_binary_upload else settings.GEMINI_TEXT_MODEL


def build_parts(document: UploadedDocument, prompt: str) -> tuple[ContentPart, ...]:
    if document.category.is_binary:
        # Inline data must precede the prompt
        return (
            InlineDataPart(mime_type=document.media_type, data=document.payload),
            TextPart(text=prompt),
        )
    return (TextPart(text=f"{prompt}\n\n{DOCUMENT_CONTENT_LABEL}\n{document.payload}"),)


def build_request(
    document: UploadedDocument,
    format_spec: OutputFormatSpec,
    user_instructions: str | None = None,
) -> ExtractionRequest:
    prompt = compose_prompt(format_spec.prompt_base, user_instructions)
    return ExtractionRequest(
        model=select_model(document.category),
        category=document.category,
        media_type=document.media_type,
        prompt=prompt,
        parts=build_parts(document, prompt),
        requires_structured_output=format_spec.requires_structured_output,
    )
