"""Pydantic models shared across the extraction pipeline and the HTTP API."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class OutputFormat(str, Enum):
    SUMMARY = "SUMMARY"
    JSON_EXTRACT = "JSON_EXTRACT"
    KEY_VALUE_PAIRS = "KEY_VALUE_PAIRS"


class Category(str, Enum):
    PLAIN_TEXT = "PLAIN_TEXT"
    IMAGE = "IMAGE"
    PORTABLE_DOCUMENT = "PORTABLE_DOCUMENT"

    @property
    def is_binary(self) -> bool:
        return self is not Category.PLAIN_TEXT


class OutputFormatSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: OutputFormat
    label: str
    prompt_base: str
    requires_structured_output: bool


class UploadedDocument(BaseModel):
    """A validated upload. ``payload`` is UTF-8 text for PLAIN_TEXT, base64 otherwise."""

    model_config = ConfigDict(frozen=True)

    filename: str
    media_type: str
    byte_size: int
    category: Category
    payload: str

    @property
    def preview_data_url(self) -> str | None:
        if self.category is not Category.IMAGE:
            return None
        return f"data:{self.media_type};base64,{self.payload}"


class InlineDataPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: str


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


ContentPart = Union[InlineDataPart, TextPart]


class ExtractionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str
    category: Category
    media_type: str
    prompt: str
    parts: tuple[ContentPart, ...]
    requires_structured_output: bool


class PlainTextContent(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class StructuredContent(BaseModel):
    kind: Literal["structured"] = "structured"
    value: Any


class ParseFailure(BaseModel):
    kind: Literal["parse_failure"] = "parse_failure"
    error: str
    raw_response: str


NormalizedContent = Annotated[
    Union[PlainTextContent, StructuredContent, ParseFailure],
    Field(discriminator="kind"),
]


class ExtractionOutcome(BaseModel):
    format: OutputFormat
    content: NormalizedContent
    raw_text: str | None = None


class FormatOption(BaseModel):
    id: OutputFormat
    label: str
    requires_structured_output: bool


class OptionsResponse(BaseModel):
    title: str
    formats: list[FormatOption]
    accepted_media_types: list[str]
    accepted_extensions: str
    max_file_size_mb: int


class ExtractionResponse(BaseModel):
    filename: str
    category: Category
    outcome: ExtractionOutcome
    display_text: str
    copy_text: str
    preview_data_url: str | None = None
    processing_time_ms: int
