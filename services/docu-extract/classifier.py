"""Upload validation: media type allow-lists, size ceiling, payload decoding.

Text uploads are decoded to UTF-8 strings; images and PDFs are base64
encoded so they can travel as inline data in the Gemini request.
"""

import base64
import logging

from models import Category, UploadedDocument

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

# Disjoint by construction: every allowed type maps to exactly one category
ALLOWED_MEDIA_TYPES: dict[Category, tuple[str, ...]] = {
    Category.PLAIN_TEXT: ("text/plain", "text/markdown"),
    Category.IMAGE: ("image/png", "image/jpeg", "image/jpg", "image/webp"),
    Category.PORTABLE_DOCUMENT: ("application/pdf",),
}

ACCEPTED_EXTENSIONS = ".txt,.md,.png,.jpg,.jpeg,.webp,.pdf"

_CATEGORY_BY_TYPE: dict[str, Category] = {
    media_type: category
    for category, media_types in ALLOWED_MEDIA_TYPES.items()
    for media_type in media_types
}


class FileValidationError(Exception):
    """Upload rejected before any remote call."""


class FileTooLarge(FileValidationError):
    """Upload exceeds the size ceiling."""


class UnsupportedFileType(FileValidationError):
    """Upload's media type is not in any allow-list."""


class FileReadError(FileValidationError):
    """Upload could not be read or decoded."""


def all_media_types() -> list[str]:
    return list(_CATEGORY_BY_TYPE)


def normalize_media_type(media_type: str | None) -> str:
    """Drop parameters such as ``; charset=utf-8`` and lowercase."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def classify(media_type: str, byte_size: int) -> Category:
    """Map a declared media type to its category, enforcing the size ceiling."""
    if byte_size > MAX_FILE_SIZE_BYTES:
        raise FileTooLarge(f"File is too large. Maximum size is {MAX_FILE_SIZE_MB}MB.")

    category = _CATEGORY_BY_TYPE.get(media_type)
    if category is None:
        raise UnsupportedFileType(
            "Unsupported file type. Please upload a text, image, or PDF file."
        )
    return category


def load_document(data: bytes, media_type: str | None, filename: str = "document") -> UploadedDocument:
    """Validate raw upload bytes and decode them into an UploadedDocument."""
    media_type = normalize_media_type(media_type)
    category = classify(media_type, len(data))

    if not data:
        raise FileReadError(f"Error reading {media_type} file.")

    if category is Category.PLAIN_TEXT:
        try:
            payload = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Could not decode %s upload as UTF-8: %s", media_type, e)
            raise FileReadError(f"Error reading {media_type} file.") from e
    else:
        payload = base64.b64encode(data).decode("ascii")

    # Log sizes and types only, never document content
    logger.info(
        "Loaded upload: type=%s category=%s size=%d bytes",
        media_type, category.value, len(data),
    )

    return UploadedDocument(
        filename=filename,
        media_type=media_type,
        byte_size=len(data),
        category=category,
        payload=payload,
    )
