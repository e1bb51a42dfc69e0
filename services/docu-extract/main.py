"""FastAPI DocuExtract service: upload a document, get AI-extracted content back.

Uploads are processed in-memory only: no disk writes, and document content
is never logged.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from classifier import (
    ACCEPTED_EXTENSIONS,
    MAX_FILE_SIZE_MB,
    FileTooLarge,
    FileValidationError,
    UnsupportedFileType,
    all_media_types,
)
from config import APP_TITLE, get_api_key, settings
from formats import OUTPUT_FORMATS, UnknownFormat
from gemini_client import ConfigurationError, GeminiClient, RemoteError
from models import ExtractionResponse, FormatOption, OptionsResponse
from pipeline import SessionError, extract_document

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_gemini_client: GeminiClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared Gemini client on startup."""
    global _gemini_client

    if not get_api_key():
        # Not fatal: extraction requests are refused until the key is set
        logger.warning("API_KEY is not set. Extraction requests will be refused")
    logger.info(
        "Using Gemini at %s (text=%s, multimodal=%s)",
        settings.GEMINI_BASE_URL,
        settings.GEMINI_TEXT_MODEL,
        settings.GEMINI_MULTIMODAL_MODEL,
    )
    _gemini_client = GeminiClient()

    yield

    if _gemini_client is not None:
        await _gemini_client.aclose()
        _gemini_client = None


app = FastAPI(title=APP_TITLE, version="1.0.0", lifespan=lifespan)


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@app.get("/api/v1/options", response_model=OptionsResponse)
async def options():
    """Static choices for the upload form."""
    return OptionsResponse(
        title=APP_TITLE,
        formats=[
            FormatOption(
                id=spec.id,
                label=spec.label,
                requires_structured_output=spec.requires_structured_output,
            )
            for spec in OUTPUT_FORMATS
        ],
        accepted_media_types=all_media_types(),
        accepted_extensions=ACCEPTED_EXTENSIONS,
        max_file_size_mb=MAX_FILE_SIZE_MB,
    )


@app.post("/api/v1/extract", response_model=ExtractionResponse)
async def extract(
    file: UploadFile = File(...),
    output_format: str = Form(...),
    instructions: str = Form(""),
):
    """Extract content from an uploaded text, image or PDF document."""
    if _gemini_client is None:
        return _error(503, "Extraction client is not initialized")

    data = await file.read()

    # Log byte count and type only, never document content
    logger.info(
        "Processing extraction: format=%s type=%s size=%d bytes",
        output_format,
        file.content_type,
        len(data),
    )

    try:
        return await extract_document(
            _gemini_client,
            data,
            file.content_type,
            file.filename or "document",
            output_format,
            instructions,
        )
    except FileTooLarge as e:
        return _error(413, str(e))
    except UnsupportedFileType as e:
        return _error(415, str(e))
    except (FileValidationError, UnknownFormat, SessionError) as e:
        return _error(400, str(e))
    except ConfigurationError as e:
        return _error(503, str(e))
    except RemoteError as e:
        return _error(502, str(e))


@app.get("/health")
async def health():
    """Return service status and Gemini reachability."""
    configured = bool(get_api_key())
    base = {
        "status": "healthy",
        "credential_configured": configured,
    }

    if configured and _gemini_client is not None:
        base["gemini"] = await _gemini_client.health()

    return base


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
