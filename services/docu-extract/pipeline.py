"""Extraction orchestrator: validate upload, build request, call Gemini, normalize.

Everything except the Gemini call is synchronous. An ExtractionSession allows
one outstanding request at a time; its state machine rejects a second
submission while the first is awaiting its response.
"""

import logging
import time
from enum import Enum

from classifier import FileValidationError, load_document
from formats import UnknownFormat, lookup
from gemini_client import ConfigurationError, GeminiClient, RemoteError
from models import ExtractionOutcome, ExtractionResponse, OutputFormat, UploadedDocument
from normalizer import normalize_outcome
from presentation import copy_text, display_text
from request_builder import build_request

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    AWAITING_RESPONSE = "AWAITING_RESPONSE"
    DONE = "DONE"
    FAILED = "FAILED"


_SETTLED = {SessionState.IDLE, SessionState.DONE, SessionState.FAILED}

_ALLOWED: dict[SessionState, set[SessionState]] = {
    SessionState.IDLE: _SETTLED | {SessionState.VALIDATING, SessionState.AWAITING_RESPONSE},
    SessionState.VALIDATING: {SessionState.IDLE, SessionState.FAILED},
    SessionState.AWAITING_RESPONSE: {SessionState.DONE, SessionState.FAILED},
    SessionState.DONE: _SETTLED | {SessionState.VALIDATING, SessionState.AWAITING_RESPONSE},
    SessionState.FAILED: _SETTLED | {SessionState.VALIDATING, SessionState.AWAITING_RESPONSE},
}


class SessionError(Exception):
    """Base class for misuse of an ExtractionSession."""


class IllegalTransition(SessionError):
    """Operation not permitted in the session's current state."""


class NoDocumentSelected(SessionError):
    """Submit called before a document was loaded."""


class ExtractionSession:
    """Single-flight extraction state for one user."""

    def __init__(self, client: GeminiClient):
        self._client = client
        self._state = SessionState.IDLE
        self.document: UploadedDocument | None = None
        self.outcome: ExtractionOutcome | None = None
        self.error: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state in (SessionState.VALIDATING, SessionState.AWAITING_RESPONSE)

    def _transition(self, target: SessionState) -> None:
        if target not in _ALLOWED[self._state]:
            raise IllegalTransition(f"Cannot move from {self._state.value} to {target.value}")
        logger.debug("session: %s -> %s", self._state.value, target.value)
        self._state = target

    def _fail(self, message: str) -> None:
        self.error = message
        self._transition(SessionState.FAILED)

    def select_file(self, data: bytes, media_type: str | None, filename: str = "document") -> UploadedDocument:
        """Replace the held document. On validation failure the document is cleared."""
        self._transition(SessionState.VALIDATING)
        self.outcome = None
        self.error = None

        try:
            document = load_document(data, media_type, filename)
        except FileValidationError as e:
            self.document = None
            self._fail(str(e))
            raise

        self.document = document
        self._transition(SessionState.IDLE)
        return document

    async def submit(
        self,
        format_id: OutputFormat | str,
        user_instructions: str | None = None,
    ) -> ExtractionOutcome:
        """Run one extraction against the held document."""
        if self.busy:
            raise IllegalTransition(f"Cannot submit while {self._state.value}")

        if self.document is None:
            self._fail("Please select a file first.")
            raise NoDocumentSelected(self.error)

        try:
            format_spec = lookup(format_id)
        except UnknownFormat as e:
            self._fail(str(e))
            raise

        request = build_request(self.document, format_spec, user_instructions)
        self.outcome = None
        self.error = None
        self._transition(SessionState.AWAITING_RESPONSE)

        try:
            raw_text = await self._client.send(request)
        except (ConfigurationError, RemoteError) as e:
            logger.error("Extraction failed: %s", e)
            self._fail(str(e))
            raise
        except BaseException as e:
            # Includes cancellation: never leave the session awaiting
            logger.exception("Extraction aborted")
            self._fail(str(e) or type(e).__name__)
            raise

        self.outcome = normalize_outcome(format_spec, raw_text)
        self._transition(SessionState.DONE)
        return self.outcome

    def reset(self) -> None:
        self._transition(SessionState.IDLE)
        self.document = None
        self.outcome = None
        self.error = None


async def extract_document(
    client: GeminiClient,
    data: bytes,
    media_type: str | None,
    filename: str,
    format_id: OutputFormat | str,
    user_instructions: str | None = None,
) -> ExtractionResponse:
    """Run the full pipeline for one upload: classify -> build -> send -> normalize."""
    start = time.monotonic()

    session = ExtractionSession(client)
    document = session.select_file(data, media_type, filename)
    outcome = await session.submit(format_id, user_instructions)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "Extraction completed in %dms: format=%s content=%s",
        elapsed_ms, outcome.format.value, outcome.content.kind,
    )

    return ExtractionResponse(
        filename=document.filename,
        category=document.category,
        outcome=outcome,
        display_text=display_text(outcome),
        copy_text=copy_text(outcome),
        preview_data_url=document.preview_data_url,
        processing_time_ms=elapsed_ms,
    )
