"""Async HTTP client for the Gemini generateContent API.

Uses httpx with configurable timeouts. There is deliberately no retry:
a failed call surfaces once as RemoteError.
"""

import logging
from typing import Any

import httpx

from config import get_api_key, settings
from models import ExtractionRequest, InlineDataPart

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


class ConfigurationError(Exception):
    """Service is not configured to make remote calls."""


class MissingCredential(ConfigurationError):
    """No API key in the environment."""


class RemoteError(Exception):
    """Gemini call failed (network, quota, malformed request, empty answer)."""


def to_generate_content_payload(request: ExtractionRequest) -> dict[str, Any]:
    """Serialize an ExtractionRequest into the generateContent JSON body."""
    parts: list[dict[str, Any]] = []
    for part in request.parts:
        if isinstance(part, InlineDataPart):
            parts.append({"inlineData": {"mimeType": part.mime_type, "data": part.data}})
        else:
            parts.append({"text": part.text})

    generation_config: dict[str, Any] = {}
    if request.requires_structured_output:
        generation_config["responseMimeType"] = JSON_MIME_TYPE

    return {
        "contents": [{"parts": parts}],
        "generationConfig": generation_config,
    }


def collect_response_text(data: dict[str, Any]) -> str | None:
    """Concatenate the text parts of the first candidate, untouched."""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None

    first = candidates[0]
    if not isinstance(first, dict):
        return None

    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None

    texts = []
    for part in parts:
        text = part.get("text") if isinstance(part, dict) else None
        if isinstance(text, str):
            texts.append(text)

    if not texts:
        return None
    return "".join(texts)


def _error_detail(resp: httpx.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message.strip():
                return message.strip()
    return f"HTTP {resp.status_code}"


class GeminiClient:
    """HTTP client for Gemini generateContent."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: int | None = None,
        connect_timeout: int | None = None,
    ):
        self._base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")

        read_timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT_SECONDS
        conn_timeout = connect_timeout if connect_timeout is not None else settings.GEMINI_CONNECT_TIMEOUT

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(
                connect=float(conn_timeout),
                read=float(read_timeout),
                write=30.0,
                pool=30.0,
            ),
        )

    async def aclose(self):
        await self._client.aclose()

    async def send(self, request: ExtractionRequest) -> str:
        """Send the request and return the response text verbatim.

        Raises MissingCredential before touching the network if no API key
        is configured, RemoteError for any failure of the call itself.
        """
        api_key = get_api_key()
        if not api_key:
            raise MissingCredential(
                "API Key not found. Please set the API_KEY environment variable."
            )

        payload = to_generate_content_payload(request)
        logger.info(
            "Calling Gemini: model=%s category=%s parts=%d structured=%s",
            request.model,
            request.category.value,
            len(request.parts),
            request.requires_structured_output,
        )

        try:
            resp = await self._client.post(
                f"/models/{request.model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": api_key},
            )
        except httpx.HTTPError as e:
            logger.error("Gemini transport error: %s", e)
            raise RemoteError(f"Gemini API request failed: {e}") from e

        if resp.status_code != 200:
            detail = _error_detail(resp)
            logger.error("Gemini error %d: %s", resp.status_code, detail)
            raise RemoteError(f"Gemini API request failed: {detail}")

        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteError(f"Gemini API request failed: invalid response body: {e}") from e

        text = collect_response_text(data) if isinstance(data, dict) else None
        if text is None:
            logger.error("Gemini response had no text content")
            raise RemoteError("Gemini API request failed: response did not contain text content.")

        logger.info("Gemini response received (%d chars)", len(text))
        return text

    async def health(self) -> dict:
        """Check that the configured text model is reachable. Never raises."""
        api_key = get_api_key()
        if not api_key:
            return {"status": "unconfigured"}

        try:
            resp = await self._client.get(
                f"/models/{settings.GEMINI_TEXT_MODEL}",
                headers={"x-goog-api-key": api_key},
                timeout=10.0,
            )
        except httpx.HTTPError as e:
            logger.warning("Gemini health check failed: %s", e)
            return {"status": "unreachable", "error": str(e)}

        if resp.status_code != 200:
            return {"status": "error", "error": _error_detail(resp)}
        return {"status": "reachable", "model": settings.GEMINI_TEXT_MODEL}
