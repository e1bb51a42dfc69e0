"""Environment-based configuration for the DocuExtract service."""

from pydantic_settings import BaseSettings

APP_TITLE = "DocuExtract AI"


class Settings(BaseSettings):
    """DocuExtract settings, loaded from environment variables."""

    # Server
    PORT: int = 8092

    # Gemini credential (empty = extraction refused before any network call)
    API_KEY: str = ""

    # Gemini endpoint and models
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TEXT_MODEL: str = "gemini-2.5-flash"
    # Images and PDFs go through the multimodal model; same model for now
    GEMINI_MULTIMODAL_MODEL: str = "gemini-2.5-flash"

    # Gemini timeouts (no retry policy)
    GEMINI_TIMEOUT_SECONDS: int = 120
    GEMINI_CONNECT_TIMEOUT: int = 10

    model_config = {"env_prefix": "", "case_sensitive": True}


settings = Settings()


def get_api_key() -> str:
    """Read the API credential from the environment at call time (never cached)."""
    return Settings().API_KEY.strip()
