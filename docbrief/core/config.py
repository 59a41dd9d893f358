import json
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import List

# utils.logger does not import settings, so no circular dependency
from docbrief.utils.logger import logger, set_log_level

PLAIN_TEXT_TYPE = "text/plain"
PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    # App
    APP_NAME: str = "DocBrief API"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # Google Gemini (summarization)
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_TOP_K: int = 40
    GEMINI_TOP_P: float = 0.95
    SUMMARY_MAX_TOKENS: int = 1200
    CHUNK_SUMMARY_MAX_TOKENS: int = 1000
    FINAL_SUMMARY_MAX_TOKENS: int = 1500

    # Translation backend (OpenAI-compatible chat completions)
    TRANSLATION_API_KEY: str = ""
    TRANSLATION_API_URL: str = "https://api.two.ai/v2/chat/completions"
    TRANSLATION_MODEL: str = "sutra-v2"
    TRANSLATION_TEMPERATURE: float = 0.3
    TRANSLATION_MAX_TOKENS: int = 1000

    # Document limits
    MAX_FILE_SIZE: int = 4 * 1024 * 1024  # 4MB
    MIN_TEXT_LENGTH: int = 10
    LARGE_TEXT_THRESHOLD: int = 50000
    MAX_CHUNK_SIZE: int = 30000
    CHUNK_DELAY_SECONDS: float = 0.1

    # Timeouts (seconds)
    REMOTE_TIMEOUT_SECONDS: float = 60.0
    REQUEST_TIMEOUT_SECONDS: float = 240.0

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=[],
        description="Allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Return CORS origins as a list.
        Falls back to ["*"] if none provided.
        """
        if not self.CORS_ORIGINS:
            return ["*"]
        return self.CORS_ORIGINS

    @property
    def supported_content_types(self) -> List[str]:
        return [PLAIN_TEXT_TYPE, PDF_TYPE, DOCX_TYPE]

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from JSON string to list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                logger.warning(f"Failed to parse CORS_ORIGINS as JSON: {v}")
                return []
        return v

    @field_validator('GEMINI_TEMPERATURE', 'TRANSLATION_TEMPERATURE')
    @classmethod
    def validate_temperature(cls, v):
        """Validate temperature is between 0 and 2"""
        if not 0 <= v <= 2:
            raise ValueError("temperature must be between 0 and 2")
        return v

    @field_validator('GEMINI_TOP_P')
    @classmethod
    def validate_top_p(cls, v):
        if not 0 < v <= 1:
            raise ValueError("GEMINI_TOP_P must be in (0, 1]")
        return v

    @field_validator('SUMMARY_MAX_TOKENS', 'CHUNK_SUMMARY_MAX_TOKENS', 'FINAL_SUMMARY_MAX_TOKENS')
    @classmethod
    def validate_max_tokens(cls, v):
        """Validate max tokens is reasonable"""
        if v < 1 or v > 8192:
            logger.warning(f"Max output tokens {v} is outside typical range (1-8192)")
        return v

    @field_validator('MAX_FILE_SIZE', 'MIN_TEXT_LENGTH', 'LARGE_TEXT_THRESHOLD', 'MAX_CHUNK_SIZE')
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("size limits must be positive")
        return v

    def is_gemini_configured(self) -> bool:
        """Check if Gemini is properly configured"""
        return bool(self.GEMINI_API_KEY)

    def get_gemini_config_status(self) -> str:
        """Get human-readable Gemini configuration status"""
        if not self.is_gemini_configured():
            return "❌ Not configured - GEMINI_API_KEY missing"

        return f"✅ Configured - Model: {self.GEMINI_MODEL}, Temp: {self.GEMINI_TEMPERATURE}"

    def is_translation_configured(self) -> bool:
        return bool(self.TRANSLATION_API_KEY and self.TRANSLATION_API_URL)

    def get_translation_config_status(self) -> str:
        if not self.is_translation_configured():
            return "❌ Not configured - TRANSLATION_API_KEY missing"
        return f"✅ Configured - Model: {self.TRANSLATION_MODEL}"

# Create settings instance
settings = Settings()

set_log_level(settings.DEBUG)

logger.info(f"Gemini configuration: {settings.get_gemini_config_status()}")
logger.info(f"Translation configuration: {settings.get_translation_config_status()}")
logger.info(f"App environment: {settings.APP_ENV}")
