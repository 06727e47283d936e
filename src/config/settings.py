"""
Application-wide settings using pydantic-settings.
All runtime env access in src/ should go through this module.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / ".env"

_GEMINI_COMPAT_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    LOG_DIR: str = "./logs"
    LOG_FILE_NAME: str = "app.debug.log"
    LOG_FILE_WHEN: str = "midnight"
    LOG_FILE_INTERVAL: int = 1
    LOG_FILE_BACKUP_COUNT: int = 7
    LOG_FILE_ENCODING: str = "utf-8"
    LOG_FILE_LEVEL: str = "DEBUG"

    # Global LLM settings
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = _GEMINI_COMPAT_DEFAULT_BASE_URL
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    DEFAULT_TEXT_MODEL: str = "gemini-2.0-flash"
    DEFAULT_IMAGE_MODEL: str = "gemini-2.0-flash"

    # Runtime
    AGENT_LOG_TRUNCATE: int = 600

    # Database
    DB_PATH: str = "./data/diagnoses.db"

    # Diagnosis
    SYMPTOMS_MIN_LENGTH: int = 10
    SUMMARY_PREVIEW_CHARS: int = 100

    # Images
    IMAGE_MAX_BYTES: int = 8 * 1024 * 1024
    IMAGE_MAX_SIDE: int = 1024

    # Agent-specific overrides
    ANALYZER_PROVIDER: str = ""
    ANALYZER_MODEL: str = ""

    ADVISOR_PROVIDER: str = ""
    ADVISOR_MODEL: str = ""

    VISION_PROVIDER: str = ""
    VISION_MODEL: str = ""

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def _agent_value(self, agent_key: str, suffix: str) -> str:
        key = (agent_key or "").strip().upper()
        if not key:
            return ""
        return str(getattr(self, f"{key}_{suffix}", "") or "").strip()

    def get_agent_model(self, agent_key: str, default_model: str) -> str:
        return self._agent_value(agent_key, "MODEL") or default_model

    def get_agent_provider(self, agent_key: str) -> str:
        return self._agent_value(agent_key, "PROVIDER")

    def get_agent_base_url(self, agent_key: str, provider_hint: str = "") -> str:
        _ = agent_key
        hint = (provider_hint or "").strip().lower()
        if hint == "ollama":
            return self.OLLAMA_BASE_URL
        return self.OPENAI_BASE_URL or _GEMINI_COMPAT_DEFAULT_BASE_URL

    def has_openai_like_creds(self, agent_key: str) -> bool:
        _ = agent_key
        return bool(self.OPENAI_API_KEY)


settings = Settings()
