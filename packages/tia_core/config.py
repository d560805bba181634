from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from packages.tia_core.errors import ConfigurationError


class TIAConfig(BaseSettings):
    """
    Application-wide settings.
    Loaded from environment variables and the .env file.
    """
    PROJECT_NAME: str = "TIA Adaptive Interview"
    VERSION: str = "0.1.0"

    # LLM
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    FORCE_MOCK_LLM: bool = False

    # Session limits
    MAX_QUESTIONS_PER_SESSION: int = 20
    SESSION_TIMEOUT_SEC: int = 60 * 60
    INACTIVITY_TIMEOUT_SEC: int = 30 * 60
    DEFAULT_DOMAIN: str = "data_structures"
    DEFAULT_DIFFICULTY: str = "medium"

    # Conversation (cookie-keyed) variant
    RESPONSE_TIMEOUT_SEC: int = 90
    CONVERSATION_TTL_SEC: Optional[int] = None
    CONVERSATION_DEFAULT_DIFFICULTY: Optional[str] = None

    # External call bounds
    EVALUATION_TIMEOUT_SEC: float = 30.0
    GENERATION_TIMEOUT_SEC: float = 30.0
    ADVISOR_TIMEOUT_SEC: float = 15.0

    QUESTION_BANK_PATH: str = "data/question_bank.json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def llm_enabled(self) -> bool:
        return bool(self.OPENAI_API_KEY) and not self.FORCE_MOCK_LLM

    @classmethod
    def load(cls) -> "TIAConfig":
        """
        Load settings, wrapping any failure in ConfigurationError.
        """
        try:
            return cls()
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e
