import logging
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # App settings
    APP_NAME: str = "ContractRisk"
    API_VERSION: str = "1.0.0"

    # Explicit provider override ("qwen", "deepseek", "groq" or "mock")
    AI_PROVIDER: str = ""

    # Qwen settings (OpenAI-compatible endpoint)
    QWEN_API_URL: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    QWEN_API_KEY: str = ""
    QWEN_MODEL: str = "qwen-plus"

    # DeepSeek settings (OpenAI-compatible endpoint)
    DEEPSEEK_API_URL: str = "https://api.deepseek.com/v1"
    DEEPSEEK_API_KEY: str = ""
    DEEPSEEK_MODEL: str = "deepseek-chat"

    # Groq settings
    GROQ_API_URL: str = "https://api.groq.com"
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"

    # LLM settings
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 4000
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Contract text processing settings
    MAX_PROMPT_CHARS: int = 8000
    MIN_TEXT_LENGTH: int = 10
    EXCERPT_LENGTH: int = 100

    # Annotation drafts handed to collaborators
    MAX_ANNOTATIONS: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    """Load a fresh settings object.

    Provider credentials are read through this on every analysis so that a
    changed environment takes effect without a restart.
    """
    return Settings()


# Create settings instance
settings = Settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
