"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Project Comparison API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000"]

    # LLM API for comparison
    GEMINI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    LLM_PROVIDER: str = "gemini"  # "gemini", "openai", or "anthropic"
    GEMINI_MODEL: str = "gemini-2.0-flash"
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-20241022"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4096
    LLM_TIMEOUT_SECONDS: float = 60.0

    # GitHub API
    GITHUB_API_BASE_URL: str = "https://api.github.com"
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_TIMEOUT_SECONDS: float = 15.0
    GITHUB_COMMITS_PER_PAGE: int = 10
    USER_AGENT: str = "ProjectComparison/1.0"

    # Signal extraction
    COMPARE_MAX_ANALYZED_FILES: int = 8
    COMPARE_FILE_CONTENT_MAX_CHARS: int = 3000
    COMPARE_PURPOSE_MAX_CHARS: int = 200
    COMPARE_FETCH_CONCURRENCY: int = 4

    # Result memoization
    COMPARISON_CACHE_CAPACITY: int = 50

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
