import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

# Try to load .env.local first, fall back to .env
if os.path.exists(".env.local"):
    load_dotenv(".env.local")
else:
    load_dotenv()


class OpenRouterConfig(BaseModel):
    """Configuration for the OpenRouter chat completion provider."""
    api_key: Optional[str] = Field(
        default=None,
        description="API key; when unset the mock flashcard generator is used"
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenRouter API"
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Deadline in seconds for a whole completion request, body included"
    )
    max_tokens: int = Field(
        default=2000,
        description="Token budget for flashcard generation completions"
    )
    referer: str = Field(
        default="http://localhost:8000",
        description="Value sent in the HTTP-Referer header"
    )
    app_title: str = Field(
        default="Flashcards API",
        description="Value sent in the X-Title header"
    )


class Settings(BaseSettings):
    # Database settings
    database_url: str = Field(
        default="sqlite:///./flashcards.db",
        description="Database connection URL"
    )

    # API settings
    api_title: str = Field(
        default="Flashcards API",
        description="API title for documentation"
    )
    api_description: str = Field(
        default="API for generating, reviewing and managing flashcards",
        description="API description for documentation"
    )
    api_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    environment: Literal["development", "production", "test"] = Field(
        default="development",
        description="Runtime environment; API error logging is muted in 'test'"
    )

    # AI generation settings
    openrouter: OpenRouterConfig = Field(
        default_factory=OpenRouterConfig,
        description="OpenRouter provider configuration"
    )
    mock_generation_delay_seconds: float = Field(
        default=0.0,
        description="Simulated latency of the mock flashcard generator"
    )

    # Logging settings
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for rotating log files; defaults to backend/logs"
    )
    log_level: str = Field(
        default="INFO",
        description="Console log level"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Allow extra fields in environment without validation errors


settings = Settings()
