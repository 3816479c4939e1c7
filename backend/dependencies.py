from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from api.errors import ServiceUnavailableError, UnauthorizedError
from config.env import settings
from database import get_db
from services.flashcard_generators import FlashcardGenerator, create_flashcard_generator
from services.generation import GenerationService
from services.model_checker import ModelChecker

def get_current_user_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    """Authenticated user id forwarded by the identity layer in front of the API."""
    if x_user_id is None or not x_user_id.strip():
        raise UnauthorizedError()
    return x_user_id.strip()

@lru_cache
def get_flashcard_generator() -> FlashcardGenerator:
    # Chosen once per process from configuration
    return create_flashcard_generator(settings)

def get_generation_service(
    db: Session = Depends(get_db),
    generator: FlashcardGenerator = Depends(get_flashcard_generator)
) -> GenerationService:
    return GenerationService(db, generator)

def get_model_checker() -> ModelChecker:
    config = settings.openrouter
    if not config.api_key or not config.api_key.strip():
        raise ServiceUnavailableError("OpenRouter API key not configured")
    return ModelChecker(config.api_key, base_url=config.base_url, timeout_seconds=config.timeout_seconds)
