"""Strategies that turn source text into flashcard suggestions.

The application picks one implementation at startup from configuration and
injects it into ``GenerationService``; the service never checks for provider
credentials itself.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, List

from config.env import Settings
from services.openrouter import OpenRouterService
from utils.ai_flashcard_creation import build_generation_request, extract_completion_content, parse_ai_response

logger = logging.getLogger(__name__)


class FlashcardGenerator(ABC):
    @abstractmethod
    async def generate(self, source_text: str, model: str, count: int, temperature: float) -> List[Dict[str, str]]:
        """Return suggested ``{"front", "back"}`` pairs for ``source_text``."""


class MockFlashcardGenerator(FlashcardGenerator):
    """Deterministic placeholder suggestions for development without an API key."""

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = delay_seconds

    async def generate(self, source_text: str, model: str, count: int, temperature: float) -> List[Dict[str, str]]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return [
            {
                "front": f"Question {i + 1} from the source text",
                "back": f"Answer {i + 1} based on the content provided",
            }
            for i in range(count)
        ]


class OpenRouterFlashcardGenerator(FlashcardGenerator):
    """Live generator using OpenRouter structured output."""

    def __init__(self, service: OpenRouterService, max_tokens: int = 2000):
        self.service = service
        self.max_tokens = max_tokens

    async def generate(self, source_text: str, model: str, count: int, temperature: float) -> List[Dict[str, str]]:
        request = build_generation_request(source_text, model, count, temperature, max_tokens=self.max_tokens)
        completion = await self.service.complete(request)
        return parse_ai_response(extract_completion_content(completion))


def create_flashcard_generator(settings: Settings) -> FlashcardGenerator:
    """Choose the live generator when an OpenRouter key is configured, else the mock."""
    config = settings.openrouter
    if config.api_key and config.api_key.strip():
        logger.info("Using OpenRouter flashcard generator")
        service = OpenRouterService(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            referer=config.referer,
            app_title=config.app_title,
        )
        return OpenRouterFlashcardGenerator(service, max_tokens=config.max_tokens)

    logger.info("No OpenRouter API key configured, using mock flashcard generator")
    return MockFlashcardGenerator(delay_seconds=settings.mock_generation_delay_seconds)
