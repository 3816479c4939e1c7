import asyncio
import logging
import re
from typing import Any, Dict, Optional

import httpx

from api.errors import RateLimitError, ServiceUnavailableError, UnauthorizedError, ValidationError
from api.models.requests.chat_completion import ChatCompletionRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Models verified to work; suggested when another model fails
KNOWN_WORKING_MODELS = ["mistralai/mistral-7b-instruct:free"]

SCHEMA_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


def suggest_alternative_models(failed_model: str) -> str:
    """Suggestion sentence appended to upstream failure messages."""
    alternatives = [m for m in KNOWN_WORKING_MODELS if m != failed_model]
    if alternatives:
        return f" Try model: {' or '.join(alternatives)}."
    return " Check model availability in the OpenRouter documentation."


class OpenRouterService:
    """Single constrained chat-completion call against OpenRouter.

    Every upstream failure is translated into an ``api.errors`` type. No
    retries are attempted.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        referer: str = "http://localhost:8000",
        app_title: str = "Flashcards API",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key or not api_key.strip():
            raise ValidationError("OpenRouter API key is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.referer = referer
        self.app_title = app_title
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": self.app_title,
        }

    def validate_request(self, request: ChatCompletionRequest) -> None:
        """Reject a request before it is sent."""
        if not request.model or not request.model.strip():
            raise ValidationError("Model name is required")

        if not request.messages:
            raise ValidationError("At least one message is required")

        if request.temperature is not None and not 0 <= request.temperature <= 2:
            raise ValidationError("Temperature must be between 0 and 2")

        if request.max_tokens is not None and request.max_tokens <= 0:
            raise ValidationError("max_tokens must be positive")

        if request.response_format is not None:
            schema_format = request.response_format.json_schema
            if not schema_format.name or not SCHEMA_NAME_PATTERN.match(schema_format.name):
                raise ValidationError("Schema name must be snake_case (lowercase, underscores, no spaces)")
            if not isinstance(schema_format.schema_, dict):
                raise ValidationError("Schema must be a valid JSON Schema object")
            if schema_format.strict is not True:
                raise ValidationError("Schema strict mode must be enabled (strict: true)")

    async def complete(self, request: ChatCompletionRequest) -> Dict[str, Any]:
        """Send one chat completion request and return the parsed JSON payload unchanged."""
        self.validate_request(request)
        model = request.model

        try:
            # Deadline covers the whole call, including a slowly sent body
            async with asyncio.timeout(self.timeout_seconds):
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    response = await client.post(
                        "/chat/completions",
                        json=request.to_payload(),
                        headers=self._headers(),
                    )
        except (TimeoutError, httpx.TimeoutException):
            logger.warning(f"OpenRouter request for model {model} timed out after {self.timeout_seconds:g}s")
            raise ServiceUnavailableError(
                f"Request timeout: Model '{model}' did not respond within "
                f"{self.timeout_seconds:g} seconds. Try a different model."
            )
        except httpx.HTTPError as e:
            logger.error(f"OpenRouter request for model {model} failed: {str(e)}")
            raise ServiceUnavailableError(
                f"Unexpected error with model '{model}': {str(e) or type(e).__name__}. Try a different model."
            )

        if response.is_error:
            self._raise_for_status(response, model)

        try:
            return response.json()
        except ValueError:
            raise ServiceUnavailableError(
                f"Unexpected error with model '{model}': response was not valid JSON. Try a different model."
            )

    def _raise_for_status(self, response: httpx.Response, model: str) -> None:
        status = response.status_code
        error_message = self._extract_error_message(response)
        logger.warning(f"OpenRouter returned HTTP {status} for model {model}: {error_message}")

        model_info = f"Model '{model}' is unavailable. {error_message}"
        suggestion = suggest_alternative_models(model)

        if status == 400:
            raise ValidationError(model_info + suggestion)
        if status == 401:
            raise UnauthorizedError(error_message)
        if status in (404, 503):
            raise ServiceUnavailableError(model_info + suggestion)
        if status == 429:
            raise RateLimitError(model_info + suggestion)
        raise ServiceUnavailableError(f"{model_info} (HTTP {status})" + suggestion)

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        fallback = f"OpenRouter API error ({response.status_code})"
        try:
            data = response.json()
        except ValueError:
            return response.text or fallback
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return fallback

