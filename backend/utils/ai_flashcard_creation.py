import json
import logging
from typing import Any, Dict, List

from api.models.requests.chat_completion import ChatCompletionRequest, ChatMessage, JsonSchemaSpec, ResponseFormat

# Get logger for this module
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful flashcard generator. Create high-quality flashcards from the provided content. "
    "Each flashcard should have a concise question on the front and a clear answer on the back."
)

FLASHCARD_SCHEMA_NAME = "flashcard_generation"

# Strict structured-output schema: {"flashcards": [{"front", "back"}, ...]}
FLASHCARD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "flashcards": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "front": {"type": "string", "maxLength": 200},
                    "back": {"type": "string", "maxLength": 500},
                },
                "required": ["front", "back"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["flashcards"],
    "additionalProperties": False,
}


def build_user_prompt(source_text: str, count: int) -> str:
    return f"Generate exactly {count} flashcards from the following content:\n\n{source_text}"


def build_generation_request(
    source_text: str,
    model: str,
    count: int,
    temperature: float,
    max_tokens: int = 2000
) -> ChatCompletionRequest:
    """Build the structured-output completion request for one generation."""
    return ChatCompletionRequest(
        model=model,
        messages=[
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=build_user_prompt(source_text, count)),
        ],
        temperature=temperature,
        max_tokens=max_tokens,
        response_format=ResponseFormat(
            json_schema=JsonSchemaSpec(
                name=FLASHCARD_SCHEMA_NAME,
                strict=True,
                schema=FLASHCARD_SCHEMA,
            )
        ),
    )


def extract_completion_content(completion: Dict[str, Any]) -> str:
    """Return the message content of the first choice of a completion payload."""
    try:
        content = completion["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        logger.error(f"Completion payload has no message content: {str(completion)[:500]}")
        raise ValueError("AI response did not contain any message content")
    if not isinstance(content, str) or not content.strip():
        raise ValueError("AI response did not contain any message content")
    return content


def parse_ai_response(content: str) -> List[Dict[str, str]]:
    """Parse and validate the AI model's response into a list of front/back pairs."""
    # Some models wrap structured output in a markdown fence anyway
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response: {str(e)}")
        logger.error(f"Content causing error: {content[:500]}...")
        raise ValueError(f"Failed to parse AI response: {str(e)}")

    # Extract flashcards array if wrapped in object
    if isinstance(parsed, dict) and "flashcards" in parsed:
        flashcards = parsed["flashcards"]
    elif isinstance(parsed, list):
        flashcards = parsed
    else:
        logger.error(f"Unexpected response format. Expected list or dict with 'flashcards' key, got: {type(parsed)}")
        raise ValueError(f"Expected list or dict with 'flashcards' key, got: {type(parsed).__name__}")

    if not isinstance(flashcards, list):
        raise ValueError(f"Expected 'flashcards' to be a list, got: {type(flashcards).__name__}")

    suggestions = []
    for i, card in enumerate(flashcards):
        if not isinstance(card, dict):
            logger.error(f"Card {i+1} is not a dict: {type(card)}")
            raise ValueError(f"Expected dict for card, got: {type(card).__name__}")
        for field in ["front", "back"]:
            if not isinstance(card.get(field), str):
                logger.error(f"Card {i+1} missing required field: {field}")
                raise ValueError(f"Card missing required field: {field}")
        suggestions.append({"front": card["front"], "back": card["back"]})

    logger.info(f"Parsed {len(suggestions)} flashcard suggestions")
    return suggestions
