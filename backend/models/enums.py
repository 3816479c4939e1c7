import enum

class FlashcardSource(enum.Enum):
    """Where a flashcard came from."""
    MANUAL = "manual"
    AI_FULL = "ai-full"  # Accepted exactly as generated
    AI_EDITED = "ai-edited"  # Accepted after the user changed it

    @property
    def is_ai_generated(self) -> bool:
        return self is not FlashcardSource.MANUAL

class FlashcardSortField(enum.Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    FRONT = "front"

class GenerationSortField(enum.Enum):
    CREATED_AT = "created_at"

class SortOrder(enum.Enum):
    ASC = "asc"
    DESC = "desc"

# OpenRouter model identifiers accepted for generation.
# The first entry is the default free-tier model.
ALLOWED_MODELS = (
    # Free tier
    "mistralai/mistral-7b-instruct:free",
    "meta-llama/llama-3.1-8b-instruct:free",
    "meta-llama/llama-3.2-3b-instruct:free",
    "qwen/qwen-2-7b-instruct:free",
    "microsoft/phi-3-mini-128k-instruct:free",
    "google/gemini-flash-1.5:free",  # frequently unavailable
    "openai/gpt-oss-20b:free",
    # Paid tier
    "openai/gpt-4",
    "openai/gpt-3.5-turbo",
    "anthropic/claude-3-opus",
    "anthropic/claude-3-sonnet",
    "anthropic/claude-3-haiku",
    "google/gemini-pro",
)

DEFAULT_MODEL = ALLOWED_MODELS[0]
