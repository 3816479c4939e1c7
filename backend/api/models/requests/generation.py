from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
from typing import Any, List
from api.models.requests.flashcard import MAX_BACK_LENGTH, MAX_FRONT_LENGTH, MAX_PAGE, MAX_PAGE_LIMIT, parse_positive_int, trimmed_text
from models.enums import ALLOWED_MODELS, DEFAULT_MODEL, GenerationSortField, SortOrder

MIN_SOURCE_TEXT_LENGTH = 1000
MAX_SOURCE_TEXT_LENGTH = 10000
MAX_GENERATED_FLASHCARDS = 20
MAX_ACCEPTED_FLASHCARDS = 100


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class GenerateFlashcardsRequest(BaseModel):
    source_text: str = Field(..., description="Text to generate flashcards from (1000-10000 characters after trimming)")
    model: str = Field(default=DEFAULT_MODEL, description="OpenRouter model identifier")
    count: int = Field(default=5, description="Number of suggestions to request (1-20)")
    temperature: float = Field(default=0.7, description="Sampling temperature (0-2)")

    @field_validator("source_text")
    @classmethod
    def validate_source_text(cls, value: str) -> str:
        # Bounds apply to the trimmed text; the raw text is kept for hashing
        length = len(value.strip())
        if length < MIN_SOURCE_TEXT_LENGTH:
            raise PydanticCustomError("string_too_short", "Source text must be at least 1000 characters")
        if length > MAX_SOURCE_TEXT_LENGTH:
            raise PydanticCustomError("string_too_long", "Source text must not exceed 10000 characters")
        return value

    @field_validator("model")
    @classmethod
    def validate_model(cls, value: str) -> str:
        if value not in ALLOWED_MODELS:
            raise PydanticCustomError("enum", "Invalid model selected")
        return value

    @field_validator("count", mode="before")
    @classmethod
    def validate_count(cls, value: Any) -> int:
        if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
            raise PydanticCustomError("int_type", "Count must be an integer")
        value = int(value)
        if value < 1:
            raise PydanticCustomError("greater_than_equal", "Must generate at least 1 flashcard")
        if value > MAX_GENERATED_FLASHCARDS:
            raise PydanticCustomError("less_than_equal", "Cannot generate more than 20 flashcards at once")
        return value

    @field_validator("temperature", mode="before")
    @classmethod
    def validate_temperature(cls, value: Any) -> float:
        if not _is_number(value):
            raise PydanticCustomError("float_type", "Temperature must be a number")
        if value < 0:
            raise PydanticCustomError("greater_than_equal", "Temperature must be at least 0")
        if value > 2:
            raise PydanticCustomError("less_than_equal", "Temperature must not exceed 2")
        return float(value)

    class Config:
        json_schema_extra = {
            "example": {
                "source_text": "Photosynthesis is the process by which green plants ... (at least 1000 characters)",
                "model": DEFAULT_MODEL,
                "count": 5,
                "temperature": 0.7
            }
        }


class AcceptFlashcardItem(BaseModel):
    front: str = Field(..., description="Front text, possibly edited by the user")
    back: str = Field(..., description="Back text, possibly edited by the user")
    edited: bool = Field(..., description="Whether the user changed the suggestion before accepting it")

    @field_validator("front")
    @classmethod
    def validate_front(cls, value: str) -> str:
        return trimmed_text(value, MAX_FRONT_LENGTH, "Front text is required", "Front text exceeds 200 characters")

    @field_validator("back")
    @classmethod
    def validate_back(cls, value: str) -> str:
        return trimmed_text(value, MAX_BACK_LENGTH, "Back text is required", "Back text exceeds 500 characters")


class AcceptGeneratedFlashcardsRequest(BaseModel):
    flashcards: List[AcceptFlashcardItem] = Field(..., description="Suggestions the user decided to keep")

    @field_validator("flashcards")
    @classmethod
    def validate_size(cls, value: List[AcceptFlashcardItem]) -> List[AcceptFlashcardItem]:
        if len(value) < 1:
            raise PydanticCustomError("too_short", "At least one flashcard must be provided")
        if len(value) > MAX_ACCEPTED_FLASHCARDS:
            raise PydanticCustomError("too_long", "Cannot accept more than 100 flashcards at once")
        return value


class GetGenerationsQuery(BaseModel):
    page: int = Field(default=1, description="1-based page number")
    limit: int = Field(default=20, description="Page size, at most 100")
    sort: GenerationSortField = Field(default=GenerationSortField.CREATED_AT, description="Sort column")
    order: SortOrder = Field(default=SortOrder.DESC, description="Sort direction")

    @field_validator("page", mode="before")
    @classmethod
    def parse_page(cls, value: Any) -> int:
        return parse_positive_int(value, 1, "Page must be a positive integer", maximum=MAX_PAGE)

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, value: Any) -> int:
        return parse_positive_int(value, 20, "Limit must be a positive integer")

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, value: int) -> int:
        if value > MAX_PAGE_LIMIT:
            raise PydanticCustomError("less_than_equal", "Limit cannot exceed 100")
        return value

    @field_validator("sort", mode="before")
    @classmethod
    def default_sort(cls, value: Any) -> Any:
        return GenerationSortField.CREATED_AT if value in (None, "") else value

    @field_validator("order", mode="before")
    @classmethod
    def default_order(cls, value: Any) -> Any:
        return SortOrder.DESC if value in (None, "") else value
