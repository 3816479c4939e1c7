from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError
from typing import Any, List, Optional
from api.errors import ValidationError
from models.enums import FlashcardSource, FlashcardSortField, SortOrder

MAX_FRONT_LENGTH = 200
MAX_BACK_LENGTH = 500
MAX_BULK_FLASHCARDS = 100
MAX_PAGE_LIMIT = 100

# Largest value SQL drivers accept for ids, LIMIT and OFFSET
MAX_SQL_INTEGER = 2**63 - 1
# Keeps (page - 1) * limit within MAX_SQL_INTEGER for every allowed limit
MAX_PAGE = MAX_SQL_INTEGER // MAX_PAGE_LIMIT + 1


def trimmed_text(value: str, max_length: int, required_message: Optional[str], too_long_message: str) -> str:
    """Strip surrounding whitespace and enforce the length bounds of a card side.

    Passing ``required_message=None`` allows an empty result.
    """
    value = value.strip()
    if required_message is not None and not value:
        raise PydanticCustomError("string_too_short", required_message)
    if len(value) > max_length:
        raise PydanticCustomError("string_too_long", too_long_message)
    return value


def parse_positive_int(value: Any, default: int, message: str, maximum: Optional[int] = None) -> int:
    """Parse a query-string integer; missing values fall back to ``default``.

    Non-numeric strings are rejected rather than defaulted, and so are values
    above ``maximum`` when one is given.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise PydanticCustomError("int_parsing", message)
    if isinstance(value, str):
        try:
            value = int(value.strip(), 10)
        except ValueError:
            raise PydanticCustomError("int_parsing", message)
    if not isinstance(value, int) or value < 1:
        raise PydanticCustomError("greater_than", message)
    if maximum is not None and value > maximum:
        raise PydanticCustomError("less_than_equal", message)
    return value


class CreateFlashcardRequest(BaseModel):
    front: str = Field(..., description="Front text of the flashcard (question)")
    back: str = Field(..., description="Back text of the flashcard (answer)")
    source: FlashcardSource = Field(default=FlashcardSource.MANUAL, description="Origin of the flashcard")
    generation_id: Optional[int] = Field(
        default=None,
        validate_default=True,
        description="Generation the card was accepted from; required for AI sources"
    )

    @field_validator("front")
    @classmethod
    def validate_front(cls, value: str) -> str:
        return trimmed_text(value, MAX_FRONT_LENGTH, "Front text is required", "Front text must be at most 200 characters")

    @field_validator("back")
    @classmethod
    def validate_back(cls, value: str) -> str:
        return trimmed_text(value, MAX_BACK_LENGTH, "Back text is required", "Back text must be at most 500 characters")

    @field_validator("generation_id")
    @classmethod
    def validate_generation_id(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is not None and not 1 <= value <= MAX_SQL_INTEGER:
            raise PydanticCustomError("greater_than", "generation_id must be a positive integer")

        # source is absent from info.data when it failed its own validation
        source = info.data.get("source")
        if source is None:
            return value
        if source.is_ai_generated and value is None:
            raise PydanticCustomError(
                "missing_generation_id",
                "generation_id is required when source is ai-full or ai-edited"
            )
        if not source.is_ai_generated and value is not None:
            raise PydanticCustomError(
                "unexpected_generation_id",
                "generation_id must be empty when source is manual"
            )
        return value

    class Config:
        json_schema_extra = {
            "example": {
                "front": "What is the capital of France?",
                "back": "Paris",
                "source": "manual"
            }
        }


class CreateMultipleFlashcardsRequest(BaseModel):
    flashcards: List[CreateFlashcardRequest] = Field(..., description="Flashcards to create in one batch")

    @field_validator("flashcards")
    @classmethod
    def validate_size(cls, value: List[CreateFlashcardRequest]) -> List[CreateFlashcardRequest]:
        if len(value) < 1:
            raise PydanticCustomError("too_short", "At least one flashcard is required")
        if len(value) > MAX_BULK_FLASHCARDS:
            raise PydanticCustomError("too_long", "Maximum 100 flashcards can be created at once")
        return value


class UpdateFlashcardRequest(BaseModel):
    front: Optional[str] = Field(default=None, description="New front text of the flashcard")
    back: Optional[str] = Field(default=None, description="New back text of the flashcard")

    @field_validator("front")
    @classmethod
    def validate_front(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return trimmed_text(value, MAX_FRONT_LENGTH, "Front text cannot be empty", "Front text must be at most 200 characters")

    @field_validator("back")
    @classmethod
    def validate_back(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return trimmed_text(value, MAX_BACK_LENGTH, "Back text cannot be empty", "Back text must be at most 500 characters")

    @model_validator(mode="after")
    def validate_any_field(self) -> "UpdateFlashcardRequest":
        if self.front is None and self.back is None:
            raise PydanticCustomError("missing_update", "At least one field (front or back) must be provided")
        return self


class GetFlashcardsQuery(BaseModel):
    page: int = Field(default=1, description="1-based page number")
    limit: int = Field(default=20, description="Page size, at most 100")
    source: Optional[FlashcardSource] = Field(default=None, description="Only return cards with this source")
    sort: FlashcardSortField = Field(default=FlashcardSortField.CREATED_AT, description="Sort column")
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

    @field_validator("source", mode="before")
    @classmethod
    def empty_source(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("sort", mode="before")
    @classmethod
    def default_sort(cls, value: Any) -> Any:
        return FlashcardSortField.CREATED_AT if value in (None, "") else value

    @field_validator("order", mode="before")
    @classmethod
    def default_order(cls, value: Any) -> Any:
        return SortOrder.DESC if value in (None, "") else value


def parse_path_id(value: str, message: str) -> int:
    """Parse a positive integer path id, raising a field error on ``id``."""
    try:
        parsed = int(value, 10)
    except (TypeError, ValueError):
        raise ValidationError(message, details={"id": message})
    if parsed < 1 or parsed > MAX_SQL_INTEGER:
        raise ValidationError(message, details={"id": message})
    return parsed
