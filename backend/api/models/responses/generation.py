from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from api.models.responses.flashcard import FlashcardResponse, PaginationResponse

class FlashcardSuggestion(BaseModel):
    """A generated front/back pair. Returned to the caller, never stored."""
    front: str
    back: str
    source: Optional[str] = None

class GenerateFlashcardsResponse(BaseModel):
    generation_id: int
    model: str
    generated_count: int
    generation_duration: int = Field(..., description="Wall-clock duration of the LLM call in milliseconds")
    source_text_hash: str
    flashcard_suggestions: List[FlashcardSuggestion] = Field(..., alias="flashcardSuggestions")

    model_config = ConfigDict(populate_by_name=True)

class GenerationResponse(BaseModel):
    id: int
    model: str
    generated_count: int
    generation_duration: int
    source_text_hash: str
    source_text_length: int
    accepted_unedited_count: int
    accepted_edited_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PaginatedGenerationsResponse(BaseModel):
    data: List[GenerationResponse]
    pagination: PaginationResponse

class AcceptGeneratedFlashcardsResponse(BaseModel):
    message: str = Field(default="Flashcards successfully saved")
    accepted_count: int
    accepted_unedited_count: int
    accepted_edited_count: int
    flashcards: List[FlashcardResponse]
