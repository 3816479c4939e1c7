import math
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

class FlashcardResponse(BaseModel):
    id: int
    front: str
    back: str
    source: str
    generation_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationResponse":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))

class PaginatedFlashcardsResponse(BaseModel):
    data: List[FlashcardResponse]
    pagination: PaginationResponse

class CreateMultipleFlashcardsResponse(BaseModel):
    message: str = Field(default="Flashcards successfully created")
    created_count: int
    flashcards: List[FlashcardResponse]

class DeleteFlashcardResponse(BaseModel):
    message: str = Field(default="Flashcard successfully deleted")
