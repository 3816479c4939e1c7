from pydantic import BaseModel, Field
from typing import Dict
from datetime import datetime

class GenerationStatisticsResponse(BaseModel):
    total_generations: int
    total_generated_flashcards: int
    total_accepted_flashcards: int
    total_accepted_unedited: int
    total_accepted_edited: int
    acceptance_rate: float = Field(..., description="Accepted / generated, 0 when nothing was generated")
    edit_rate: float = Field(..., description="Edited / accepted, 0 when nothing was accepted")
    average_generation_duration: float = Field(..., description="Mean LLM call duration in milliseconds")
    models_used: Dict[str, int]

class FlashcardStatisticsResponse(BaseModel):
    total_flashcards: int
    by_source: Dict[str, int]
    ai_created_percentage: float

class ModelCheckResponse(BaseModel):
    models: Dict[str, bool] = Field(..., description="Availability of each allowed model")
    checked_at: datetime
