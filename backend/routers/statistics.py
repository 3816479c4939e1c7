from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from dependencies import get_current_user_id
from services.statistics import StatisticsService
from api.models.responses.statistics import FlashcardStatisticsResponse, GenerationStatisticsResponse

router = APIRouter()

@router.get("/generations", response_model=GenerationStatisticsResponse)
async def get_generation_statistics(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    service = StatisticsService(db)
    return service.get_generation_statistics(user_id)

@router.get("/flashcards", response_model=FlashcardStatisticsResponse)
async def get_flashcard_statistics(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    service = StatisticsService(db)
    return service.get_flashcard_statistics(user_id)
