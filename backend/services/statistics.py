from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
import logging

from models.flashcard import Flashcard
from models.generation import Generation
from models.enums import FlashcardSource
from api.errors import DatabaseError
from api.models.responses.statistics import FlashcardStatisticsResponse, GenerationStatisticsResponse
from services.ownership import require_user

logger = logging.getLogger(__name__)


def _ratio(numerator: float, denominator: float) -> float:
    return round(numerator / denominator, 4) if denominator else 0.0


class StatisticsService:
    """Per-user aggregates over generations and flashcards."""

    def __init__(self, db: Session):
        self.db = db

    def get_generation_statistics(self, user_id: str) -> GenerationStatisticsResponse:
        require_user(user_id)
        try:
            totals = self.db.query(
                func.count(Generation.id),
                func.coalesce(func.sum(Generation.generated_count), 0),
                func.coalesce(func.sum(Generation.accepted_unedited_count), 0),
                func.coalesce(func.sum(Generation.accepted_edited_count), 0),
                func.coalesce(func.avg(Generation.generation_duration), 0),
            ).filter(Generation.user_id == user_id).one()

            models_used = dict(
                self.db.query(Generation.model, func.count(Generation.id))
                .filter(Generation.user_id == user_id)
                .group_by(Generation.model)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error computing generation statistics: {str(e)}")
            raise DatabaseError("Failed to retrieve generation statistics")

        total_generations, generated, unedited, edited, avg_duration = totals
        accepted = int(unedited) + int(edited)

        return GenerationStatisticsResponse(
            total_generations=total_generations,
            total_generated_flashcards=int(generated),
            total_accepted_flashcards=accepted,
            total_accepted_unedited=int(unedited),
            total_accepted_edited=int(edited),
            acceptance_rate=_ratio(accepted, int(generated)),
            edit_rate=_ratio(int(edited), accepted),
            average_generation_duration=round(float(avg_duration), 2),
            models_used=models_used,
        )

    def get_flashcard_statistics(self, user_id: str) -> FlashcardStatisticsResponse:
        require_user(user_id)
        try:
            rows = (
                self.db.query(Flashcard.source, func.count(Flashcard.id))
                .filter(Flashcard.user_id == user_id)
                .group_by(Flashcard.source)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error computing flashcard statistics: {str(e)}")
            raise DatabaseError("Failed to retrieve flashcard statistics")

        by_source = {source.value: 0 for source in FlashcardSource}
        by_source.update({source: count for source, count in rows})
        total = sum(by_source.values())
        ai_created = total - by_source[FlashcardSource.MANUAL.value]

        return FlashcardStatisticsResponse(
            total_flashcards=total,
            by_source=by_source,
            ai_created_percentage=round(_ratio(ai_created, total) * 100, 2),
        )
