from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
import time
from typing import List, Optional

from models.flashcard import Flashcard
from models.generation import Generation, GenerationErrorLog
from models.enums import FlashcardSource, SortOrder

from api.errors import DatabaseError, ServiceUnavailableError, ValidationError
from api.models.requests.generation import AcceptFlashcardItem, GetGenerationsQuery
from api.models.responses.flashcard import FlashcardResponse, PaginationResponse
from api.models.responses.generation import (
    AcceptGeneratedFlashcardsResponse,
    FlashcardSuggestion,
    GenerateFlashcardsResponse,
    GenerationResponse,
    PaginatedGenerationsResponse,
)
from services.flashcard_generators import FlashcardGenerator
from services.ownership import require_user, verify_generation_ownership
from utils.source_text import hash_source_text, source_text_length

logger = logging.getLogger(__name__)

class GenerationService:
    """Generation and acceptance of AI flashcard suggestions.

    Suggestions are returned to the caller and never stored. Only the generation
    metadata is persisted, and flashcards are created once the user accepts them.
    """

    def __init__(self, db: Session, generator: FlashcardGenerator):
        self.db = db
        self.generator = generator

    async def generate_flashcards(
        self,
        user_id: str,
        source_text: str,
        model: str,
        count: int,
        temperature: float
    ) -> GenerateFlashcardsResponse:
        """Generate suggestions for ``source_text`` and record the generation.

        Any failure is written to the error log (best effort). Failures saving
        the generation record are re-raised as DatabaseError, everything else
        as ServiceUnavailableError.
        """
        require_user(user_id)
        source_text_hash = hash_source_text(source_text)
        started = time.monotonic()

        try:
            suggestions = await self.generator.generate(source_text, model, count, temperature)
            duration_ms = int(round((time.monotonic() - started) * 1000))

            generation = self._save_generation(
                user_id=user_id,
                model=model,
                generated_count=len(suggestions),
                source_text_hash=source_text_hash,
                source_text_length=source_text_length(source_text),
                generation_duration=duration_ms,
            )
        except Exception as e:
            self.log_generation_error(user_id, model, source_text, e)
            if isinstance(e, DatabaseError):
                raise
            message = getattr(e, "message", None) or str(e) or "AI service unavailable"
            raise ServiceUnavailableError(message) from e

        logger.info(
            f"Generation {generation.id}: {len(suggestions)} suggestions from {model} in {duration_ms}ms"
        )
        return GenerateFlashcardsResponse(
            generation_id=generation.id,
            model=generation.model,
            generated_count=len(suggestions),
            generation_duration=duration_ms,
            source_text_hash=source_text_hash,
            flashcard_suggestions=[FlashcardSuggestion(**s) for s in suggestions],
        )

    def _save_generation(self, **values) -> Generation:
        try:
            generation = Generation(**values)
            self.db.add(generation)
            self.db.commit()
            self.db.refresh(generation)
            return generation
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving generation record: {str(e)}")
            raise DatabaseError("Failed to save generation record")

    def log_generation_error(self, user_id: str, model: str, source_text: str, error: BaseException) -> None:
        """Append a generation error log row.

        Best effort: a failure to write the log is logged here and never raised,
        so it cannot mask the error being recorded.
        """
        try:
            self.db.add(GenerationErrorLog(
                user_id=user_id,
                model=model,
                source_text_hash=hash_source_text(source_text),
                source_text_length=source_text_length(source_text),
                error_code=str(getattr(error, "code", None) or type(error).__name__ or "UNKNOWN_ERROR"),
                error_message=str(error) or type(error).__name__,
            ))
            self.db.commit()
        except Exception as log_error:
            logger.error(f"Failed to log generation error: {str(log_error)}")
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after failed error log also failed: {str(rollback_error)}")

    def accept_generation(
        self,
        user_id: str,
        generation_id: int,
        flashcards: List[AcceptFlashcardItem]
    ) -> AcceptGeneratedFlashcardsResponse:
        """Turn accepted suggestions into flashcards owned by ``user_id``.

        Edited items are stored as ``ai-edited``, the rest as ``ai-full``. The
        generation's acceptance counters are updated afterwards; a failure there
        is only logged because the flashcards already exist.
        """
        require_user(user_id)
        generation = verify_generation_ownership(self.db, user_id, generation_id)

        if generation.accepted_count > 0:
            raise ValidationError(
                "Generation has already been accepted",
                details={"generation_id": "Generation has already been accepted"}
            )

        edited_count = sum(1 for card in flashcards if card.edited)
        unedited_count = len(flashcards) - edited_count

        created = [
            Flashcard(
                front=card.front,
                back=card.back,
                source=(FlashcardSource.AI_EDITED if card.edited else FlashcardSource.AI_FULL).value,
                generation_id=generation.id,
                user_id=user_id,
            )
            for card in flashcards
        ]

        try:
            self.db.add_all(created)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating flashcards for generation {generation_id}: {str(e)}")
            raise DatabaseError("Failed to create flashcards")

        self._update_acceptance_counts(generation, unedited_count, edited_count)

        return AcceptGeneratedFlashcardsResponse(
            accepted_count=len(flashcards),
            accepted_unedited_count=unedited_count,
            accepted_edited_count=edited_count,
            flashcards=[FlashcardResponse.model_validate(card) for card in created],
        )

    def _update_acceptance_counts(self, generation: Generation, unedited_count: int, edited_count: int) -> None:
        # Secondary bookkeeping; the flashcards are already committed
        generation_id = generation.id
        try:
            generation.accepted_unedited_count = unedited_count
            generation.accepted_edited_count = edited_count
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update generation statistics for generation {generation_id}: {str(e)}")

    def get_generations(self, user_id: str, query: Optional[GetGenerationsQuery] = None) -> PaginatedGenerationsResponse:
        """Paginated generation history of ``user_id``, newest first by default."""
        require_user(user_id)
        query = query or GetGenerationsQuery()

        sort_column = getattr(Generation, query.sort.value)
        if query.order == SortOrder.ASC:
            ordering = [sort_column.asc(), Generation.id.asc()]
        else:
            ordering = [sort_column.desc(), Generation.id.desc()]

        try:
            base_query = self.db.query(Generation).filter(Generation.user_id == user_id)
            total = base_query.count()
            generations = (
                base_query.order_by(*ordering)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving generations: {str(e)}")
            raise DatabaseError("Failed to retrieve generations")

        return PaginatedGenerationsResponse(
            data=[GenerationResponse.model_validate(g) for g in generations],
            pagination=PaginationResponse.build(query.page, query.limit, total),
        )
