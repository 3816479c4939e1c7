from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from typing import List, Optional

from models.flashcard import Flashcard
from models.enums import SortOrder
from api.errors import DatabaseError, NotFoundError
from api.models.requests.flashcard import (
    CreateFlashcardRequest,
    GetFlashcardsQuery,
    UpdateFlashcardRequest,
)
from api.models.responses.flashcard import (
    CreateMultipleFlashcardsResponse,
    DeleteFlashcardResponse,
    FlashcardResponse,
    PaginatedFlashcardsResponse,
    PaginationResponse,
)
from services.ownership import require_user, verify_generation_ownership

logger = logging.getLogger(__name__)

class FlashcardService:
    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, user_id: str, flashcard_id: int) -> Flashcard:
        try:
            card = self.db.query(Flashcard).filter(
                Flashcard.id == flashcard_id,
                Flashcard.user_id == user_id
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving flashcard {flashcard_id}: {str(e)}")
            raise DatabaseError("Failed to retrieve flashcard")
        if card is None:
            raise NotFoundError("Flashcard not found")
        return card

    def _verify_generations(self, user_id: str, cards: List[CreateFlashcardRequest]) -> None:
        # One ownership check per distinct referenced generation
        generation_ids = sorted({card.generation_id for card in cards if card.generation_id is not None})
        for generation_id in generation_ids:
            verify_generation_ownership(self.db, user_id, generation_id)

    def get_flashcards(self, user_id: str, query: Optional[GetFlashcardsQuery] = None) -> PaginatedFlashcardsResponse:
        """List the user's flashcards, optionally filtered by source.

        Rows with equal sort keys are ordered by id so repeated calls page identically.
        """
        require_user(user_id)
        query = query or GetFlashcardsQuery()

        sort_column = getattr(Flashcard, query.sort.value)
        if query.order == SortOrder.ASC:
            ordering = [sort_column.asc(), Flashcard.id.asc()]
        else:
            ordering = [sort_column.desc(), Flashcard.id.desc()]

        try:
            base_query = self.db.query(Flashcard).filter(Flashcard.user_id == user_id)
            if query.source is not None:
                base_query = base_query.filter(Flashcard.source == query.source.value)

            total = base_query.count()
            cards = (
                base_query.order_by(*ordering)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving flashcards: {str(e)}")
            raise DatabaseError("Failed to retrieve flashcards")

        return PaginatedFlashcardsResponse(
            data=[FlashcardResponse.model_validate(card) for card in cards],
            pagination=PaginationResponse.build(query.page, query.limit, total),
        )

    def get_flashcard(self, user_id: str, flashcard_id: int) -> FlashcardResponse:
        require_user(user_id)
        return FlashcardResponse.model_validate(self._get_owned(user_id, flashcard_id))

    def create_flashcard(self, user_id: str, card: CreateFlashcardRequest) -> FlashcardResponse:
        """Create one flashcard; a referenced generation must belong to the user."""
        return self._create(user_id, [card])[0]

    def create_flashcards(self, user_id: str, cards: List[CreateFlashcardRequest]) -> CreateMultipleFlashcardsResponse:
        """Create several flashcards in one transaction."""
        created = self._create(user_id, cards)
        return CreateMultipleFlashcardsResponse(created_count=len(created), flashcards=created)

    def _create(self, user_id: str, cards: List[CreateFlashcardRequest]) -> List[FlashcardResponse]:
        require_user(user_id)
        self._verify_generations(user_id, cards)

        new_cards = [
            Flashcard(
                front=card.front,
                back=card.back,
                source=card.source.value,
                generation_id=card.generation_id,
                user_id=user_id,
            )
            for card in cards
        ]
        try:
            self.db.add_all(new_cards)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating flashcards: {str(e)}")
            raise DatabaseError("Failed to create flashcards")

        return [FlashcardResponse.model_validate(card) for card in new_cards]

    def update_flashcard(self, user_id: str, flashcard_id: int, update: UpdateFlashcardRequest) -> FlashcardResponse:
        """Update front and/or back. Source and generation cannot change."""
        require_user(user_id)
        card = self._get_owned(user_id, flashcard_id)

        if update.front is not None:
            card.front = update.front
        if update.back is not None:
            card.back = update.back

        try:
            self.db.commit()
            self.db.refresh(card)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating flashcard {flashcard_id}: {str(e)}")
            raise DatabaseError("Failed to update flashcard")

        return FlashcardResponse.model_validate(card)

    def delete_flashcard(self, user_id: str, flashcard_id: int) -> DeleteFlashcardResponse:
        """Hard-delete a flashcard owned by the user."""
        require_user(user_id)
        try:
            deleted = self.db.query(Flashcard).filter(
                Flashcard.id == flashcard_id,
                Flashcard.user_id == user_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting flashcard {flashcard_id}: {str(e)}")
            raise DatabaseError("Failed to delete flashcard")

        if deleted == 0:
            raise NotFoundError("Flashcard not found")
        return DeleteFlashcardResponse()
