from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional, Union
from database import get_db
from dependencies import get_current_user_id
from services.flashcard import FlashcardService
from api.models.requests.flashcard import (
    CreateFlashcardRequest,
    CreateMultipleFlashcardsRequest,
    GetFlashcardsQuery,
    UpdateFlashcardRequest,
    parse_path_id,
)
from api.models.responses.flashcard import (
    CreateMultipleFlashcardsResponse,
    DeleteFlashcardResponse,
    FlashcardResponse,
    PaginatedFlashcardsResponse,
)

router = APIRouter()

INVALID_FLASHCARD_ID = "Invalid flashcard ID"

@router.get("", response_model=PaginatedFlashcardsResponse)
async def list_flashcards(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    source: Optional[str] = Query(default=None),
    sort: Optional[str] = Query(default=None),
    order: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the current user's flashcards."""
    query = GetFlashcardsQuery(page=page, limit=limit, source=source, sort=sort, order=order)
    service = FlashcardService(db)
    return service.get_flashcards(user_id, query)

@router.post(
    "",
    status_code=201,
    response_model=Union[CreateMultipleFlashcardsResponse, FlashcardResponse]
)
async def create_flashcards(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a single flashcard, or several when the body has a ``flashcards`` list."""
    service = FlashcardService(db)
    if "flashcards" in payload:
        bulk = CreateMultipleFlashcardsRequest.model_validate(payload)
        return service.create_flashcards(user_id, bulk.flashcards)

    card = CreateFlashcardRequest.model_validate(payload)
    return service.create_flashcard(user_id, card)

@router.get("/{flashcard_id}", response_model=FlashcardResponse)
async def get_flashcard(
    flashcard_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    service = FlashcardService(db)
    return service.get_flashcard(user_id, parse_path_id(flashcard_id, INVALID_FLASHCARD_ID))

@router.put("/{flashcard_id}", response_model=FlashcardResponse)
async def update_flashcard(
    flashcard_id: str,
    update: UpdateFlashcardRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update the front and/or back of a flashcard."""
    service = FlashcardService(db)
    return service.update_flashcard(user_id, parse_path_id(flashcard_id, INVALID_FLASHCARD_ID), update)

@router.delete("/{flashcard_id}", response_model=DeleteFlashcardResponse)
async def delete_flashcard(
    flashcard_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Permanently delete a flashcard."""
    service = FlashcardService(db)
    return service.delete_flashcard(user_id, parse_path_id(flashcard_id, INVALID_FLASHCARD_ID))
