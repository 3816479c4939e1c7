from fastapi import APIRouter, Depends, Query
from typing import Optional
from dependencies import get_current_user_id, get_generation_service
from services.generation import GenerationService
from api.models.requests.flashcard import parse_path_id
from api.models.requests.generation import (
    AcceptGeneratedFlashcardsRequest,
    GenerateFlashcardsRequest,
    GetGenerationsQuery,
)
from api.models.responses.generation import (
    AcceptGeneratedFlashcardsResponse,
    GenerateFlashcardsResponse,
    PaginatedGenerationsResponse,
)

router = APIRouter()

@router.post("/generate", response_model=GenerateFlashcardsResponse, response_model_exclude_none=True)
async def generate_flashcards(
    request: GenerateFlashcardsRequest,
    user_id: str = Depends(get_current_user_id),
    service: GenerationService = Depends(get_generation_service)
):
    """Generate flashcard suggestions from source text.

    The suggestions are returned but not saved; accept them through
    ``POST /api/generations/{id}/accept``.
    """
    return await service.generate_flashcards(
        user_id,
        request.source_text,
        request.model,
        request.count,
        request.temperature
    )

@router.post("/{generation_id}/accept", status_code=201, response_model=AcceptGeneratedFlashcardsResponse)
async def accept_generated_flashcards(
    generation_id: str,
    request: AcceptGeneratedFlashcardsRequest,
    user_id: str = Depends(get_current_user_id),
    service: GenerationService = Depends(get_generation_service)
):
    """Save the suggestions the user kept, marking which ones were edited."""
    return service.accept_generation(
        user_id,
        parse_path_id(generation_id, "Invalid generation ID"),
        request.flashcards
    )

@router.get("", response_model=PaginatedGenerationsResponse)
async def list_generations(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    sort: Optional[str] = Query(default=None),
    order: Optional[str] = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: GenerationService = Depends(get_generation_service)
):
    """Generation history of the current user."""
    query = GetGenerationsQuery(page=page, limit=limit, sort=sort, order=order)
    return service.get_generations(user_id, query)
