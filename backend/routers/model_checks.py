from datetime import datetime, UTC
from fastapi import APIRouter, Depends
from dependencies import get_current_user_id, get_model_checker
from models.enums import ALLOWED_MODELS
from services.model_checker import ModelChecker
from api.models.responses.statistics import ModelCheckResponse

router = APIRouter()

@router.get("/check", response_model=ModelCheckResponse)
async def check_models(
    user_id: str = Depends(get_current_user_id),
    checker: ModelChecker = Depends(get_model_checker)
):
    """Report which of the selectable models OpenRouter currently lists."""
    models = await checker.check_models(ALLOWED_MODELS)
    return ModelCheckResponse(models=models, checked_at=datetime.now(UTC))
