"""Authorization guards for user-scoped rows.

The database does not isolate rows per user, so every service method that
reads or writes a user-scoped row calls one of these first.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.errors import DatabaseError, NotFoundError, UnauthorizedError
from models.generation import Generation

logger = logging.getLogger(__name__)


def require_user(user_id: Optional[str]) -> str:
    if user_id is None or not str(user_id).strip():
        raise UnauthorizedError()
    return user_id


def verify_generation_ownership(db: Session, user_id: str, generation_id: int) -> Generation:
    """Return the generation if it exists and belongs to ``user_id``.

    A missing row and a row owned by someone else are indistinguishable to the caller.
    """
    try:
        generation = db.query(Generation).filter(
            Generation.id == generation_id,
            Generation.user_id == user_id
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Error verifying ownership of generation {generation_id}: {str(e)}")
        raise DatabaseError("Failed to verify generation ownership")

    if generation is None:
        raise NotFoundError("Generation not found or access denied")
    return generation
