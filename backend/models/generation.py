from datetime import datetime, UTC
from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import relationship

from .base import Base

class Generation(Base):
    """One LLM invocation that produced flashcard suggestions.

    Suggestions themselves are returned to the caller and never stored; this row
    only keeps the metadata needed for auditing and acceptance statistics.
    """
    __tablename__ = "generations"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    generated_count = Column(Integer, nullable=False)

    # MD5 of the submitted text; used for analytics, not uniqueness
    source_text_hash = Column(String(32), nullable=False)
    source_text_length = Column(Integer, nullable=False)
    generation_duration = Column(Integer, nullable=False)  # milliseconds

    # Written when the suggestions are accepted
    accepted_unedited_count = Column(Integer, nullable=False, default=0)
    accepted_edited_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    flashcards = relationship("Flashcard", back_populates="generation")

    __table_args__ = (
        Index('ix_generations_user_id', 'user_id'),
        Index('ix_generations_source_text_hash', 'source_text_hash'),
    )

    @property
    def accepted_count(self) -> int:
        return (self.accepted_unedited_count or 0) + (self.accepted_edited_count or 0)

class GenerationErrorLog(Base):
    """Append-only record of a failed generation attempt."""
    __tablename__ = "generation_error_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    source_text_hash = Column(String(32), nullable=False)
    source_text_length = Column(Integer, nullable=False)
    error_code = Column(String(100), nullable=False)
    error_message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    __table_args__ = (
        Index('ix_generation_error_logs_user_id', 'user_id'),
    )
