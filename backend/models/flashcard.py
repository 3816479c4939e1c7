from datetime import datetime, UTC
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, CheckConstraint, Index
from sqlalchemy.orm import relationship

from .base import Base
from .enums import FlashcardSource

class Flashcard(Base):
    __tablename__ = "flashcards"

    id = Column(Integer, primary_key=True)
    front = Column(String(200), nullable=False)
    back = Column(String(500), nullable=False)
    source = Column(String(20), nullable=False, default=FlashcardSource.MANUAL.value)

    # Set iff the card came out of an AI generation
    generation_id = Column(Integer, ForeignKey('generations.id'), nullable=True)
    user_id = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    generation = relationship("Generation", back_populates="flashcards")

    __table_args__ = (
        CheckConstraint(
            "source IN ('manual', 'ai-full', 'ai-edited')",
            name='ck_flashcards_source'
        ),
        CheckConstraint(
            "(source = 'manual' AND generation_id IS NULL) OR "
            "(source IN ('ai-full', 'ai-edited') AND generation_id IS NOT NULL)",
            name='ck_flashcards_generation_source'
        ),
        Index('ix_flashcards_user_id', 'user_id'),
        Index('ix_flashcards_generation_id', 'generation_id'),
    )

    @property
    def source_type(self) -> FlashcardSource:
        return FlashcardSource(self.source)
