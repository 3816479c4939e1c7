from .base import Base
from .enums import (
    FlashcardSource,
    FlashcardSortField,
    GenerationSortField,
    SortOrder,
    ALLOWED_MODELS,
    DEFAULT_MODEL,
)
from .flashcard import Flashcard
from .generation import Generation, GenerationErrorLog

__all__ = [
    'Base',
    'FlashcardSource',
    'FlashcardSortField',
    'GenerationSortField',
    'SortOrder',
    'ALLOWED_MODELS',
    'DEFAULT_MODEL',
    'Flashcard',
    'Generation',
    'GenerationErrorLog',
]
