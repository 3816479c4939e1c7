import asyncio
import hashlib
import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from api.errors import DatabaseError, NotFoundError, RateLimitError, ServiceUnavailableError, UnauthorizedError, ValidationError
from api.models.requests.generation import AcceptFlashcardItem, GetGenerationsQuery
from models.flashcard import Flashcard
from models.generation import Generation, GenerationErrorLog
from services.flashcard_generators import FlashcardGenerator, MockFlashcardGenerator
from services.generation import GenerationService
from services.ownership import verify_generation_ownership

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
MODEL = "mistralai/mistral-7b-instruct:free"

class FailingGenerator(FlashcardGenerator):
    def __init__(self, error):
        self.error = error

    async def generate(self, source_text, model, count, temperature):
        raise self.error

class FixedGenerator(FlashcardGenerator):
    """Returns a fixed list regardless of the requested count."""
    def __init__(self, suggestions):
        self.suggestions = suggestions

    async def generate(self, source_text, model, count, temperature):
        return list(self.suggestions)

def items(*edited_flags):
    return [
        AcceptFlashcardItem(front=f"Question {i}", back=f"Answer {i}", edited=flag)
        for i, flag in enumerate(edited_flags)
    ]

# --- generate_flashcards ---

@pytest.mark.parametrize("count", [1, 5, 20])
def test_generate_returns_requested_count_and_persists_generation(test_db, source_text, count):
    service = GenerationService(test_db, MockFlashcardGenerator())
    result = asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, count, 0.7))

    assert result.generated_count == count
    assert len(result.flashcard_suggestions) == count
    assert result.flashcard_suggestions[0].front == "Question 1 from the source text"
    assert result.flashcard_suggestions[0].back == "Answer 1 based on the content provided"
    assert result.model == MODEL
    assert result.generation_duration >= 0

    generations = test_db.query(Generation).all()
    assert len(generations) == 1
    assert generations[0].id == result.generation_id
    assert generations[0].generated_count == count
    assert generations[0].user_id == USER_ID
    assert generations[0].accepted_unedited_count == 0
    assert generations[0].accepted_edited_count == 0

    # Suggestions are never stored
    assert test_db.query(Flashcard).count() == 0

def test_generate_hashes_raw_text_and_stores_trimmed_length(test_db, source_text):
    raw = "  " + source_text + "\n"
    service = GenerationService(test_db, MockFlashcardGenerator())
    result = asyncio.run(service.generate_flashcards(USER_ID, raw, MODEL, 2, 0.7))

    assert result.source_text_hash == hashlib.md5(raw.encode("utf-8")).hexdigest()
    generation = test_db.query(Generation).one()
    assert generation.source_text_hash == result.source_text_hash
    assert generation.source_text_length == len(source_text.strip())

def test_generated_count_reflects_actual_suggestions(test_db, source_text):
    service = GenerationService(test_db, FixedGenerator([{"front": "Q", "back": "A"}] * 2))
    result = asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 5, 0.7))
    assert result.generated_count == 2
    assert test_db.query(Generation).one().generated_count == 2

def test_generate_requires_user(test_db, source_text):
    service = GenerationService(test_db, MockFlashcardGenerator())
    with pytest.raises(UnauthorizedError):
        asyncio.run(service.generate_flashcards("", source_text, MODEL, 3, 0.7))
    assert test_db.query(Generation).count() == 0

def test_generator_failure_is_logged_and_reported_as_service_unavailable(test_db, source_text):
    service = GenerationService(test_db, FailingGenerator(RateLimitError("Model 'x' is unavailable. Too many requests")))
    with pytest.raises(ServiceUnavailableError) as exc_info:
        asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))

    assert exc_info.value.message == "Model 'x' is unavailable. Too many requests"
    assert test_db.query(Generation).count() == 0

    log = test_db.query(GenerationErrorLog).one()
    assert log.user_id == USER_ID
    assert log.model == MODEL
    assert log.error_code == "RATE_LIMIT_EXCEEDED"
    assert log.error_message == "Model 'x' is unavailable. Too many requests"
    assert log.source_text_hash == hashlib.md5(source_text.encode("utf-8")).hexdigest()

def test_unexpected_generator_error_uses_exception_type_as_code(test_db, source_text):
    service = GenerationService(test_db, FailingGenerator(ValueError("Failed to parse AI response: bad json")))
    with pytest.raises(ServiceUnavailableError) as exc_info:
        asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))

    assert exc_info.value.message == "Failed to parse AI response: bad json"
    assert test_db.query(GenerationErrorLog).one().error_code == "ValueError"

def test_empty_error_message_falls_back(test_db, source_text):
    service = GenerationService(test_db, FailingGenerator(RuntimeError()))
    with pytest.raises(ServiceUnavailableError) as exc_info:
        asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))
    assert exc_info.value.message == "AI service unavailable"

def test_failure_saving_generation_is_database_error(test_db, source_text):
    service = GenerationService(test_db, MockFlashcardGenerator())
    with patch.object(service, "_save_generation", side_effect=DatabaseError("Failed to save generation record")):
        with pytest.raises(DatabaseError) as exc_info:
            asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))

    assert exc_info.value.message == "Failed to save generation record"
    assert test_db.query(GenerationErrorLog).one().error_code == "DATABASE_ERROR"

def test_commit_failure_saving_generation_is_database_error(test_db, source_text):
    service = GenerationService(test_db, MockFlashcardGenerator())
    real_commit = test_db.commit
    calls = {"n": 0}

    def fail_first_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise SQLAlchemyError("disk full")
        real_commit()

    with patch.object(test_db, "commit", side_effect=fail_first_commit):
        with pytest.raises(DatabaseError):
            asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))

    assert test_db.query(Generation).count() == 0
    assert test_db.query(GenerationErrorLog).count() == 1

def test_error_log_failure_does_not_mask_original_error(test_db, source_text):
    service = GenerationService(test_db, FailingGenerator(ServiceUnavailableError("provider down")))

    with patch.object(test_db, "commit", side_effect=SQLAlchemyError("log table missing")):
        with pytest.raises(ServiceUnavailableError) as exc_info:
            asyncio.run(service.generate_flashcards(USER_ID, source_text, MODEL, 3, 0.7))

    assert exc_info.value.message == "provider down"

def test_log_generation_error_never_raises(test_db):
    service = GenerationService(test_db, MockFlashcardGenerator())
    with patch.object(test_db, "add", side_effect=RuntimeError("session closed")):
        service.log_generation_error(USER_ID, MODEL, "text", ValueError("boom"))

# --- accept_generation ---

def test_accept_partitions_edited_and_unedited(test_db, make_generation):
    generation = make_generation(generated_count=5)
    service = GenerationService(test_db, MockFlashcardGenerator())

    result = service.accept_generation(USER_ID, generation.id, items(True, False, True, False, False))

    assert result.message == "Flashcards successfully saved"
    assert result.accepted_count == 5
    assert result.accepted_unedited_count == 3
    assert result.accepted_edited_count == 2
    assert len(result.flashcards) == 5

    sources = [card.source for card in result.flashcards]
    assert sources.count("ai-edited") == 2
    assert sources.count("ai-full") == 3
    assert all(card.generation_id == generation.id for card in result.flashcards)

    stored = test_db.query(Flashcard).filter(Flashcard.generation_id == generation.id).all()
    assert len(stored) == 5
    assert all(card.user_id == USER_ID for card in stored)

    test_db.refresh(generation)
    assert (generation.accepted_unedited_count, generation.accepted_edited_count) == (3, 2)

def test_accept_foreign_generation_is_not_found_and_writes_nothing(test_db, make_generation):
    generation = make_generation(user_id=OTHER_USER_ID)
    service = GenerationService(test_db, MockFlashcardGenerator())

    with pytest.raises(NotFoundError) as exc_info:
        service.accept_generation(USER_ID, generation.id, items(False, True))

    assert exc_info.value.message == "Generation not found or access denied"
    assert test_db.query(Flashcard).count() == 0

def test_accept_missing_generation_is_not_found(test_db):
    service = GenerationService(test_db, MockFlashcardGenerator())
    with pytest.raises(NotFoundError):
        service.accept_generation(USER_ID, 9999, items(False))

def test_accept_twice_is_rejected(test_db, make_generation):
    generation = make_generation()
    service = GenerationService(test_db, MockFlashcardGenerator())
    service.accept_generation(USER_ID, generation.id, items(False, True))

    with pytest.raises(ValidationError) as exc_info:
        service.accept_generation(USER_ID, generation.id, items(False))

    assert exc_info.value.message == "Generation has already been accepted"
    assert test_db.query(Flashcard).count() == 2

def test_accept_insert_failure_is_database_error(test_db, make_generation):
    generation = make_generation()
    service = GenerationService(test_db, MockFlashcardGenerator())

    with patch.object(test_db, "commit", side_effect=SQLAlchemyError("constraint failed")):
        with pytest.raises(DatabaseError) as exc_info:
            service.accept_generation(USER_ID, generation.id, items(False, False))

    assert exc_info.value.message == "Failed to create flashcards"
    assert test_db.query(Flashcard).count() == 0

def test_accept_statistics_failure_is_only_logged(test_db, make_generation):
    generation = make_generation()
    generation_id = generation.id
    service = GenerationService(test_db, MockFlashcardGenerator())
    real_commit = test_db.commit
    calls = {"n": 0}

    def fail_second_commit():
        calls["n"] += 1
        if calls["n"] == 2:
            raise SQLAlchemyError("lock timeout")
        real_commit()

    with patch.object(test_db, "commit", side_effect=fail_second_commit):
        result = service.accept_generation(USER_ID, generation_id, items(True, False, False))

    assert result.accepted_count == 3
    assert test_db.query(Flashcard).filter(Flashcard.generation_id == generation_id).count() == 3

    stored = test_db.get(Generation, generation_id)
    assert (stored.accepted_unedited_count, stored.accepted_edited_count) == (0, 0)

# --- get_generations ---

def test_get_generations_is_owner_scoped_and_paginated(test_db, make_generation):
    for _ in range(3):
        make_generation()
    make_generation(user_id=OTHER_USER_ID)
    service = GenerationService(test_db, MockFlashcardGenerator())

    result = service.get_generations(USER_ID, GetGenerationsQuery(page=1, limit=2))
    assert result.pagination.total == 3
    assert result.pagination.total_pages == 2
    assert len(result.data) == 2

    second = service.get_generations(USER_ID, GetGenerationsQuery(page=2, limit=2))
    assert len(second.data) == 1
    assert {g.id for g in result.data}.isdisjoint({g.id for g in second.data})

def test_get_generations_order(test_db, make_generation):
    first = make_generation()
    second = make_generation()
    service = GenerationService(test_db, MockFlashcardGenerator())

    ascending = service.get_generations(USER_ID, GetGenerationsQuery(order="asc"))
    descending = service.get_generations(USER_ID, GetGenerationsQuery(order="desc"))

    assert [g.id for g in ascending.data] == [first.id, second.id]
    assert [g.id for g in descending.data] == [second.id, first.id]

def test_get_generations_empty(test_db):
    service = GenerationService(test_db, MockFlashcardGenerator())
    result = service.get_generations(USER_ID)
    assert result.data == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0

# --- ownership ---

def test_ownership_query_failure_is_logged_and_raised(test_db, caplog):
    with patch.object(test_db, "query", side_effect=SQLAlchemyError("connection lost")):
        with caplog.at_level("ERROR", logger="services.ownership"):
            with pytest.raises(DatabaseError) as exc_info:
                verify_generation_ownership(test_db, USER_ID, 7)

    assert exc_info.value.message == "Failed to verify generation ownership"
    assert any(
        record.name == "services.ownership" and "connection lost" in record.getMessage()
        for record in caplog.records
    )
