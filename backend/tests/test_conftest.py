import pytest
from sqlalchemy.orm import Session
from sqlalchemy import text
from fastapi.testclient import TestClient

from models.generation import Generation

def test_test_db_fixture(test_db):
    """Test that the test_db fixture provides a working database session."""
    assert isinstance(test_db, Session)

    # Test that we can execute queries
    result = test_db.execute(text("SELECT 1")).scalar()
    assert result == 1

def test_test_db_has_application_tables(test_db):
    tables = {
        row[0] for row in test_db.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
    }
    assert {"flashcards", "generations", "generation_error_logs"} <= tables

def test_test_db_isolation(test_db, make_generation):
    """Test that each test gets a fresh database."""
    make_generation()
    assert test_db.query(Generation).count() == 1

def test_test_db_isolation_2(test_db):
    """Test that we get a fresh database (row from previous test should not exist)."""
    assert test_db.query(Generation).count() == 0

def test_client_fixture(client):
    """Test that the client fixture provides a working FastAPI test client."""
    assert isinstance(client, TestClient)

    response = client.get("/")
    assert response.status_code == 200

def test_flashcard_source_check_constraint(test_db):
    """The table rejects a manual card that references a generation."""
    test_db.execute(text(
        "INSERT INTO generations (id, user_id, model, generated_count, source_text_hash, "
        "source_text_length, generation_duration, accepted_unedited_count, accepted_edited_count) "
        "VALUES (1, 'u', 'm', 1, 'h', 1000, 1, 0, 0)"
    ))
    test_db.commit()

    with pytest.raises(Exception):
        test_db.execute(text(
            "INSERT INTO flashcards (front, back, source, generation_id, user_id) "
            "VALUES ('f', 'b', 'manual', 1, 'u')"
        ))
        test_db.commit()
    test_db.rollback()

def test_client_dependency_override(client, test_db, auth_headers):
    """Data created through the client is visible in test_db."""
    response = client.post(
        "/api/flashcards",
        json={"front": "Test front", "back": "Test back"},
        headers=auth_headers
    )
    assert response.status_code == 201

    result = test_db.execute(text("SELECT front FROM flashcards")).scalar()
    assert result == "Test front"
