import os
import sys
import tempfile
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configure the application for tests before anything imports config.env
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="flashcards-test-logs-"))

# Add the backend directory to the Python path
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from database import get_db
from dependencies import get_flashcard_generator
from models.base import Base
from models.flashcard import Flashcard
from models.generation import Generation
from services.flashcard_generators import MockFlashcardGenerator
from main import app

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

@pytest.fixture
def test_db():
    # Create engine with special configuration for in-memory SQLite
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Create a new session for each test
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop all tables after tests
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def generator():
    """Generator injected into the API; tests may swap it for a failing one."""
    return MockFlashcardGenerator()

@pytest.fixture
def client(test_db, generator):
    # Override the get_db dependency
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_flashcard_generator] = lambda: generator

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clear dependency override after test
    app.dependency_overrides.clear()

@pytest.fixture
def auth_headers():
    return {"X-User-Id": USER_ID}

@pytest.fixture
def other_auth_headers():
    return {"X-User-Id": OTHER_USER_ID}

@pytest.fixture
def source_text():
    """Source text comfortably inside the accepted 1000-10000 character range."""
    sentence = "Photosynthesis converts light energy into chemical energy stored in glucose. "
    return sentence * 20

@pytest.fixture
def make_generation(test_db):
    def _make_generation(user_id=USER_ID, model="mistralai/mistral-7b-instruct:free", generated_count=3, **overrides):
        fields = {
            "source_text_hash": "0" * 32,
            "source_text_length": 1500,
            "generation_duration": 1200,
            **overrides,
        }
        generation = Generation(
            user_id=user_id,
            model=model,
            generated_count=generated_count,
            **fields
        )
        test_db.add(generation)
        test_db.commit()
        test_db.refresh(generation)
        return generation
    return _make_generation

@pytest.fixture
def make_flashcard(test_db):
    def _make_flashcard(user_id=USER_ID, front="Front", back="Back", source="manual", generation_id=None):
        card = Flashcard(front=front, back=back, source=source, generation_id=generation_id, user_id=user_id)
        test_db.add(card)
        test_db.commit()
        test_db.refresh(card)
        return card
    return _make_flashcard
