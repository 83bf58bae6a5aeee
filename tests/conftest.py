"""Pytest configuration and fixtures.

Required settings are set here, before anything under `app` is imported,
because settings are read at import time.
"""

import os
import time
from types import SimpleNamespace
from unittest.mock import AsyncMock

TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["OPENAI_API_KEY"] = "sk-test-key"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.database import get_session
from app.main import app
from app.models.book import Book, StoryMemory
from app.models.user import User, UserSettings
from app.services.generation_service import TextGenerationGateway, get_generation_gateway


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory database, shared by every connection of one test, with FKs enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, _record):
        # SQLite only enforces FOREIGN KEY clauses when asked to
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """TestClient whose routes share the test session."""

    def _get_session():
        return session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# AUTH
# =============================================================================

def make_token(sub: str, email: str | None = None, role: str | None = None, expires_in: int = 3600) -> str:
    """Sign a Supabase-style access token with the test secret."""
    now = int(time.time())
    claims = {
        "sub": sub,
        "email": email or f"{sub}@example.com",
        "aud": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        "user_metadata": {"role": role} if role else {},
    }
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(sub: str, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, **kwargs)}"}


# =============================================================================
# ROWS
# =============================================================================

@pytest.fixture
def make_user(session):
    """Insert a user (with settings) and return it."""

    def _make(user_id: str = "user-1", name: str | None = "Ada", **fields) -> User:
        user = User(id=user_id, email=fields.pop("email", f"{user_id}@example.com"), name=name, **fields)
        session.add(user)
        session.add(UserSettings(user_id=user_id))
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_book(session):
    """Insert a book owned by `owner_id` and return it."""

    def _make(owner_id: str, title: str = "The Lighthouse", **fields) -> Book:
        book = Book(user_id=owner_id, title=title, prompt=fields.pop("prompt", "A keeper and a storm"), **fields)
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make


@pytest.fixture
def make_story_memory(session):
    def _make(book_id: str, **fields) -> StoryMemory:
        memory = StoryMemory(book_id=book_id, **fields)
        session.add(memory)
        session.commit()
        session.refresh(memory)
        return memory

    return _make


# =============================================================================
# LLM PROVIDER
# =============================================================================

class FakeStream:
    """Mimics openai.AsyncStream: async-iterable chunks plus close()."""

    def __init__(self, parts: list[str], error: Exception | None = None):
        self.parts = parts
        self.error = error
        self.closed = False

    def __aiter__(self):
        return self._chunks()

    async def _chunks(self):
        for part in self.parts:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=part))])
        if self.error is not None:
            raise self.error

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_openai():
    """Stand-in for AsyncOpenAI; set `create.return_value` / `side_effect` per test."""
    create = AsyncMock(return_value=FakeStream(["Hello", ", ", "world!"]))
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


@pytest.fixture
def gateway(fake_openai):
    return TextGenerationGateway(fake_openai, default_model="gpt-4o-mini")


@pytest.fixture
def ask_client(client, gateway):
    app.dependency_overrides[get_generation_gateway] = lambda: gateway
    return client
