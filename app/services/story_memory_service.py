# app/services/story_memory_service.py
from typing import Any, Protocol

from sqlmodel import Session

from app.models.book import StoryMemory
from app.repositories.book_repo import BookRepository


class StoryMemoryReader(Protocol):
    """
    Read side of the book generation pipeline.

    The pipeline itself lives elsewhere; the API only needs this one call.
    Implementations return None when a book has no story memory.
    """

    def get_story_memory_data(self, session: Session, book_id: str) -> dict[str, Any] | None:
        ...


class DatabaseStoryMemoryReader:
    """Reads story memory straight from the story_memories table."""

    def __init__(self, repo: BookRepository):
        self.repo = repo

    def get_story_memory_data(self, session: Session, book_id: str) -> dict[str, Any] | None:
        memory = self.repo.get_story_memory(session, book_id)
        if memory is None:
            return None
        return self._to_payload(memory)

    @staticmethod
    def _to_payload(memory: StoryMemory) -> dict[str, Any]:
        # timeline is kept in insertion order, which is chronological
        return {
            "id": memory.id,
            "themes": memory.themes or [],
            "worldRules": memory.world_rules or [],
            "characters": memory.characters or [],
            "locations": memory.locations or [],
            "timeline": memory.timeline or [],
        }


def get_story_memory_reader() -> StoryMemoryReader:
    """FastAPI dependency; tests override it to plug in a fake pipeline."""
    return DatabaseStoryMemoryReader(BookRepository())
