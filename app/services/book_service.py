# app/services/book_service.py
from typing import Any

from sqlmodel import Session

from app.core.errors import NotFoundError, ValidationError
from app.models.book import Book, BookSettings
from app.repositories.book_repo import BookRepository
from app.schemas.book import BookCreate, BookSettingsInput, BookUpdate
from app.services.story_memory_service import StoryMemoryReader

# Same wording whether the book is missing or owned by someone else
BOOK_NOT_FOUND = "Book not found or access denied"

NO_STORY_MEMORY_MESSAGE = (
    "No story memory data found. This book may not have been generated "
    "with the enhanced AI system."
)

MISSING_SETTINGS_FIELDS = "Missing required fields: genre, targetAudience, tone, endingType"


class BookService:
    """
    Business logic for books.

    Every single-book operation starts with get_owned_book(), so a
    caller can never read or change a book that belongs to another user.
    """

    def __init__(self, repo: BookRepository):
        self.repo = repo

    def get_owned_book(self, session: Session, book_id: str, owner_id: str) -> Book:
        """
        Raises:
            NotFoundError: if the book does not exist or is not owned by
                owner_id. Both cases look identical to the caller.
        """
        book = self.repo.find_for_owner(session, book_id, owner_id)
        if not book:
            raise NotFoundError(BOOK_NOT_FOUND)
        return book

    def list_books(self, session: Session, owner_id: str, skip: int = 0, limit: int = 50) -> list[Book]:
        return self.repo.list_for_owner(session, owner_id, skip, limit)

    def create_book(self, session: Session, owner_id: str, payload: BookCreate) -> Book:
        title = (payload.title or "").strip()
        prompt = (payload.prompt or "").strip()
        if not title or not prompt:
            raise ValidationError("Title and prompt are required")

        book = Book(
            user_id=owner_id,
            title=title,
            prompt=prompt,
            status="PLANNING",
            generation_step="PROMPT",
        )
        return self.repo.create(session, book)

    def update_book(self, session: Session, book_id: str, owner_id: str, payload: BookUpdate) -> Book:
        book = self.get_owned_book(session, book_id, owner_id)

        if payload.title and payload.title.strip():
            book.title = payload.title.strip()
        if payload.prompt and payload.prompt.strip():
            book.prompt = payload.prompt.strip()
        if payload.status:
            book.status = payload.status

        return self.repo.update(session, book)

    def delete_book(self, session: Session, book_id: str, owner_id: str) -> None:
        book = self.get_owned_book(session, book_id, owner_id)
        self.repo.delete(session, book)

    def get_story_memory(
        self,
        session: Session,
        book_id: str,
        owner_id: str,
        reader: StoryMemoryReader,
    ) -> dict[str, Any] | None:
        """
        Story memory for an owned book, or None if the book predates
        the enhanced pipeline.

        Raises:
            NotFoundError: book missing or owned by someone else.
        """
        book = self.get_owned_book(session, book_id, owner_id)
        return reader.get_story_memory_data(session, book.id)

    def save_settings(
        self,
        session: Session,
        book_id: str,
        owner_id: str,
        payload: BookSettingsInput,
    ) -> BookSettings:
        """
        Create or overwrite the generation settings of an owned book.

        Raises:
            ValidationError: genre, target_audience, tone or ending_type
                missing or empty. Checked before the ownership lookup.
            NotFoundError: book missing or owned by someone else.
        """
        if not (payload.genre and payload.target_audience and payload.tone and payload.ending_type):
            raise ValidationError(MISSING_SETTINGS_FIELDS)

        book = self.get_owned_book(session, book_id, owner_id)
        return self.repo.upsert_settings(session, book.id, payload.model_dump())

    def get_settings(self, session: Session, book_id: str, owner_id: str) -> BookSettings | None:
        book = self.get_owned_book(session, book_id, owner_id)
        return self.repo.get_settings(session, book.id)
