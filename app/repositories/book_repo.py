# app/repositories/book_repo.py
from typing import Any

from sqlmodel import Session, select

from app.models.book import Book, BookSettings, StoryMemory


class BookRepository:
    """
    Data access layer for books.

    There is deliberately no lookup by id alone: every query that
    targets a single book also filters on its owner.
    """

    def find_for_owner(self, session: Session, book_id: str, owner_id: str) -> Book | None:
        """Return the book only if it exists AND belongs to owner_id."""
        stmt = select(Book).where(Book.id == book_id, Book.user_id == owner_id)
        return session.exec(stmt).first()

    def list_for_owner(
        self,
        session: Session,
        owner_id: str,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Book]:
        stmt = (
            select(Book)
            .where(Book.user_id == owner_id)
            .order_by(Book.updated_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def create(self, session: Session, book: Book) -> Book:
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    def update(self, session: Session, book: Book) -> Book:
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    def delete(self, session: Session, book: Book) -> None:
        """Delete a book. Its settings and story memory rows go with it (ORM cascade)."""
        session.delete(book)
        session.commit()

    # ---- Story memory ----

    def get_story_memory(self, session: Session, book_id: str) -> StoryMemory | None:
        """
        Story memory rows are keyed by book. Callers must have checked
        ownership of `book_id` with find_for_owner() first.
        """
        stmt = select(StoryMemory).where(StoryMemory.book_id == book_id)
        return session.exec(stmt).first()

    # ---- Settings ----

    def get_settings(self, session: Session, book_id: str) -> BookSettings | None:
        stmt = select(BookSettings).where(BookSettings.book_id == book_id)
        return session.exec(stmt).first()

    def upsert_settings(self, session: Session, book_id: str, values: dict[str, Any]) -> BookSettings:
        """
        Insert the settings row for a book, or overwrite every given field
        of the existing one.
        """
        settings = self.get_settings(session, book_id)
        if settings is None:
            settings = BookSettings(book_id=book_id, **values)
        else:
            for key, value in values.items():
                setattr(settings, key, value)
        session.add(settings)
        session.commit()
        session.refresh(settings)
        return settings
