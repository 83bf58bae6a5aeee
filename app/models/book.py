# app/models/book.py
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class Book(SQLModel, table=True):
    """
    A book owned by exactly one user.

    Every read or write goes through BookRepository.find_for_owner(),
    which filters on (id, user_id) together.
    """

    __tablename__ = "books"

    id: str = Field(default_factory=_new_id, primary_key=True, index=True)

    user_id: str = Field(foreign_key="users.id", index=True)

    title: str = Field(max_length=300)
    prompt: str

    # PLANNING | GENERATING | COMPLETED | FAILED
    status: str = Field(default="PLANNING", index=True)

    # PROMPT | BACK_COVER | OUTLINE | CHAPTERS | COMPLETE
    generation_step: str = Field(default="PROMPT")

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
        index=True,
    )

    settings: Optional["BookSettings"] = Relationship(
        back_populates="book",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )
    story_memory: Optional["StoryMemory"] = Relationship(
        back_populates="book",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )


class BookSettings(SQLModel, table=True):
    """
    Generation settings chosen before planning starts.
    At most one row per book; saving again overwrites it.
    """

    __tablename__ = "book_settings"

    id: str = Field(default_factory=_new_id, primary_key=True)
    book_id: str = Field(foreign_key="books.id", unique=True, index=True)

    language: str = Field(default="en", max_length=10)
    word_count: int = Field(default=50_000, ge=1)
    genre: str
    target_audience: str
    tone: str
    ending_type: str
    structure: str = Field(default="three-act")
    character_names: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    inspiration_books: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    book: Optional[Book] = Relationship(back_populates="settings")


class StoryMemory(SQLModel, table=True):
    """
    Story state written by the book generation pipeline.

    Books generated before the enhanced pipeline have no row here.
    """

    __tablename__ = "story_memories"

    id: str = Field(default_factory=_new_id, primary_key=True)
    book_id: str = Field(foreign_key="books.id", unique=True, index=True)

    themes: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    world_rules: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    characters: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    locations: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    timeline: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    book: Optional[Book] = Relationship(back_populates="story_memory")
