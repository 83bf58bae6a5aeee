# app/schemas/book.py
from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from app.schemas.common import CamelModel, SuccessResponse

BookStatus = Literal["PLANNING", "GENERATING", "COMPLETED", "FAILED"]
GenerationStep = Literal["PROMPT", "BACK_COVER", "OUTLINE", "CHAPTERS", "COMPLETE"]


class BookCreate(CamelModel):
    """
    Payload for creating a book.

    Both fields are required; missing or blank values are rejected by
    BookService with a 400.
    """

    title: str | None = Field(default=None, max_length=300)
    prompt: str | None = None


class BookUpdate(CamelModel):
    """Partial update. Only provided (non-empty) fields are changed."""

    title: str | None = Field(default=None, max_length=300)
    prompt: str | None = None
    status: BookStatus | None = None


class BookRead(CamelModel):
    id: str
    user_id: str
    title: str
    prompt: str
    status: BookStatus
    generation_step: GenerationStep
    created_at: datetime
    updated_at: datetime


class StoryMemoryResponse(SuccessResponse):
    """
    `data` is None and `has_story_memory` is False for books generated
    before the enhanced pipeline existed.
    """

    has_story_memory: bool
    data: dict[str, Any] | None = None
    message: str | None = None


class BookSettingsInput(CamelModel):
    """
    Settings payload. genre, target_audience, tone and ending_type are
    required; BookService rejects missing or empty values with a 400.
    """

    language: str = Field(default="en", max_length=10)
    word_count: int = Field(default=50_000, ge=1)
    genre: str | None = None
    target_audience: str | None = None
    tone: str | None = None
    ending_type: str | None = None
    structure: str = "three-act"
    character_names: list[str] = Field(default_factory=list)
    inspiration_books: list[str] = Field(default_factory=list)


class BookSettingsRead(CamelModel):
    id: str
    book_id: str
    language: str
    word_count: int
    genre: str
    target_audience: str
    tone: str
    ending_type: str
    structure: str
    character_names: list[str]
    inspiration_books: list[str]
    created_at: datetime
    updated_at: datetime


class BookSettingsResponse(SuccessResponse):
    """`settings` is None until the owner has saved them once."""

    settings: BookSettingsRead | None = None
