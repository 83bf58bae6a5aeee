# app/routers/books.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import RequestContext, get_request_context
from app.database import get_session
from app.repositories.book_repo import BookRepository
from app.schemas.book import (
    BookCreate,
    BookRead,
    BookSettingsInput,
    BookSettingsRead,
    BookSettingsResponse,
    BookUpdate,
    StoryMemoryResponse,
)
from app.schemas.common import SuccessResponse
from app.services.book_service import BookService, NO_STORY_MEMORY_MESSAGE
from app.services.story_memory_service import StoryMemoryReader, get_story_memory_reader

router = APIRouter(prefix="/books", tags=["Books"])

repo = BookRepository()
service = BookService(repo)


@router.get("", response_model=list[BookRead])
def list_my_books(
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's books, most recently updated first.
    """
    identity = ctx.require_user()
    return service.list_books(session, identity.id, skip, limit)


@router.post("", response_model=BookRead)
def create_book(
    payload: BookCreate,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Create a new book in PLANNING state for the authenticated user.

    Errors:
      - 400 if title or prompt is missing
    """
    identity = ctx.require_user()
    return service.create_book(session, identity.id, payload)


@router.get("/{book_id}", response_model=BookRead)
def get_book(
    book_id: str,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Get a single book belonging to the current user.

    - 404 if the book does not exist or belongs to someone else.
    """
    identity = ctx.require_user()
    return service.get_owned_book(session, book_id, identity.id)


@router.put("/{book_id}", response_model=BookRead)
def update_book(
    book_id: str,
    payload: BookUpdate,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Update title, prompt or status of an owned book (partial update).
    """
    identity = ctx.require_user()
    return service.update_book(session, book_id, identity.id, payload)


@router.delete("/{book_id}", response_model=SuccessResponse)
def delete_book(
    book_id: str,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Delete an owned book together with its story memory.
    """
    identity = ctx.require_user()
    service.delete_book(session, book_id, identity.id)
    return SuccessResponse()


@router.get("/{book_id}/story-memory", response_model=StoryMemoryResponse)
def get_story_memory(
    book_id: str,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
    reader: StoryMemoryReader = Depends(get_story_memory_reader),
):
    """
    Story memory (themes, characters, locations, timeline) of an owned book.

    Responses:
      - 200 hasStoryMemory=true with data
      - 200 hasStoryMemory=false if the book predates the enhanced pipeline
      - 401 if not signed in
      - 404 if the book is missing or not owned (same body either way)
    """
    identity = ctx.require_user()
    data = service.get_story_memory(session, book_id, identity.id, reader)

    if data is None:
        return StoryMemoryResponse(
            has_story_memory=False,
            data=None,
            message=NO_STORY_MEMORY_MESSAGE,
        )
    return StoryMemoryResponse(has_story_memory=True, data=data)


@router.post("/{book_id}/settings", response_model=BookSettingsResponse)
def save_book_settings(
    book_id: str,
    payload: BookSettingsInput,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Create or replace the generation settings of an owned book.

    Defaults: language "en", wordCount 50000, structure "three-act".

    Errors:
      - 400 if genre, targetAudience, tone or endingType is missing
      - 404 if the book is missing or not owned
    """
    identity = ctx.require_user()
    settings = service.save_settings(session, book_id, identity.id, payload)
    return BookSettingsResponse(settings=BookSettingsRead.model_validate(settings))


@router.get("/{book_id}/settings", response_model=BookSettingsResponse)
def get_book_settings(
    book_id: str,
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Generation settings of an owned book; `settings` is null if never saved.
    """
    identity = ctx.require_user()
    settings = service.get_settings(session, book_id, identity.id)
    if settings is None:
        return BookSettingsResponse(settings=None)
    return BookSettingsResponse(settings=BookSettingsRead.model_validate(settings))
