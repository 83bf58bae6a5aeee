# app/routers/subscription.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import RequestContext, get_request_context
from app.database import get_session
from app.repositories.user_repo import UserRepository
from app.schemas.usage import UsageResponse
from app.services.usage_service import UsageService

router = APIRouter(prefix="/subscription", tags=["Subscription"])

service = UsageService(UserRepository())


@router.get("/usage", response_model=UsageResponse)
def get_usage(
    ctx: RequestContext = Depends(get_request_context),
    session: Session = Depends(get_session),
):
    """
    Current month's generation usage and remaining quota.

    Counters are reset first if a new month has started.
    """
    identity = ctx.require_user()
    return UsageResponse(data=service.get_usage_overview(session, identity.id))
