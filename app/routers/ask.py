# app/routers/ask.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.core.auth import RequestContext, get_request_context
from app.schemas.ask import AskRequest, parse_messages
from app.services.generation_service import TextGenerationGateway, get_generation_gateway

router = APIRouter(prefix="/ask", tags=["AI"])
logger = logging.getLogger(__name__)


@router.post("", response_class=StreamingResponse)
async def ask(
    payload: AskRequest,
    ctx: RequestContext = Depends(get_request_context),
    gateway: TextGenerationGateway = Depends(get_generation_gateway),
):
    """
    Stream a chat completion back as plain text chunks.

    Body:
      - messages: [{role, content}, ...] (required, may be empty)
      - model: optional model id, defaults to DEFAULT_MODEL

    Auth:
      - None. Anonymous callers are allowed.

    Errors:
      - 400 if messages is missing or malformed
      - 500 if the provider rejects or cannot serve the request
    """
    messages = parse_messages(payload.messages)
    options = gateway.default_options(model=payload.model)

    logger.debug(
        "Ask request: user=%s, model=%s, messages=%d",
        ctx.identity.id if ctx.identity else "anonymous", options.model, len(messages),
    )

    chunks = await gateway.stream_completion(messages, options)
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")
