# app/routers/landing.py
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.auth import RequestContext, get_request_context
from app.core.config import get_settings

router = APIRouter(tags=["Landing"])
settings = get_settings()

HERO_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body>
  <main>
    <h1>Write your next book with AI</h1>
    <p>Describe your idea and get a complete, structured book back.</p>
    <a href="/signup">Get started</a>
    <a href="/login">Sign in</a>
  </main>
</body>
</html>
"""


@router.get("/", include_in_schema=False)
def landing(ctx: RequestContext = Depends(get_request_context)):
    """
    Landing page.

    Signed-in users are sent to the dashboard; everyone else gets the
    marketing page.
    """
    if ctx.identity is not None:
        return RedirectResponse(settings.DASHBOARD_PATH, status_code=307)
    return HTMLResponse(HERO_HTML.format(title=settings.PROJECT_NAME))
