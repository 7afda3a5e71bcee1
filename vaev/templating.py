"""Jinja2 environment for pages and SSE fragments."""
import time
from pathlib import Path
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from vaev.security.identity import get_user
from vaev.security.session import CSRF_TOKEN_FIELD, get_csrf_token
from vaev.sse import MERGE_MODE_APPEND, ServerSentEventGenerator


def _template_dir() -> Path:
    return Path(__file__).resolve().parent / "templates"


templates = Jinja2Templates(directory=str(_template_dir()))


def asset_base(request: Request) -> str:
    settings = request.app.state.settings
    return settings.DEV_ASSET_SERVER.rstrip("/") if settings.is_development else "/dist"


def page_context(request: Request, **extra: Any) -> Dict[str, Any]:
    context: Dict[str, Any] = {
        "csrf_token": get_csrf_token(request),
        "csrf_field": CSRF_TOKEN_FIELD,
        "asset_base": asset_base(request),
        "user": get_user(request),
    }
    context.update(extra)
    return context


def render_page(request: Request, name: str, **extra: Any) -> HTMLResponse:
    return templates.TemplateResponse(request, name, page_context(request, **extra))


def render_fragment(name: str, **context: Any) -> str:
    """Render a template to a string, for embedding in an SSE event."""
    return templates.get_template(name).render(**context)


def send_error_message(sse: ServerSentEventGenerator, message: str) -> None:
    """Append an error toast to ``#toaster``."""
    toast = render_fragment("toast_error.html", message=message, toast_id=int(time.time() * 1000))
    sse.merge_fragments(toast, selector="#toaster", merge_mode=MERGE_MODE_APPEND)
