"""Redirect helpers shared by the HTML and SSE flows."""
from __future__ import annotations

import json
import logging
from urllib.parse import quote_plus, unquote_plus

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from vaev.sse import ServerSentEventGenerator

logger = logging.getLogger(__name__)


def next_target(request: Request) -> str:
    """Where a bounce-back should land: the decoded ``next`` query or ``/``.

    Only same-site paths are honoured.
    """
    target = unquote_plus(request.query_params.get("next", ""))
    if not target.startswith("/") or target.startswith("//") or target.startswith("/\\"):
        return "/"
    return target


def location_script(target: str) -> str:
    return f"window.location = {json.dumps(target)}"


def bounce_back(request: Request) -> RedirectResponse:
    target = next_target(request)
    logger.info("Redirecting user to %s", target)
    return RedirectResponse(target, status_code=303)


def bounce_back_sse(request: Request, sse: ServerSentEventGenerator) -> None:
    target = next_target(request)
    logger.info("Redirecting user to %s", target)
    sse.execute_script(location_script(target))


def with_next(to: str, request: Request) -> str:
    return f"{to}?next={quote_plus(request.url.path)}"


def redirect_to_sse(sse: ServerSentEventGenerator, to: str) -> None:
    sse.execute_script(location_script(to))


def destroy_cookie(response: Response, name: str) -> None:
    response.delete_cookie(name, path="/", secure=True, httponly=True, samesite="strict")
