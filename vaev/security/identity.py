"""Identity middleware: resolves the auth cookie to a user for the request."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from vaev.domain.entities import UserRecord
from vaev.domain.errors import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_KEY = "vaev_auth"


def _context_key(request: Request, key: Optional[str]) -> str:
    if key:
        return key
    settings = getattr(request.app.state, "settings", None)
    return settings.AUTH_CONTEXT_KEY if settings is not None else DEFAULT_CONTEXT_KEY


def get_user(request: Request, key: Optional[str] = None) -> Optional[UserRecord]:
    """The signed-in user attached by IdentityMiddleware, or None."""
    return getattr(request.state, _context_key(request, key), None)


def set_user(request: Request, user: UserRecord, key: Optional[str] = None) -> None:
    setattr(request.state, _context_key(request, key), user)


class IdentityMiddleware(BaseHTTPMiddleware):
    """Attach the user behind the auth cookie to the request state.

    Never writes cookies and never ends the request: a missing or unusable
    token simply leaves the request anonymous, and the guards downstream
    decide what that means.
    """

    def __init__(self, app: ASGIApp, cookie_name: str, context_key: str = DEFAULT_CONTEXT_KEY) -> None:
        super().__init__(app)
        self.cookie_name = cookie_name
        self.context_key = context_key

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        token = request.cookies.get(self.cookie_name)
        if token:
            user = await run_in_threadpool(self._resolve, request, token)
            if user is not None:
                set_user(request, user, self.context_key)

        return await call_next(request)

    def _resolve(self, request: Request, token: str) -> Optional[UserRecord]:
        provider = request.app.state.identity_provider
        db: Session = request.app.state.session_factory()
        try:
            return provider.resolve_token(db, token)
        except InvalidTokenError as exc:
            logger.debug("Ignoring auth cookie: %s", exc)
            return None
        finally:
            db.close()
