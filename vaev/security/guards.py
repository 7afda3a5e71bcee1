"""Authentication guards, used as FastAPI dependencies."""
from __future__ import annotations

from typing import Callable, Optional

from fastapi import Request

from vaev.domain.entities import UserRecord
from vaev.domain.errors import AuthRedirectError, UnauthorizedError
from vaev.navigation import with_next
from vaev.security.identity import get_user


def redirect_guard(to: Optional[str] = None, context_key: Optional[str] = None) -> Callable[[Request], UserRecord]:
    """HTML routes: anonymous callers get a 303 to the login page with ``next`` set."""

    def guard(request: Request) -> UserRecord:
        user = get_user(request, context_key)
        if user is None:
            target = to or request.app.state.settings.LOGIN_ROUTE
            raise AuthRedirectError(with_next(target, request))
        return user

    return guard


def json_guard(context_key: Optional[str] = None) -> Callable[[Request], UserRecord]:
    """API routes: anonymous callers get a 401 JSON body."""

    def guard(request: Request) -> UserRecord:
        user = get_user(request, context_key)
        if user is None:
            raise UnauthorizedError("You are not authorized to access this resource")
        return user

    return guard
