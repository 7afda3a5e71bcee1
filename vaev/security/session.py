"""Session and CSRF middleware.

Keeps a signed ``app_session`` cookie carrying the CSRF token, rotates it on
every response that passes, and rejects unsafe requests whose submitted token
does not match the session's.
"""
from __future__ import annotations

import hmac
import logging
import secrets
import time
from typing import Optional

from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from vaev.domain.errors import ValidationError
from vaev.security.signed_cookie import SignedCookieCodec, empty_session

logger = logging.getLogger(__name__)

CSRF_TOKEN_FIELD = "CSRF-Token"
CSRF_HEADER = "X-CSRF-Token"
SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}
FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}

DAY_SECONDS = 24 * 60 * 60


def generate_csrf_token() -> str:
    """32 random bytes, base64url encoded."""
    return secrets.token_urlsafe(32)


def get_csrf_token(request: Request) -> str:
    return getattr(request.state, "csrf_token", "")


class SessionMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        codec: SignedCookieCodec,
        cookie_name: str = "app_session",
        max_age_days: int = 30,
        max_form_bytes: int = 1024 * 1024,
    ) -> None:
        super().__init__(app)
        self.codec = codec
        self.cookie_name = cookie_name
        self.max_age = max_age_days * DAY_SECONDS
        self.max_form_bytes = max_form_bytes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = empty_session()
        current_token = ""

        raw = request.cookies.get(self.cookie_name)
        if raw:
            decoded, valid = self.codec.decode(raw)
            if valid:
                session = decoded
                current_token = decoded["csrf_token"]

        if not current_token:
            current_token = generate_csrf_token()
            session["csrf_token"] = current_token
            session["expires_at"] = int(time.time()) + self.max_age

        request.state.session = session
        request.state.csrf_token = current_token

        if request.method not in SAFE_METHODS:
            try:
                client_token = await self._client_token(request)
            except ValidationError as exc:
                return PlainTextResponse(str(exc), status_code=400)

            if not client_token:
                logger.warning("CSRF token missing for %s %s", request.method, request.url.path)
                return PlainTextResponse("CSRF token missing", status_code=403)

            if not hmac.compare_digest(client_token.encode("utf-8"), current_token.encode("utf-8")):
                logger.warning("Invalid CSRF token for %s %s", request.method, request.url.path)
                return PlainTextResponse("Invalid CSRF token", status_code=403)

        response = await call_next(request)
        response.set_cookie(
            key=self.cookie_name,
            value=self.codec.encode(session),
            max_age=self.max_age,
            expires=self.max_age,
            path="/",
            secure=True,
            httponly=True,
            samesite="strict",
        )
        return response

    async def _client_token(self, request: Request) -> Optional[str]:
        media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
        if media_type in FORM_CONTENT_TYPES:
            form_token = await self._form_token(request)
            if form_token:
                return form_token
        return request.headers.get(CSRF_HEADER)

    async def _form_token(self, request: Request) -> Optional[str]:
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_form_bytes:
            raise ValidationError("Request body too large")

        # Chunked bodies carry no length, so the cap is enforced while streaming
        chunks = []
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
            if received > self.max_form_bytes:
                raise ValidationError("Request body too large")
            chunks.append(chunk)
        # Cached the same way Request.body() does, so the form can be parsed again downstream
        request._body = b"".join(chunks)

        try:
            form = await request.form()
        except (MultiPartException, HTTPException) as exc:
            raise ValidationError("Malformed form body") from exc

        value = form.get(CSRF_TOKEN_FIELD)
        return value if isinstance(value, str) else None
