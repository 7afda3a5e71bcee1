"""Shared test helpers: a signed session with a known CSRF token and an HTTPS client."""
import base64
import time

from argon2 import PasswordHasher
from fastapi.testclient import TestClient

from vaev.security.signed_cookie import SignedCookieCodec

SESSION_KEY = "test-session-key"
CSRF_TOKEN = "test-csrf-token"
PASSWORD = "correct horse battery staple"
# Minimum argon2 cost keeps fixtures fast
FAST_HASHER = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
# http.cookiejar stores host-only cookies for dotless hosts under "<host>.local"
COOKIE_DOMAIN = "testserver.local"


def make_session_cookie(csrf_token: str = CSRF_TOKEN, key: str = SESSION_KEY, ttl: int = 3600) -> str:
    codec = SignedCookieCodec(key)
    return codec.encode({"user_id": "", "csrf_token": csrf_token, "expires_at": int(time.time()) + ttl})


class GraphClient(TestClient):
    """HTTPS test client that can carry a known session and an auth token."""

    def __init__(self, app):
        super().__init__(app, base_url="https://testserver")
        self.settings = app.state.settings
        self.identity_provider = app.state.identity_provider

    def set_cookie(self, name: str, value: str) -> None:
        self.cookies.set(name, value, domain=COOKIE_DOMAIN, path="/")

    def use_session(self, csrf_token: str = CSRF_TOKEN) -> None:
        self.set_cookie(self.settings.SESSION_COOKIE_NAME, make_session_cookie(csrf_token))

    def sign_in(self, user) -> None:
        self.set_cookie(self.settings.AUTH_COOKIE_NAME, self.identity_provider.mint_token(user))

    def csrf_headers(self, csrf_token: str = CSRF_TOKEN) -> dict:
        return {"X-CSRF-Token": csrf_token}


def flip_byte(cookie: str, index: int = 3) -> str:
    """Flip one bit of the decoded cookie buffer and re-encode it."""
    raw = bytearray(base64.urlsafe_b64decode(cookie + "=" * (-len(cookie) % 4)))
    raw[index] ^= 0x01
    return base64.urlsafe_b64encode(bytes(raw)).decode("ascii").rstrip("=")
