"""Tamper-evident session cookie codec.

Wire format: ``base64url(json_bytes || hmac_sha256(key, json_bytes))``. The
MAC occupies the last 32 bytes of the decoded buffer. The payload is signed,
not encrypted: anyone holding the cookie can read it, nobody without the key
can change it.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import re
import time
from typing import Optional, Tuple

from vaev.domain.entities import SessionPayload

logger = logging.getLogger(__name__)

SIGNATURE_SIZE = hashlib.sha256().digest_size
# Unpadded or padded URL-safe alphabet only
B64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def empty_session() -> SessionPayload:
    return {"user_id": "", "csrf_token": "", "expires_at": 0}


def _b64u(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64u_dec(s: str) -> bytes:
    if not B64URL_PATTERN.fullmatch(s):
        raise ValueError("not base64url")
    s = s.rstrip("=")
    return base64.urlsafe_b64decode(s + "=" * (-len(s) % 4))


class SignedCookieCodec:
    """Encode/decode session payloads signed with the server key."""

    def __init__(self, key: str | bytes) -> None:
        if isinstance(key, str):
            key = key.encode("utf-8")
        if not key:
            raise ValueError("Signed cookie key must not be empty")
        self._key = key

    def sign(self, data: bytes) -> bytes:
        return hmac.new(self._key, data, hashlib.sha256).digest()

    def encode(self, payload: SessionPayload) -> str:
        body = json.dumps(
            {
                "user_id": payload.get("user_id", ""),
                "csrf_token": payload.get("csrf_token", ""),
                "expires_at": int(payload.get("expires_at", 0)),
            },
            separators=(",", ":"),
        ).encode("utf-8")
        return _b64u(body + self.sign(body))

    def decode(self, value: str, now: Optional[float] = None) -> Tuple[SessionPayload, bool]:
        """Return ``(payload, True)`` for a genuine, unexpired cookie.

        Any failure yields a zeroed payload and ``False``; callers must not
        read fields of an invalid payload.
        """
        try:
            buffer = _b64u_dec(value)
        except (binascii.Error, ValueError):
            logger.debug("Session cookie is not valid base64url")
            return empty_session(), False

        if len(buffer) < SIGNATURE_SIZE:
            logger.debug("Session cookie too short to contain a signature")
            return empty_session(), False

        body, received = buffer[:-SIGNATURE_SIZE], buffer[-SIGNATURE_SIZE:]
        if not hmac.compare_digest(received, self.sign(body)):
            logger.info("Session cookie signature mismatch")
            return empty_session(), False

        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.info("Session cookie payload is not valid JSON")
            return empty_session(), False

        payload = _coerce_payload(data)
        if payload is None:
            logger.info("Session cookie payload has an unexpected shape")
            return empty_session(), False

        current = time.time() if now is None else now
        if payload["expires_at"] != 0 and current > payload["expires_at"]:
            logger.debug("Session cookie expired")
            return empty_session(), False

        return payload, True


def _coerce_payload(data) -> Optional[SessionPayload]:
    if not isinstance(data, dict):
        return None

    user_id = data.get("user_id", "")
    csrf_token = data.get("csrf_token", "")
    expires_at = data.get("expires_at", 0)
    if not isinstance(user_id, str) or not isinstance(csrf_token, str):
        return None
    if isinstance(expires_at, bool) or not isinstance(expires_at, int):
        return None

    return {"user_id": user_id, "csrf_token": csrf_token, "expires_at": expires_at}
