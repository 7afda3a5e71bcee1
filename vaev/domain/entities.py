"""Internal domain entities as TypedDicts for type safety at boundaries."""
from __future__ import annotations

from typing import TypedDict


class UserRecord(TypedDict):
    id: str
    email: str
    name: str


class SessionPayload(TypedDict):
    user_id: str
    csrf_token: str
    expires_at: int
