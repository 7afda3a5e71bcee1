"""Password verification and auth token minting for user accounts."""
from __future__ import annotations

import hmac
import logging
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from itsdangerous import BadData, URLSafeTimedSerializer
from sqlalchemy.orm import Session

from vaev.db.models import User
from vaev.db.repositories.users import UserRepository
from vaev.domain.entities import UserRecord
from vaev.domain.errors import InvalidCredentialsError, InvalidTokenError

logger = logging.getLogger(__name__)

PWD = PasswordHasher()
TOKEN_SALT = "vaev-auth"


def hash_password(password: str, hasher: Optional[PasswordHasher] = None) -> str:
    return (hasher or PWD).hash(password)


def check_password(password: str, encoded: str) -> bool:
    # Cost parameters are read back from the encoded hash
    try:
        return PWD.verify(encoded, password)
    except (VerificationError, InvalidHashError):
        return False


def to_user_record(user: User) -> UserRecord:
    return {"id": user.id, "email": user.email, "name": user.name}


class IdentityProvider:
    """verify / mint_token / resolve_token over the users table."""

    def __init__(self, secret_key: str, max_age_days: int = 365) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age = max_age_days * 24 * 60 * 60

    def verify(self, db: Session, email: str, password: str) -> User:
        user = UserRepository(db).get_user_by_email(email) if email else None
        if user is None or not check_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        return user

    def mint_token(self, user: User) -> str:
        return self._serializer.dumps({"id": user.id, "key": user.token_key})

    def resolve_token(self, db: Session, token: str) -> UserRecord:
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except BadData as exc:
            raise InvalidTokenError("Auth token failed verification") from exc

        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise InvalidTokenError("Auth token has an unexpected shape")

        user = UserRepository(db).get_user(data["id"])
        if user is None:
            raise InvalidTokenError("Auth token refers to an unknown user")
        if not hmac.compare_digest(str(data.get("key", "")).encode("utf-8"), user.token_key.encode("utf-8")):
            raise InvalidTokenError("Auth token was revoked")

        return to_user_record(user)
