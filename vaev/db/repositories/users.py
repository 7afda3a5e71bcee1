from sqlalchemy import func
from sqlalchemy.orm import Session
from vaev.db.models import User, generate_uuid
from typing import Optional


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, email: str, password_hash: str, name: str = "") -> User:
        user = User(email=email.strip().lower(), name=name, password_hash=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def rotate_token_key(self, user_id: str) -> Optional[User]:
        """Invalidate every outstanding auth token of a user."""
        user = self.get_user(user_id)
        if not user:
            return None

        user.token_key = generate_uuid()
        self.db.commit()
        self.db.refresh(user)
        return user
