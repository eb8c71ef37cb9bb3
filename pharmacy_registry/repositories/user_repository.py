"""Repository for User entities."""
from typing import Optional
import uuid

from pharmacy_registry.models_db import User


class UserRepository:
    def __init__(self, session):
        self._session = session

    def get_by_id(self, id: uuid.UUID) -> Optional[User]:
        return self._session.get(User, id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._session.query(User).filter_by(email=email).first()

    def add(self, user: User) -> User:
        self._session.add(user)
        return user
