"""
User Store

The review core only needs to know whether a user exists.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import User


class UserStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def exists(self, user_id: uuid.UUID) -> bool:
        stmt = select(User.id).where(User.id == user_id)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def get(self, user_id: uuid.UUID) -> User | None:
        return self.db.get(User, user_id)
