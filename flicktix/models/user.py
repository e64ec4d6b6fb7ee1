"""
User model backing email/password sign-in.

`id` is the opaque identity handed out in access tokens; bookings refer to
it as a plain string so another identity provider could be swapped in.
"""

import uuid

from sqlalchemy import Column, String, Boolean

from flicktix.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
