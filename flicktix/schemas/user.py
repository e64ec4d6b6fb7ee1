"""
Pydantic schemas for sign-up, sign-in and profile responses.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, model_validator

from flicktix.core.config import get_settings

settings = get_settings()


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=settings.MIN_PASSWORD_LENGTH, max_length=72)  # bcrypt input limit
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "UserCreate":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
