from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Any, Literal, Optional

EMAIL_MAX_LENGTH = 100


def _check_email_length(value):
    if value is not None and len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f'email must be at most {EMAIL_MAX_LENGTH} characters')
    return value


# Auth Schemas

class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password_hash: str = Field(..., min_length=1, max_length=255)

    @field_validator('email')
    @classmethod
    def email_length(cls, value):
        return _check_email_length(value)

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, value):
        return value.strip() if isinstance(value, str) else value


# User Schemas

class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password_hash: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator('email')
    @classmethod
    def email_length(cls, value):
        return _check_email_length(value)

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserSearch(BaseModel):
    query: Optional[str] = None
    limit: int = Field(10, gt=0)
    offset: int = Field(0, ge=0)
    sort_by: Literal['username', 'email', 'created_at'] = 'created_at'
    sort_order: Literal['asc', 'desc'] = 'desc'


# Game Schemas

class GameUpdate(BaseModel):
    # Any non-empty value counts as a move; the board is not consulted
    move: Optional[Any] = None
    power_up: Optional[str] = None
    tick: Optional[int] = Field(None, ge=1, le=3600)
