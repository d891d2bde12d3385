from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from updoo.models.enums import Language, Role


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=256)
    role: Literal["CLIENT", "FREELANCER"]
    language: Language = Language.POLISH
    name: str | None = Field(default=None, max_length=120)
    surname: str | None = Field(default=None, max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=256)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    role: Role


class MeResponse(BaseModel):
    id: int
    email: str
    role: Role
    language: Language
    name: str | None = None
    surname: str | None = None
