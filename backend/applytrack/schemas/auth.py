from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=120)
    password: str = Field(min_length=6, max_length=256)


class LoginRequest(BaseModel):
    username: str = Field(min_length=3, max_length=120)
    password: str = Field(min_length=6, max_length=256)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str


class MeResponse(BaseModel):
    id: int
    username: str
    has_adzuna_credentials: bool


class CredentialsUpdate(BaseModel):
    adzuna_app_id: str | None = Field(default=None, max_length=255)
    adzuna_api_key: str | None = Field(default=None, max_length=255)
