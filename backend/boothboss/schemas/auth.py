"""Auth Schemas — registration, login and email verification payloads.

Invariants:
    - Emails are normalized (stripped, lowercased) before reaching services
    - name >= 2 chars; new passwords 6-128 chars and at most 72 bytes in UTF-8
      (bcrypt refuses longer input)
    - UserPublic never carries password hashes or verification tokens
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from boothboss.infrastructure.security import BCRYPT_MAX_BYTES


def _fits_bcrypt(v: str) -> str:
    if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return v


NewPassword = Annotated[str, Field(min_length=6, max_length=128), AfterValidator(_fits_bcrypt)]


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    password: NewPassword
    organization_name: str | None = Field(None, max_length=200)
    organization_size: str | None = Field(None, max_length=50)
    industry: str | None = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1, max_length=64)


class ResendVerificationRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    username: str | None
    role: str
    email_verified: bool
    organization_name: str | None = None
    organization_size: str | None = None
    industry: str | None = None
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
