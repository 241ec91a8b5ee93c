"""Admin Schemas — user management and bulk operations."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from boothboss.schemas.auth import NewPassword

Tier = Literal["FREE", "BRONZE", "SILVER", "GOLD", "PLATINUM", "ADMIN"]
Duration = Literal["MONTHLY", "QUARTERLY", "ANNUAL", "TRIAL"]
Role = Literal["ADMIN", "CUSTOMER"]


class AdminUserCreate(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    password: NewPassword
    role: Role = "CUSTOMER"

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class AdminUserUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=120)
    role: Role | None = None
    tier: Tier | None = None
    duration: Duration = "MONTHLY"


class BulkDeleteRequest(BaseModel):
    ids: list[UUID] = Field(min_length=1, max_length=500)
