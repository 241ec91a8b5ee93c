"""Account Schemas — profile updates, password change and first-run setup."""

from pydantic import BaseModel, Field, field_validator

from boothboss.core.event_url_rules import sanitize_url_path
from boothboss.schemas.auth import NewPassword
from boothboss.schemas.settings import HEX_COLOR


class AccountUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=120)
    username: str | None = Field(None, pattern=r"^[a-z0-9_-]{3,30}$")
    organization_name: str | None = Field(None, max_length=200)
    organization_size: str | None = Field(None, max_length=50)
    industry: str | None = Field(None, max_length=100)

    @field_validator("username", mode="before")
    @classmethod
    def lower_username(cls, v: str | None) -> str | None:
        return v.strip().lower() if isinstance(v, str) else v


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: NewPassword


class AccountSetupRequest(BaseModel):
    """First-run wizard: one event URL plus branded base settings."""
    url_path: str = Field(min_length=1, max_length=60)
    event_name: str = Field(min_length=2, max_length=200)
    company_name: str | None = Field(None, max_length=200)
    primary_color: str | None = Field(None, pattern=HEX_COLOR)
    logo_url: str | None = None

    @field_validator("url_path")
    @classmethod
    def clean_path(cls, v: str) -> str:
        return sanitize_url_path(v)
