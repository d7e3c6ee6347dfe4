from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postdesk.utils.validators import validate_email


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: str = Field(max_length=255)
    password: str = Field(min_length=8, max_length=256)

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str) -> str:
        email = v.strip().lower()
        if not validate_email(email):
            raise ValueError("Please provide a valid email")
        return email


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=256)
