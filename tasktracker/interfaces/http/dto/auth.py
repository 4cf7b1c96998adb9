from __future__ import annotations

import re

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from tasktracker.shared.errors.validation_types import ValidationErrorType

_USERNAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"
PASSWORD_MIN_LENGTH = 8


def _check_password(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_BLANK,
            "Password cannot be blank",
            {}
        )

    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_SHORT,
            "Password must be at least 8 characters long",
            {"min_length": PASSWORD_MIN_LENGTH}
        )

    return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not re.match(_USERNAME_PATTERN, value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS,
                "Username may contain only letters, digits, dots, dashes and underscores",
                {"pattern": _USERNAME_PATTERN}
            )

        return value

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


class LoginRequestDTO(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.lower()


class ForgotPasswordRequestDTO(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.lower()


class ResetPasswordRequestDTO(BaseModel):
    password: str = Field(max_length=128)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)
