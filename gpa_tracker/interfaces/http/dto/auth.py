# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from gpa_tracker.domain.users.entities import User

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=1, max_length=64)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(
        min_length=1, max_length=128, validation_alias=AliasChoices("password", "pass")
    )

    @field_validator("username", "email", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("email address is not valid")
        return value


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=1, max_length=64)
    password: str = Field(
        min_length=1, max_length=128, validation_alias=AliasChoices("password", "pass")
    )

    @field_validator("username", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ForgotPasswordRequestDTO(BaseModel):
    email: str = Field(min_length=1, max_length=255)

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ResetPasswordRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1, max_length=256)
    new_password: str = Field(
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("newPassword", "newPass"),
    )


class PublicUserDTO(BaseModel):
    id: int
    username: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> PublicUserDTO:
        return cls(id=user.id, username=user.username, email=user.email)


class LoginResponseDTO(BaseModel):
    token: str
    user: PublicUserDTO


class MessageDTO(BaseModel):
    message: str
