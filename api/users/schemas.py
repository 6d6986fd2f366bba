"""
User API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt refuses secrets longer than this.
MAX_PASSWORD_BYTES = 72


class InsertUser(BaseModel):
    model_config = ConfigDict(strict=True)

    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=8)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return value


class UserResponse(BaseModel):
    id: int
    username: str
