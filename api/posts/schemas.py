"""
Post API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InsertPost(BaseModel):
    model_config = ConfigDict(strict=True)

    title: str = Field(..., min_length=1)
    content: str
    slug: str | None = Field(default=None, min_length=1)
    excerpt: str | None = None
    published: bool = False


class UpdatePost(BaseModel):
    """
    Partial update: only fields present in the request body are applied.
    """

    model_config = ConfigDict(strict=True)

    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    slug: str | None = Field(default=None, min_length=1)
    excerpt: str | None = None
    published: bool | None = None

    @field_validator("title", "content", "slug", "published", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Defaults are not validated, so this only sees explicit values.
        if value is None:
            raise ValueError("Field may be omitted but not null.")
        return value


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    published: bool
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class MessageResponse(BaseModel):
    message: str
