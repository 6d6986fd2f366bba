"""
Storage capability shared by every backend.

Records travel as plain dicts keyed by column name:
- users: id, username, password
- posts: id, title, slug, content, excerpt, published, created_at, updated_at

Lookups return None on a miss; only real failures raise.
"""

from __future__ import annotations

from typing import Any, Protocol

POST_COLUMNS = ("id", "title", "slug", "content", "excerpt", "published", "created_at", "updated_at")
POST_WRITABLE_COLUMNS = ("title", "slug", "content", "excerpt", "published")


# Storage failures are explicit and separable from other runtime errors.
class StorageError(RuntimeError):
    pass


class UniquenessViolation(StorageError):
    """
    A write collided with a unique column (post slug, username).
    """

    def __init__(self, field: str | None, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Duplicate value for unique field {field!r}.")


class Storage(Protocol):
    async def get_user(self, user_id: int) -> dict[str, Any] | None: ...

    async def get_user_by_username(self, username: str) -> dict[str, Any] | None: ...

    async def create_user(self, data: dict[str, Any]) -> dict[str, Any]: ...

    async def get_all_posts(self) -> list[dict[str, Any]]: ...

    async def get_published_posts(self) -> list[dict[str, Any]]: ...

    async def get_post_by_slug(self, slug: str) -> dict[str, Any] | None: ...

    async def get_post_by_id(self, post_id: int) -> dict[str, Any] | None: ...

    async def create_post(self, data: dict[str, Any]) -> dict[str, Any]: ...

    async def update_post(self, post_id: int, data: dict[str, Any]) -> dict[str, Any] | None: ...

    async def delete_post(self, post_id: int) -> bool: ...
