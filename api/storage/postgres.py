"""
PostgreSQL storage (raw SQL over asyncpg).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import asyncpg

from core.db import Database

from .base import POST_WRITABLE_COLUMNS, StorageError, UniquenessViolation

_POST_SELECT = "id, title, slug, content, excerpt, published, created_at, updated_at"

# Default Postgres names for the UNIQUE constraints created in core.db.SCHEMA_SQL.
_UNIQUE_CONSTRAINT_FIELDS = {
    "posts_slug_key": "slug",
    "users_username_key": "username",
}


@asynccontextmanager
async def _translate_errors(action: str) -> AsyncIterator[None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        field = _UNIQUE_CONSTRAINT_FIELDS.get(exc.constraint_name or "")
        raise UniquenessViolation(field) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise StorageError(f"Failed to {action}.") from exc


def build_post_update(post_id: int, data: dict[str, Any]) -> tuple[str, list[Any]]:
    """
    Build the UPDATE statement for a partial post change.

    Only writable columns present in `data` are set; `updated_at` is always
    refreshed. Returns (sql, args).
    """
    assignments: list[str] = []
    args: list[Any] = []
    for column in POST_WRITABLE_COLUMNS:
        if column not in data:
            continue
        args.append(data[column])
        assignments.append(f"{column} = ${len(args)}")
    assignments.append("updated_at = now()")
    args.append(post_id)

    sql = (
        f"UPDATE posts SET {', '.join(assignments)} "
        f"WHERE id = ${len(args)} "
        f"RETURNING {_POST_SELECT}"
    )
    return sql, args


class DatabaseStorage:
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_user(self, user_id: int) -> dict[str, Any] | None:
        async with _translate_errors("fetch user"):
            return await self._db.fetch_one(
                """
                SELECT id, username, password
                FROM users
                WHERE id = $1
                """,
                user_id,
            )

    async def get_user_by_username(self, username: str) -> dict[str, Any] | None:
        async with _translate_errors("fetch user"):
            return await self._db.fetch_one(
                """
                SELECT id, username, password
                FROM users
                WHERE username = $1
                """,
                username,
            )

    async def create_user(self, data: dict[str, Any]) -> dict[str, Any]:
        async with _translate_errors("create user"):
            row = await self._db.fetch_one(
                """
                INSERT INTO users (username, password)
                VALUES ($1, $2)
                RETURNING id, username, password
                """,
                data["username"],
                data["password"],
            )
        if row is None:
            raise StorageError("Failed to create user.")
        return row

    async def get_all_posts(self) -> list[dict[str, Any]]:
        async with _translate_errors("fetch posts"):
            return await self._db.fetch_all(
                f"""
                SELECT {_POST_SELECT}
                FROM posts
                ORDER BY created_at DESC, id DESC
                """
            )

    async def get_published_posts(self) -> list[dict[str, Any]]:
        async with _translate_errors("fetch posts"):
            return await self._db.fetch_all(
                f"""
                SELECT {_POST_SELECT}
                FROM posts
                WHERE published = true
                ORDER BY created_at DESC, id DESC
                """
            )

    async def get_post_by_slug(self, slug: str) -> dict[str, Any] | None:
        async with _translate_errors("fetch post"):
            return await self._db.fetch_one(
                f"""
                SELECT {_POST_SELECT}
                FROM posts
                WHERE slug = $1
                """,
                slug,
            )

    async def get_post_by_id(self, post_id: int) -> dict[str, Any] | None:
        async with _translate_errors("fetch post"):
            return await self._db.fetch_one(
                f"""
                SELECT {_POST_SELECT}
                FROM posts
                WHERE id = $1
                """,
                post_id,
            )

    async def create_post(self, data: dict[str, Any]) -> dict[str, Any]:
        async with _translate_errors("create post"):
            row = await self._db.fetch_one(
                f"""
                INSERT INTO posts (title, slug, content, excerpt, published, updated_at)
                VALUES ($1, $2, $3, $4, $5, now())
                RETURNING {_POST_SELECT}
                """,
                data["title"],
                data["slug"],
                data["content"],
                data.get("excerpt"),
                bool(data.get("published", False)),
            )
        if row is None:
            raise StorageError("Failed to create post.")
        return row

    async def update_post(self, post_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        sql, args = build_post_update(post_id, data)
        async with _translate_errors("update post"):
            return await self._db.fetch_one(sql, *args)

    async def delete_post(self, post_id: int) -> bool:
        async with _translate_errors("delete post"):
            row = await self._db.fetch_one(
                """
                DELETE FROM posts
                WHERE id = $1
                RETURNING id
                """,
                post_id,
            )
        return row is not None
