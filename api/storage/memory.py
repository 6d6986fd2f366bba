"""
In-process storage.

Same contract as `DatabaseStorage`: unique slugs/usernames, newest-first
ordering, None on lookup misses. Used by the test-suite and by
`STORAGE_BACKEND=memory` for local runs without Postgres. Nothing survives a
restart.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from .base import POST_COLUMNS, POST_WRITABLE_COLUMNS, UniquenessViolation


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStorage:
    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._users: dict[int, dict[str, Any]] = {}
        self._posts: dict[int, dict[str, Any]] = {}
        self._next_user_id = 1
        self._next_post_id = 1

    async def get_user(self, user_id: int) -> dict[str, Any] | None:
        user = self._users.get(user_id)
        return dict(user) if user is not None else None

    async def get_user_by_username(self, username: str) -> dict[str, Any] | None:
        for user in self._users.values():
            if user["username"] == username:
                return dict(user)
        return None

    async def create_user(self, data: dict[str, Any]) -> dict[str, Any]:
        if await self.get_user_by_username(data["username"]) is not None:
            raise UniquenessViolation("username")

        user = {
            "id": self._next_user_id,
            "username": data["username"],
            "password": data["password"],
        }
        self._users[user["id"]] = user
        self._next_user_id += 1
        return dict(user)

    def _sorted_posts(self, *, published_only: bool) -> list[dict[str, Any]]:
        posts = [p for p in self._posts.values() if p["published"] or not published_only]
        posts.sort(key=lambda p: (p["created_at"], p["id"]), reverse=True)
        return [dict(p) for p in posts]

    async def get_all_posts(self) -> list[dict[str, Any]]:
        return self._sorted_posts(published_only=False)

    async def get_published_posts(self) -> list[dict[str, Any]]:
        return self._sorted_posts(published_only=True)

    async def get_post_by_slug(self, slug: str) -> dict[str, Any] | None:
        for post in self._posts.values():
            if post["slug"] == slug:
                return dict(post)
        return None

    async def get_post_by_id(self, post_id: int) -> dict[str, Any] | None:
        post = self._posts.get(post_id)
        return dict(post) if post is not None else None

    def _check_slug_free(self, slug: str, *, owner_id: int | None = None) -> None:
        for post in self._posts.values():
            if post["slug"] == slug and post["id"] != owner_id:
                raise UniquenessViolation("slug")

    async def create_post(self, data: dict[str, Any]) -> dict[str, Any]:
        self._check_slug_free(data["slug"])

        now = self._clock()
        post = dict.fromkeys(POST_COLUMNS)
        post.update(
            id=self._next_post_id,
            title=data["title"],
            slug=data["slug"],
            content=data["content"],
            excerpt=data.get("excerpt"),
            published=bool(data.get("published", False)),
            created_at=now,
            updated_at=now,
        )
        self._posts[post["id"]] = post
        self._next_post_id += 1
        return dict(post)

    async def update_post(self, post_id: int, data: dict[str, Any]) -> dict[str, Any] | None:
        post = self._posts.get(post_id)
        if post is None:
            return None
        if "slug" in data:
            self._check_slug_free(data["slug"], owner_id=post_id)

        changes = {column: data[column] for column in POST_WRITABLE_COLUMNS if column in data}
        # updated_at must move forward even when the clock has not ticked.
        now = self._clock()
        if now <= post["updated_at"]:
            now = post["updated_at"] + timedelta(microseconds=1)
        post.update(changes, updated_at=now)
        return dict(post)

    async def delete_post(self, post_id: int) -> bool:
        return self._posts.pop(post_id, None) is not None
