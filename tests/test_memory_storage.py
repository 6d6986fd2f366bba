from datetime import datetime, timezone

import pytest

from storage import MemoryStorage, UniquenessViolation


def _post(slug: str, *, published: bool = False, **extra) -> dict:
    data = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "content": f"<p>{slug}</p>",
        "excerpt": slug,
        "published": published,
    }
    data.update(extra)
    return data


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamps(storage):
    post = await storage.create_post(_post("hello"))
    assert post["id"] == 1
    assert post["created_at"] == post["updated_at"]
    assert post["published"] is False


@pytest.mark.asyncio
async def test_read_by_slug_is_idempotent(storage):
    await storage.create_post(_post("hello"))
    first = await storage.get_post_by_slug("hello")
    second = await storage.get_post_by_slug("hello")
    assert first == second


@pytest.mark.asyncio
async def test_lookups_return_none_on_miss(storage):
    assert await storage.get_post_by_slug("missing") is None
    assert await storage.get_post_by_id(42) is None
    assert await storage.get_user(42) is None
    assert await storage.get_user_by_username("nobody") is None


@pytest.mark.asyncio
async def test_duplicate_slug_rejected_without_insert(storage):
    await storage.create_post(_post("hello"))
    with pytest.raises(UniquenessViolation) as exc_info:
        await storage.create_post(_post("hello", title="Other"))
    assert exc_info.value.field == "slug"
    assert len(await storage.get_all_posts()) == 1


@pytest.mark.asyncio
async def test_all_posts_newest_first(storage):
    for slug in ("t1", "t2", "t3"):
        await storage.create_post(_post(slug))
    posts = await storage.get_all_posts()
    assert [p["slug"] for p in posts] == ["t3", "t2", "t1"]


@pytest.mark.asyncio
async def test_equal_timestamps_fall_back_to_id():
    frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
    storage = MemoryStorage(clock=lambda: frozen)
    for slug in ("a", "b", "c"):
        await storage.create_post(_post(slug))
    posts = await storage.get_all_posts()
    assert [p["slug"] for p in posts] == ["c", "b", "a"]


@pytest.mark.asyncio
async def test_published_posts_filtered(storage):
    await storage.create_post(_post("draft"))
    await storage.create_post(_post("live-1", published=True))
    await storage.create_post(_post("live-2", published=True))
    posts = await storage.get_published_posts()
    assert [p["slug"] for p in posts] == ["live-2", "live-1"]
    assert (await storage.get_post_by_slug("draft")) is not None


@pytest.mark.asyncio
async def test_partial_update_only_touches_given_fields(storage):
    created = await storage.create_post(_post("hello"))
    updated = await storage.update_post(created["id"], {"published": True})

    assert updated["published"] is True
    for column in ("title", "slug", "content", "excerpt", "created_at"):
        assert updated[column] == created[column]
    assert updated["updated_at"] > created["updated_at"]


@pytest.mark.asyncio
async def test_update_moves_timestamp_with_frozen_clock():
    frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
    storage = MemoryStorage(clock=lambda: frozen)
    created = await storage.create_post(_post("hello"))
    first = await storage.update_post(created["id"], {})
    second = await storage.update_post(created["id"], {})
    assert created["updated_at"] < first["updated_at"] < second["updated_at"]
    assert second["created_at"] == created["created_at"]


@pytest.mark.asyncio
async def test_update_missing_post_returns_none(storage):
    assert await storage.update_post(99, {"title": "x"}) is None
    assert await storage.get_all_posts() == []


@pytest.mark.asyncio
async def test_update_into_taken_slug_rejected(storage):
    await storage.create_post(_post("first"))
    second = await storage.create_post(_post("second"))
    with pytest.raises(UniquenessViolation):
        await storage.update_post(second["id"], {"slug": "first"})
    assert (await storage.get_post_by_id(second["id"]))["slug"] == "second"


@pytest.mark.asyncio
async def test_update_keeping_own_slug_is_fine(storage):
    post = await storage.create_post(_post("first"))
    updated = await storage.update_post(post["id"], {"slug": "first", "title": "Renamed"})
    assert updated["title"] == "Renamed"


@pytest.mark.asyncio
async def test_delete_reports_whether_removed(storage):
    post = await storage.create_post(_post("hello"))
    assert await storage.delete_post(post["id"]) is True
    assert await storage.delete_post(post["id"]) is False
    assert await storage.get_post_by_id(post["id"]) is None


@pytest.mark.asyncio
async def test_returned_records_are_copies(storage):
    post = await storage.create_post(_post("hello"))
    post["title"] = "mutated"
    assert (await storage.get_post_by_id(post["id"]))["title"] == "Hello"


@pytest.mark.asyncio
async def test_users_roundtrip_and_unique_username(storage):
    user = await storage.create_user({"username": "admin", "password": "hash"})
    assert user == {"id": 1, "username": "admin", "password": "hash"}
    assert await storage.get_user(1) == user
    assert await storage.get_user_by_username("admin") == user

    with pytest.raises(UniquenessViolation) as exc_info:
        await storage.create_user({"username": "admin", "password": "other"})
    assert exc_info.value.field == "username"
