from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from posts.schemas import InsertPost, PostResponse, UpdatePost
from users.schemas import InsertUser


def _error_fields(exc_info) -> set:
    return {err["loc"][0] for err in exc_info.value.errors()}


def test_insert_requires_title_and_content():
    with pytest.raises(ValidationError) as exc_info:
        InsertPost.model_validate({})
    assert _error_fields(exc_info) == {"title", "content"}


def test_insert_rejects_non_string_title():
    with pytest.raises(ValidationError) as exc_info:
        InsertPost.model_validate({"title": 123, "content": "x"})
    assert _error_fields(exc_info) == {"title"}


def test_insert_rejects_stringly_boolean():
    with pytest.raises(ValidationError) as exc_info:
        InsertPost.model_validate({"title": "t", "content": "x", "published": "true"})
    assert _error_fields(exc_info) == {"published"}


def test_insert_defaults_and_unknown_keys():
    post = InsertPost.model_validate({"title": "t", "content": "x", "views": 10})
    assert post.published is False
    assert post.slug is None
    assert post.excerpt is None
    assert not hasattr(post, "views")


def test_update_everything_optional():
    update = UpdatePost.model_validate({})
    assert update.model_dump(exclude_unset=True) == {}


@pytest.mark.parametrize("field", ["title", "content", "slug", "published"])
def test_update_rejects_null_for_required_columns(field):
    with pytest.raises(ValidationError) as exc_info:
        UpdatePost.model_validate({field: None})
    assert _error_fields(exc_info) == {field}


def test_post_response_uses_camel_case_timestamps():
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    response = PostResponse(
        id=1,
        title="t",
        slug="t",
        content="c",
        excerpt="c",
        published=True,
        created_at=now,
        updated_at=now,
    )
    dumped = response.model_dump(by_alias=True)
    assert dumped["createdAt"] == now
    assert dumped["updatedAt"] == now


def test_user_password_byte_limit():
    with pytest.raises(ValidationError):
        InsertUser.model_validate({"username": "admin", "password": "é" * 40})
    InsertUser.model_validate({"username": "admin", "password": "p" * 72})


def test_user_password_minimum_length():
    with pytest.raises(ValidationError):
        InsertUser.model_validate({"username": "admin", "password": "short"})
