"""
Post business logic.

Visibility policy lives here, not in storage: the gateway returns drafts too,
and public lookups hide them.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from storage import Storage, UniquenessViolation

from . import content, schemas

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found."
SLUG_TAKEN = "A post with this slug already exists."


def _to_post_response(row: dict) -> schemas.PostResponse:
    return schemas.PostResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        slug=str(row["slug"]),
        content=str(row["content"]),
        excerpt=row.get("excerpt"),
        published=bool(row.get("published", False)),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _bad_slug(exc: content.SlugDerivationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def list_published_posts(storage: Storage) -> list[schemas.PostResponse]:
    rows = await storage.get_published_posts()
    return [_to_post_response(row) for row in rows]


async def list_all_posts(storage: Storage) -> list[schemas.PostResponse]:
    rows = await storage.get_all_posts()
    return [_to_post_response(row) for row in rows]


async def get_post_by_slug(
    storage: Storage,
    slug: str,
    *,
    include_unpublished: bool = False,
) -> schemas.PostResponse:
    row = await storage.get_post_by_slug(slug)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)

    # Drafts look exactly like missing posts to the public.
    if not bool(row.get("published", False)) and not include_unpublished:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return _to_post_response(row)


async def get_post_by_id(storage: Storage, post_id: int) -> schemas.PostResponse:
    row = await storage.get_post_by_id(post_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)
    return _to_post_response(row)


async def create_post(storage: Storage, payload: schemas.InsertPost) -> schemas.PostResponse:
    try:
        data = content.prepare_insert(payload)
    except content.SlugDerivationError as exc:
        raise _bad_slug(exc) from exc

    try:
        row = await storage.create_post(data)
    except UniquenessViolation as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=SLUG_TAKEN) from exc

    logger.info("post_created id=%s slug=%s published=%s", row["id"], row["slug"], row["published"])
    return _to_post_response(row)


async def update_post(
    storage: Storage,
    post_id: int,
    payload: schemas.UpdatePost,
) -> schemas.PostResponse:
    try:
        data = content.prepare_update(payload)
    except content.SlugDerivationError as exc:
        raise _bad_slug(exc) from exc

    try:
        row = await storage.update_post(post_id, data)
    except UniquenessViolation as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=SLUG_TAKEN) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)

    logger.info("post_updated id=%s fields=%s", post_id, ",".join(sorted(data)) or "-")
    return _to_post_response(row)


async def delete_post(storage: Storage, post_id: int) -> schemas.MessageResponse:
    deleted = await storage.delete_post(post_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)

    logger.info("post_deleted id=%s", post_id)
    return schemas.MessageResponse(message="Post deleted successfully")
