"""
Post API endpoints.

Public reads live under /posts, admin reads under /admin/posts. Writes are
not authenticated; the admin caller is trusted by route.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from core.ids import parse_record_id
from storage import Storage
from storage.dependencies import get_storage

from . import schemas, service

router = APIRouter()


@router.get("/posts")
async def list_published_posts(
    storage: Storage = Depends(get_storage),
) -> list[schemas.PostResponse]:
    return await service.list_published_posts(storage)


@router.get("/admin/posts")
async def list_all_posts(
    storage: Storage = Depends(get_storage),
) -> list[schemas.PostResponse]:
    return await service.list_all_posts(storage)


@router.get("/posts/{slug}")
async def get_post(
    slug: str,
    admin: str | None = Query(default=None),
    storage: Storage = Depends(get_storage),
) -> schemas.PostResponse:
    """
    Public lookup by slug. Drafts are 404 unless `?admin=` is non-empty.
    """
    return await service.get_post_by_slug(storage, slug, include_unpublished=bool(admin))


@router.get("/admin/posts/{post_id}")
async def get_post_for_edit(
    post_id: str,
    storage: Storage = Depends(get_storage),
) -> schemas.PostResponse:
    return await service.get_post_by_id(storage, parse_record_id(post_id, label="post ID"))


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: schemas.InsertPost,
    storage: Storage = Depends(get_storage),
) -> schemas.PostResponse:
    return await service.create_post(storage, payload)


@router.put("/posts/{post_id}")
async def update_post(
    post_id: str,
    payload: schemas.UpdatePost,
    storage: Storage = Depends(get_storage),
) -> schemas.PostResponse:
    record_id = parse_record_id(post_id, label="post ID")
    return await service.update_post(storage, record_id, payload)


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    storage: Storage = Depends(get_storage),
) -> schemas.MessageResponse:
    return await service.delete_post(storage, parse_record_id(post_id, label="post ID"))
