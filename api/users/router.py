"""
Admin user endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.ids import parse_record_id
from storage import Storage
from storage.dependencies import get_storage

from . import schemas, service

router = APIRouter()


@router.post("/admin/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: schemas.InsertUser,
    storage: Storage = Depends(get_storage),
) -> schemas.UserResponse:
    return await service.create_user(storage, payload)


@router.get("/admin/users/{user_id}")
async def get_user(
    user_id: str,
    storage: Storage = Depends(get_storage),
) -> schemas.UserResponse:
    return await service.get_user(storage, parse_record_id(user_id, label="user ID"))
