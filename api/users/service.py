"""
User business logic.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import HTTPException, status

from storage import Storage, UniquenessViolation

from . import schemas, security

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username is already taken."


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
    )


async def create_user(storage: Storage, payload: schemas.InsertUser) -> schemas.UserResponse:
    existing = await storage.get_user_by_username(payload.username)
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USERNAME_TAKEN)

    # bcrypt blocks; run it in a worker thread.
    password_hash = await asyncio.to_thread(security.hash_password, payload.password)
    try:
        user_row = await storage.create_user(
            {"username": payload.username, "password": password_hash}
        )
    except UniquenessViolation as exc:
        # Lost a race with a concurrent signup for the same name.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=USERNAME_TAKEN) from exc

    logger.info("user_created id=%s", user_row["id"])
    return _to_user_response(user_row)


async def get_user(storage: Storage, user_id: int) -> schemas.UserResponse:
    user_row = await storage.get_user(user_id)
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return _to_user_response(user_row)
