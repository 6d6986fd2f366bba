"""
Storage dependency for FastAPI routes.
"""

from __future__ import annotations

from fastapi import Request

from .base import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage is not initialized. Start the app through its lifespan.")
    return storage
