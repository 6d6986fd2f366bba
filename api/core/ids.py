"""
Path id parsing shared by the routers.
"""

from __future__ import annotations

from fastapi import HTTPException, status

# Upper bound of a Postgres `serial` column.
MAX_RECORD_ID = 2**31 - 1


def parse_record_id(raw: str, *, label: str = "ID") -> int:
    value = (raw or "").strip()
    if not (value.isascii() and value.isdigit()):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label}.")

    record_id = int(value)
    if not 1 <= record_id <= MAX_RECORD_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label}.")
    return record_id
