from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["System"])


@router.get("/health")
def health():
    return {"status": "Server is running"}
