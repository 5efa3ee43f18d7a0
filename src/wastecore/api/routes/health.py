"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...persistence.store import DocumentStore
from ..deps import get_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(store: DocumentStore = Depends(get_store)) -> dict:
    """Check that the configured store answers a read."""
    backend = type(store).__name__
    try:
        centers = store.list_centers()
        return {
            "backend": backend,
            "connected": True,
            "centers_count": len(centers),
            "message": f"Store reachable. Found {len(centers)} collection centers.",
        }
    except Exception as exc:
        return {
            "backend": backend,
            "connected": False,
            "error": str(exc),
            "message": f"Store connection error: {exc}",
        }
