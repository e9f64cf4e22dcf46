"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check that the delivery table is reachable."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set DOCK_SUPABASE_URL and DOCK_SUPABASE_KEY environment variables.",
            "deliveries_count": 0,
        }

    try:
        response = supabase.table(settings.deliveries_table).select("id", count="exact").limit(1).execute()
        count = response.count or 0
        return {
            "configured": True,
            "connected": True,
            "deliveries_count": count,
            "message": f"Database connected. Found {count} deliveries.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
