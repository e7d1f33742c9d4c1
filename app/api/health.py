from typing import Any

from fastapi import APIRouter

from app.models.schemas import ALL_COURSES

router = APIRouter(tags=["health"])

TEE_TIMES_QUERY = {
    "course": f"Course slug or '{ALL_COURSES}' (default: configured course)",
    "date": "YYYY-MM-DD, required",
    "start": "HH:MM, optional earliest tee time",
    "end": "HH:MM, optional latest tee time",
}


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "service": "teetimes"}


@router.get("/")
async def root() -> dict[str, Any]:
    """Service info and a map of the public endpoints."""
    return {
        "service": "TeeTimes - Golf Tee Time Aggregator",
        "version": "0.1.0",
        "endpoints": {
            "health": "/health",
            "tee_times": "/tee-times",
            "courses": "/courses",
        },
        "tee_times_query": TEE_TIMES_QUERY,
    }
