"""Health check endpoint for the filestorage API."""

from datetime import UTC, datetime

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter(tags=["Health"])

FILESTORAGE_VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    time: str
    version: str


@router.get("/health", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """Report liveness with the current time (ISO-8601) and service version."""
    return HealthResponse(
        status="ok",
        time=datetime.now(UTC).isoformat(),
        version=FILESTORAGE_VERSION,
    )
