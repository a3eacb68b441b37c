"""Health check endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_query_executor
from database.executor import QueryExecutor

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="0.1.0")


@router.get("/ready")
async def readiness_check(executor: QueryExecutor = Depends(get_query_executor)):
    """Readiness check: the database answers a trivial query."""
    await executor.query("SELECT 1")
    return {"status": "ready"}
