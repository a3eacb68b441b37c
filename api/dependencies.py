"""FastAPI dependencies for dependency injection."""

from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from database.engine import get_db
from database.executor import QueryExecutor
from core.exceptions import Unauthorized
from core.middleware.authentication import get_current_user
from core.security import JWTPayload


async def get_query_executor(db: AsyncSession = Depends(get_db)) -> QueryExecutor:
    """Executor bound to this request's database session."""
    return QueryExecutor(db)


async def get_optional_user(request: Request) -> Optional[JWTPayload]:
    """
    Get the caller's token claims if authenticated, otherwise None.
    """
    return get_current_user(request)


async def require_admin_user(
    current_user: Optional[JWTPayload] = Depends(get_optional_user),
) -> JWTPayload:
    """Require the caller to hold an admin token."""
    if not current_user or not current_user.get("is_admin"):
        raise Unauthorized("Admin access required")
    return current_user
