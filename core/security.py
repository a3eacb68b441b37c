"""
Security utilities.

Provides JWT access tokens for API callers and structured audit logging
for admin writes.
"""

import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional, TypedDict

import jwt

from core.config import settings

logger = logging.getLogger("security.audit")


class JWTPayload(TypedDict, total=False):
    """Claims carried by an access token."""

    username: str
    is_admin: bool
    type: str
    iat: int
    exp: int
    jti: str


class AuditAction(str, Enum):
    """Audit log action types."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def create_access_token(
    username: str,
    is_admin: bool = False,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token.

    Args:
        username: Caller identity
        is_admin: Whether the caller may perform writes
        secret_key: Signing key (defaults to settings)
        algorithm: Signing algorithm (defaults to settings)
        expires_delta: Token lifetime (defaults to settings)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload = {
        "username": username,
        "is_admin": is_admin,
        "type": "access",
        "iat": now,
        "exp": now + expires_delta,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(
        payload,
        secret_key or settings.jwt_secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )


def verify_jwt_token(
    token: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> JWTPayload:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed, mis-signed or not an access token
    """
    payload = jwt.decode(
        token,
        secret_key or settings.jwt_secret_key,
        algorithms=[algorithm or settings.jwt_algorithm],
    )
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    if not payload.get("username"):
        raise jwt.InvalidTokenError("Token missing username")
    return payload


def log_audit_event(
    action: AuditAction,
    resource_id: Optional[Any] = None,
    username: Optional[str] = None,
    request_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an audit event for a job write.

    Emits one JSON line on the ``security.audit`` logger.
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": "AUDIT",
        "action": action.value,
        "resource_type": "JOB",
        "resource_id": str(resource_id) if resource_id is not None else None,
        "username": username,
        "request_id": request_id,
        "details": details,
    }
    logger.info(json.dumps(event, default=str))
