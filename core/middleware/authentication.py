"""
Authentication middleware for verifying bearer tokens.

This middleware:
1. Reads a JWT from the Authorization header when one is sent
2. Verifies its signature and expiry
3. Stores the token claims on the request scope
4. Lets anonymous requests through; routes decide what they require
"""

import logging
from typing import Callable, Optional
from datetime import datetime, timezone
import jwt
from fastapi import Request, status
from fastapi.responses import JSONResponse

from core.security import verify_jwt_token, JWTPayload

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""
    pass


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is invalid."""
    pass


class AuthenticationMiddleware:
    """
    Authentication middleware that attaches verified token claims.

    A request without a token continues anonymously. A request with a token
    that fails verification is answered with 401.
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
    ):
        """
        Initialize authentication middleware.

        Args:
            app: ASGI application
            jwt_secret: Secret key for JWT verification
            jwt_algorithm: JWT signing algorithm
        """
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        token = self._extract_token(request)
        if token is None:
            await self.app(scope, receive, send)
            return

        try:
            try:
                payload = verify_jwt_token(token, self.jwt_secret, self.jwt_algorithm)
            except jwt.ExpiredSignatureError:
                raise TokenExpiredError("Token has expired")
            except jwt.InvalidTokenError as e:
                raise TokenInvalidError(f"Invalid token: {str(e)}")
        except TokenExpiredError:
            await self._send_error_response(
                scope,
                receive,
                send,
                code="TOKEN_EXPIRED",
                message="Authentication token has expired.",
            )
            return
        except TokenInvalidError as e:
            logger.warning(f"Invalid token: {str(e)}")
            await self._send_error_response(
                scope,
                receive,
                send,
                code="TOKEN_INVALID",
                message="Invalid authentication token.",
            )
            return

        scope["user"] = payload
        await self.app(scope, receive, send)

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract JWT token from Authorization header.

        Returns:
            JWT token or None
        """
        auth_header = request.headers.get("Authorization")

        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:]

        return None

    async def _send_error_response(
        self,
        scope: dict,
        receive: Callable,
        send: Callable,
        code: str,
        message: str,
    ) -> None:
        """Send a 401 error response for authentication failures."""
        error_response = {
            "error": {
                "code": code,
                "message": message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        }

        response = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=error_response,
            headers={"WWW-Authenticate": "Bearer"},
        )

        await response(scope, receive, send)


def get_current_user(request: Request) -> Optional[JWTPayload]:
    """
    Get the verified token claims for this request.

    Returns:
        Token claims, or None for anonymous requests
    """
    return request.scope.get("user")
