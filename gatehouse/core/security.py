"""
Bearer token handling.

Session issuance lives outside this service; these helpers only decode
and verify the JWTs it hands out (and mint them for local tooling/tests).
"""

import secrets
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, Optional

import jwt

from gatehouse.config.settings import settings
from gatehouse.utils.datetime_utils import DateTimeHelper
from gatehouse.core.exceptions import InvalidTokenError, TokenExpiredError
from gatehouse.core.logging import get_logger

logger = get_logger(__name__)


class TokenType(str, Enum):
    ACCESS = "access"


class TokenManager:
    """JWT token management utilities"""

    @staticmethod
    def create_token(
        subject: str,
        token_type: TokenType = TokenType.ACCESS,
        expires_delta: Optional[timedelta] = None,
        extra_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create JWT token for a user id.

        Args:
            subject: User id placed in the ``sub`` claim
            token_type: Type of token to create
            expires_delta: Custom expiration time
            extra_claims: Additional claims to embed

        Returns:
            Encoded JWT token
        """
        now = DateTimeHelper.utcnow()
        expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode = dict(extra_claims or {})
        to_encode.update({
            "sub": subject,
            "exp": expire,
            "iat": now,
            "type": token_type.value,
            "jti": secrets.token_urlsafe(16),
        })
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(token: str, expected_type: TokenType = TokenType.ACCESS) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token has expired
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token verification failed: {e}")
            raise InvalidTokenError() from e

        if payload.get("type") != expected_type.value or not payload.get("sub"):
            raise InvalidTokenError()

        return payload


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    return TokenManager.create_token(user_id, TokenType.ACCESS, expires_delta)


def verify_token(token: str) -> Dict[str, Any]:
    return TokenManager.verify_token(token, TokenType.ACCESS)
