"""
QnA Backend — Authentication Service
======================================

What:  Password hashing and session token issue/verification.
How:   passlib (argon2) for password hashes; python-jose for HS256 tokens
       carrying `account_id`, `nbf` and `exp` claims.

Token Lifecycle:
    login → issue_token(account_id)          nbf = now, exp = now + lifetime
    request → verify_token(header value)     signature, claims, then window
    The validity window is [nbf, exp). It is checked here rather than by
    the JWT library so that the boundary is exact and the rejection reason
    can be logged.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from qna.config import settings
from qna.exceptions import CannotDecryptTokenError
from qna.schemas.auth import Session

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def issue_token(account_id: int, now: Optional[datetime] = None) -> str:
    """
    Create a signed session token for `account_id`.

    Args:
        account_id: Owner of the session
        now: Start of the validity window; defaults to the current UTC time
    """
    now = now or datetime.now(timezone.utc)
    claims = {
        "account_id": account_id,
        "nbf": now,
        "exp": now + timedelta(hours=settings.session_lifetime_hours),
    }
    return jwt.encode(claims, settings.session_token_key, algorithm=settings.session_token_algorithm)


def verify_token(token: str, now: Optional[datetime] = None) -> Session:
    """
    Verify a session token and return the Session it carries.

    Raises:
        CannotDecryptTokenError: bad signature, malformed claims, or `now`
            outside [nbf, exp). The reason is kept in the error context.
    """
    try:
        payload = jwt.decode(
            token,
            settings.session_token_key,
            algorithms=[settings.session_token_algorithm],
            options={"verify_exp": False, "verify_nbf": False},
        )
        session = Session.model_validate(payload)
    except (JWTError, PydanticValidationError) as e:
        logger.info("Rejected session token: %s", type(e).__name__)
        raise CannotDecryptTokenError("invalid") from e

    now = now or datetime.now(timezone.utc)
    if now < session.nbf:
        logger.info("Rejected session token for account %s: not yet valid", session.account_id)
        raise CannotDecryptTokenError("not yet valid")
    if not session.is_valid_at(now):
        logger.info("Rejected session token for account %s: expired", session.account_id)
        raise CannotDecryptTokenError("expired")

    return session

