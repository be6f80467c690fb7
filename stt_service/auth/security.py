"""Authentication and authorization utilities."""

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, Request
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stt_service.config import get_settings
from stt_service.db.models import ApiKey
from stt_service.db.session import get_db
from stt_service.errors import ActionError
from stt_service.schemas.schemas import CurrentUser

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

KEY_RANDOM_HEX_CHARS = 32
KEY_LOOKUP_PREFIX_LENGTH = 12


def generate_api_key() -> tuple[str, str]:
    """
    Generate a new API key.
    Returns: (full_key, prefix)
    Format: stt_XXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX (32 random hex chars after prefix)
    """
    random_part = secrets.token_hex(KEY_RANDOM_HEX_CHARS // 2)
    full_key = f"{settings.api_key_prefix}{random_part}"
    return full_key, full_key[:KEY_LOOKUP_PREFIX_LENGTH]


def hash_api_key(api_key: str) -> str:
    """Hash an API key for storage."""
    return pwd_context.hash(api_key)


def verify_api_key(plain_key: str, hashed_key: str) -> bool:
    """Verify an API key against its hash."""
    return pwd_context.verify(plain_key, hashed_key)


def _is_well_formed(api_key_str: str) -> bool:
    prefix = settings.api_key_prefix
    if not api_key_str.startswith(prefix):
        return False
    random_part = api_key_str[len(prefix):]
    return len(random_part) == KEY_RANDOM_HEX_CHARS and all(
        c in string.hexdigits for c in random_part
    )


async def get_api_key_from_db(
    db: AsyncSession, key_prefix: str, full_key: str
) -> Optional[ApiKey]:
    """Look up an API key by prefix and verify the full key."""
    result = await db.execute(
        select(ApiKey).where(
            ApiKey.key_prefix == key_prefix,
            ApiKey.is_active.is_(True),
        )
    )

    for api_key in result.scalars():
        expires_at = api_key.expires_at
        if expires_at is not None:
            # SQLite hands back naive timestamps
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at < datetime.now(timezone.utc):
                continue

        if verify_api_key(full_key, api_key.key_hash):
            return api_key

    return None


class AuthenticatedUser:
    """Dependency resolving the requesting user, or None when absent."""

    async def __call__(
        self,
        request: Request,
        authorization: Optional[str] = Header(None),
        x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
        db: AsyncSession = Depends(get_db),
    ) -> Optional[CurrentUser]:
        """Extract and validate the API key from the request."""
        # Try Authorization header first, then X-API-Key
        api_key_str = None

        if authorization:
            if not authorization.startswith("Bearer "):
                logger.warning(f"Rejected {request.url.path}: invalid authorization scheme")
                return None
            api_key_str = authorization[7:]
        elif x_api_key:
            api_key_str = x_api_key

        if not api_key_str:
            return None

        if not _is_well_formed(api_key_str):
            logger.warning(f"Rejected {request.url.path}: malformed API key")
            return None

        prefix = api_key_str[:KEY_LOOKUP_PREFIX_LENGTH]
        api_key = await get_api_key_from_db(db, prefix, api_key_str)

        if api_key is None:
            logger.warning(f"Rejected {request.url.path}: unknown, revoked or expired API key {prefix}")
            return None

        # Store in request state for the rate limiter
        request.state.api_key = api_key
        return CurrentUser(id=api_key.owner, api_key_id=api_key.id)


get_current_user = AuthenticatedUser()


def require_user(user: Optional[CurrentUser]) -> CurrentUser:
    """Return the authenticated user or fail with UNAUTHORIZED."""
    if user is None:
        raise ActionError(
            code="UNAUTHORIZED",
            message="You must be signed in to perform this action.",
        )
    return user


async def require_current_user(
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> CurrentUser:
    """Route dependency: fail before any body validation when unauthenticated."""
    return require_user(user)


async def create_api_key(
    db: AsyncSession,
    name: str,
    owner: str,
    expires_in_days: Optional[int] = None,
) -> tuple[ApiKey, str]:
    """
    Create a new API key acting as ``owner``.
    Returns: (ApiKey model, full_key_string)
    """
    full_key, prefix = generate_api_key()
    hashed = hash_api_key(full_key)

    expires_at = None
    if expires_in_days:
        expires_at = datetime.now(timezone.utc) + timedelta(days=expires_in_days)

    api_key = ApiKey(
        key_hash=hashed,
        key_prefix=prefix,
        name=name,
        owner=owner,
        expires_at=expires_at,
    )

    db.add(api_key)
    await db.flush()
    await db.refresh(api_key)

    logger.info(f"Created API key {prefix} for owner {owner}")
    return api_key, full_key
