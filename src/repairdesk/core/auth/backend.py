"""JWT access token helpers.

Token issuance (login, refresh) belongs to the identity service; this
module only knows how to mint a token for a given actor (used by tests
and the CLI) and how to verify one.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from repairdesk.config import settings
from repairdesk.core.auth.schemas import TokenData


ACCESS_TOKEN_JTI_LENGTH = 32


def create_access_token(
    actor_id: str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a short-lived JWT access token for ``actor_id``."""
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode: dict[str, Any] = {
        "sub": actor_id,
        "exp": expire,
        "type": "access",
        "iat": now,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    }
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    actor_id = payload.get("sub")
    exp = payload.get("exp")
    if not actor_id or exp is None:
        return None

    return TokenData(
        actor_id=str(actor_id),
        exp=datetime.fromtimestamp(exp, tz=UTC),
        type=payload.get("type", "access"),
    )
