"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel


class TokenData(BaseModel):
    """Data extracted from a JWT access token.

    The token names the actor only. The tenant is always resolved from
    the actor's account record, never read from the token.

    Attributes:
        actor_id: The account id from the ``sub`` claim
        exp: Token expiration time
        type: Token type
    """

    actor_id: str
    exp: datetime
    type: str = "access"
