"""Bearer credential verification."""

from typing import Optional

from fastapi import Header, Request
from jose import JWTError, jwt
from pydantic import ValidationError

from workflow_gateway.config import Settings
from workflow_gateway.core.exceptions import InvalidCredentialError, MalformedCredentialError
from workflow_gateway.core.logging import actor_did_var, get_logger
from workflow_gateway.schemas.auth import Actor, TokenClaims

logger = get_logger("security")


def extract_token(authorization: Optional[str]) -> str:
    """Return the token of an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise MalformedCredentialError()

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedCredentialError()

    return parts[1]


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> TokenClaims:
    """
    Verify signature and expiry of a JWT and parse its claims.

    Raises:
        InvalidCredentialError: bad signature, expired token, or a payload
            without a ``did`` claim.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        # Debug level: unauthenticated traffic is not an operational problem
        logger.debug(f"Token verification failed: {e}")
        raise InvalidCredentialError() from e

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        logger.debug(f"Token payload rejected: {e}")
        raise InvalidCredentialError() from e


async def get_current_actor(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Actor:
    """Get the authenticated actor from the bearer token."""
    settings: Settings = request.app.state.settings
    token = extract_token(authorization)
    claims = verify_token(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    actor_did_var.set(claims.did)
    return Actor(did=claims.did, username=claims.username)
