"""Identity dependencies for routes.

Responsibilities:
- Verify bearer JWTs issued by the external identity provider with python-jose.
- Expose the verified identity (subject claim) to routes, optionally or strictly.
- Resolve the identity to an internal user id, surfacing 401 and 404 distinctly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from instaclone.core.config import settings
from instaclone.core.database import get_db
from instaclone.core.exceptions import AuthenticationException, InvalidTokenException
from instaclone.services.users.identity import IdentityResolver

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """A verified caller as seen by the external identity provider."""

    external_id: str
    name: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def decode_identity_token(token: str) -> Identity:
    """Verify a bearer token and return the identity it carries.

    Raises InvalidTokenException when the signature, expiry, issuer or audience
    check fails, or when the token has no subject.
    """
    key = settings.auth_verification_key
    if not key:
        logger.error("Rejecting bearer token: identity provider key is not configured")
        raise InvalidTokenException()

    options = {"verify_aud": bool(settings.auth_jwt_audience)}
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=settings.jwt_algorithms,
            audience=settings.auth_jwt_audience,
            issuer=settings.auth_jwt_issuer,
            options=options,
        )
    except JWTError as e:
        logger.info(f"JWT Error: {str(e)}")
        raise InvalidTokenException()

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        logger.warning("Token payload has no subject claim")
        raise InvalidTokenException()

    name = payload.get("name")
    return Identity(
        external_id=subject,
        name=name if isinstance(name, str) and name.strip() else None,
        claims=payload,
    )


def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """Return the caller's identity, or None for anonymous callers.

    Invalid tokens on public reads are treated as anonymous.
    """
    if credentials is None or not credentials.credentials:
        return None
    try:
        identity = decode_identity_token(credentials.credentials)
    except InvalidTokenException:
        return None
    request.state.identity = identity
    return identity


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """Require a verified identity (401 otherwise)."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException()
    identity = decode_identity_token(credentials.credentials)
    request.state.identity = identity
    return identity


def get_current_user_id(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> str:
    """Require a verified identity that maps to a users row (401, then 404)."""
    return IdentityResolver(db).require(identity.external_id)


def get_optional_user_id(
    identity: Optional[Identity] = Depends(get_optional_identity),
    db: Session = Depends(get_db),
) -> Optional[str]:
    """Internal id of the caller when known; None for anonymous or unprovisioned callers."""
    if identity is None:
        return None
    return IdentityResolver(db).resolve(identity.external_id)
