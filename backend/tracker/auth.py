"""Authentication dependencies for the routers.

`require_api_key` guards every router except `/health`;
`get_current_user_id` verifies the token in the `Authorization` header
and returns the `user_id` it was issued for. Failures raise
`UnauthorizedError` so they flow through the central error handlers like
any other error kind.
"""

import hmac
from typing import Optional

from fastapi import Depends, Header, Query
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .database import get_session
from .errors import UnauthorizedError
from .services import AuthService


def require_api_key(
    apikey: Optional[str] = Header(default=None),
    api_key_param: Optional[str] = Query(default=None, alias="apiKey"),
):
    """Reject the request unless the `apikey` header or `apiKey` query matches APIKEY.

    An unset APIKEY rejects every request.
    """
    supplied = apikey or api_key_param
    if not supplied or not settings.APIKEY or not hmac.compare_digest(supplied.encode(), settings.APIKEY.encode()):
        raise UnauthorizedError("Invalid or missing API key")


def _extract_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.strip():
        raise UnauthorizedError("No token provided.")
    scheme, _, rest = authorization.strip().partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip()
    return authorization.strip()


def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    """Return the `user_id` claim of a valid token.

    Accepts the token with or without a `Bearer ` prefix.
    """
    token = _extract_token(authorization)
    if not token:
        raise UnauthorizedError("No token provided.")
    payload = AuthService.decode_token(token)
    user_id = payload.get("user_id")
    if not user_id:
        raise UnauthorizedError("Invalid token payload.")
    return user_id


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_session),
) -> models.User:
    """Like `get_current_user_id` but also loads the user, failing if it was deleted."""
    user = repositories.UserRepository(db).get(user_id)
    if not user:
        raise UnauthorizedError("User not found.")
    return user
