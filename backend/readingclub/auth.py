"""Authentication helpers and FastAPI security dependencies.

Tokens are HS256 JWTs carrying `user_id`, `username` and `scope`
(`admin` or `user`). The dependencies below decode the bearer token,
check the scope and look the account up so deleted admins and removed
persons are rejected even while their token is still valid.

Token problems raise `HTTPException(401)`; a valid token with the wrong
scope, or a user token used for somebody else's data, raises 403.
"""

from typing import Dict

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .database import get_session
from .services import SCOPE_ADMIN, SCOPE_USER

bearer_scheme = HTTPBearer()


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="invalid token")


def get_token_payload(credentials: HTTPAuthorizationCredentials = Security(bearer_scheme)) -> Dict:
    payload = decode_token(credentials.credentials)
    if not payload.get("user_id") or payload.get("scope") not in (SCOPE_ADMIN, SCOPE_USER):
        raise HTTPException(status_code=401, detail="invalid token payload")
    return payload


def get_current_admin(payload: Dict = Depends(get_token_payload),
                      session: Session = Depends(get_session)) -> models.Admin:
    """FastAPI dependency that returns the authenticated, active admin."""
    if payload["scope"] != SCOPE_ADMIN:
        raise HTTPException(status_code=403, detail="admin access required")
    admin = repositories.AdminRepository(session).get(payload["user_id"])
    if not admin:
        raise HTTPException(status_code=401, detail="admin not found")
    if admin.is_deleted:
        raise HTTPException(status_code=403, detail="account has been deleted")
    return admin


def get_current_person(payload: Dict = Depends(get_token_payload),
                       session: Session = Depends(get_session)) -> models.Person:
    """FastAPI dependency that returns the person behind a user token."""
    if payload["scope"] != SCOPE_USER:
        raise HTTPException(status_code=403, detail="user token required")
    person = repositories.PersonRepository(session).get(payload["user_id"])
    if not person:
        raise HTTPException(status_code=401, detail="person not found")
    return person


def require_person_access(payload: Dict, person_id: int) -> None:
    """Allow admins, or the person whose id is `person_id`."""
    if payload["scope"] == SCOPE_ADMIN:
        return
    if payload["user_id"] != person_id:
        raise HTTPException(status_code=403, detail="access to another person's data is not allowed")
