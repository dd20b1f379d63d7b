"""Admin authentication: login and registration."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from .. import services
from ..config import settings
from ..database import get_session
from ..schemas import AdminIn, LoginIn, LoginOut
from .common import guarded_login

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_session)):
    """Authenticate an admin and return a signed token.

    Unknown usernames and wrong passwords get 401; deleted accounts 403.
    """
    svc = services.AdminService(db)
    return guarded_login(request, payload.username, lambda: svc.login(payload.username, payload.password))


@router.post("/register", status_code=201)
def register(payload: AdminIn, db: Session = Depends(get_session)):
    """Create an admin account. Disabled when open registration is off."""
    if not settings.ALLOW_OPEN_REGISTRATION:
        raise HTTPException(status_code=403, detail="registration is disabled")
    admin = services.AdminService(db).create(payload.username, payload.name, payload.password, payload.type)
    return {
        "success": True,
        "message": "Admin registered successfully",
        "adminId": admin.id,
        "username": admin.username,
    }
