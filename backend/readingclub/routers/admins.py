"""Admin account management: listing, soft delete and restore."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import AdminIn, AdminOut
from .common import IdPath, deleted

router = APIRouter(prefix="/api/admin/admins", tags=["admins"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[AdminOut])
def list_admins(db: Session = Depends(get_session)):
    """Active (not soft-deleted) admins."""
    return services.AdminService(db).list_active()


@router.get("/deleted", response_model=List[AdminOut])
def list_deleted_admins(db: Session = Depends(get_session)):
    return services.AdminService(db).list_deleted()


@router.get("/{admin_id}", response_model=AdminOut)
def get_admin(admin_id: IdPath, db: Session = Depends(get_session)):
    return services.AdminService(db).get(admin_id)


@router.post("", response_model=AdminOut, status_code=201)
def create_admin(payload: AdminIn, db: Session = Depends(get_session)):
    return services.AdminService(db).create(payload.username, payload.name, payload.password, payload.type)


@router.put("/{admin_id}", response_model=AdminOut)
def update_admin(admin_id: IdPath, payload: AdminIn, db: Session = Depends(get_session)):
    return services.AdminService(db).update(
        admin_id,
        username=payload.username,
        name=payload.name,
        password=payload.password,
        admin_type=payload.type,
    )


@router.delete("/{admin_id}")
def delete_admin(admin_id: IdPath, db: Session = Depends(get_session)):
    """Soft-delete; the last active superadmin is protected."""
    services.AdminService(db).delete(admin_id)
    return deleted("Admin")


@router.put("/{admin_id}/restore", response_model=AdminOut)
def restore_admin(admin_id: IdPath, db: Session = Depends(get_session)):
    return services.AdminService(db).restore(admin_id)
