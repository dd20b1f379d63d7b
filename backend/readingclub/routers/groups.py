"""Group CRUD and group membership.

Adding or removing a member answers with the group id and the current
member ids; `GET /{id}/persons` returns the member persons themselves.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import GroupIn, GroupOut, PersonOut
from .common import IdPath, deleted, id_query

router = APIRouter(prefix="/api/admin/groups", tags=["groups"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[GroupOut])
def list_groups(db: Session = Depends(get_session)):
    return services.GroupService(db).list()


@router.get("/name/{group_name}", response_model=GroupOut)
def get_group_by_name(group_name: str, db: Session = Depends(get_session)):
    return services.GroupService(db).get_by_name(group_name)


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: IdPath, db: Session = Depends(get_session)):
    return services.GroupService(db).get(group_id)


@router.post("", response_model=GroupOut, status_code=201)
def create_group(payload: GroupIn, db: Session = Depends(get_session)):
    return services.GroupService(db).create(payload.group_name)


@router.put("/{group_id}", response_model=GroupOut)
def update_group(group_id: IdPath, payload: GroupIn, db: Session = Depends(get_session)):
    return services.GroupService(db).update(group_id, group_name=payload.group_name)


@router.delete("/{group_id}")
def delete_group(group_id: IdPath, db: Session = Depends(get_session)):
    services.GroupService(db).delete(group_id)
    return deleted("Group")


@router.get("/{group_id}/persons", response_model=List[PersonOut])
def list_group_persons(group_id: IdPath, db: Session = Depends(get_session)):
    return services.GroupService(db).members(group_id)


@router.post("/{group_id}/persons")
def add_group_person(group_id: IdPath, person_id: int = id_query("personId"), db: Session = Depends(get_session)):
    """Add a person to the group; adding an existing member is a no-op.

    Returns the group id and the member id list after the change.
    """
    return services.GroupService(db).add_person(group_id, person_id)


@router.delete("/{group_id}/persons/{person_id}")
def remove_group_person(group_id: IdPath, person_id: IdPath, db: Session = Depends(get_session)):
    return services.GroupService(db).remove_person(group_id, person_id)
