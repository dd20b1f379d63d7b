"""Admin-side person management."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import GroupOut, PersonIn, PersonOut
from .common import IdPath, deleted

router = APIRouter(prefix="/api/admin/persons", tags=["persons"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[PersonOut])
def list_persons(db: Session = Depends(get_session)):
    return services.PersonService(db).list()


@router.get("/{person_id}", response_model=PersonOut)
def get_person(person_id: IdPath, db: Session = Depends(get_session)):
    return services.PersonService(db).get(person_id)


@router.get("/{person_id}/groups", response_model=List[GroupOut])
def get_person_groups(person_id: IdPath, db: Session = Depends(get_session)):
    """Groups the person is a member of."""
    return services.PersonService(db).groups(person_id)


@router.post("", response_model=PersonOut, status_code=201)
def create_person(payload: PersonIn, db: Session = Depends(get_session)):
    return services.PersonService(db).create(payload.name, payload.password)


@router.put("/{person_id}", response_model=PersonOut)
def update_person(person_id: IdPath, payload: PersonIn, db: Session = Depends(get_session)):
    return services.PersonService(db).update(person_id, name=payload.name, password=payload.password)


@router.delete("/{person_id}")
def delete_person(person_id: IdPath, db: Session = Depends(get_session)):
    """Delete a person. Rejected with 400 while participations or book records reference them."""
    services.PersonService(db).delete(person_id)
    return deleted("Person")
