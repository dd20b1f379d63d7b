"""Person-facing portal: login, profile and own participation records.

Person-scoped routes accept the person's own user token or any admin
token; a user token for a different person gets 403.
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from .. import models, services
from ..auth import get_current_person, get_token_payload, require_person_access
from ..config import settings
from ..database import get_session
from ..schemas import LoginOut, PasswordChangeIn, PersonIn, PersonOut, UserLoginIn, WeeklyRecordIn, WeeklyRecordOut
from .common import IdPath, id_query, guarded_login

router = APIRouter(prefix="/api/user", tags=["user"])


@router.post("/login", response_model=LoginOut)
def login(payload: UserLoginIn, request: Request, db: Session = Depends(get_session)):
    """Authenticate a person by name and password."""
    svc = services.PersonService(db)
    return guarded_login(request, payload.name.strip(), lambda: svc.login(payload.name, payload.password))


@router.post("/register", response_model=PersonOut, status_code=201)
def register(payload: PersonIn, db: Session = Depends(get_session)):
    if not settings.ALLOW_OPEN_REGISTRATION:
        raise HTTPException(status_code=403, detail="registration is disabled")
    return services.PersonService(db).register(payload.name, payload.password)


@router.get("/profile", response_model=PersonOut)
def profile(person: models.Person = Depends(get_current_person)):
    return person


@router.put("/profile/password")
def change_password(
    payload: PasswordChangeIn,
    person: models.Person = Depends(get_current_person),
    db: Session = Depends(get_session),
):
    services.PersonService(db).change_password(person.id, payload.current_password, payload.new_password)
    return {"success": True, "message": "Password changed successfully"}


@router.get("/{person_id}/semesters")
def person_semesters(person_id: IdPath, token: Dict = Depends(get_token_payload), db: Session = Depends(get_session)):
    """Semesters the person took part in, each with its distinct groups."""
    require_person_access(token, person_id)
    return services.UserPortalService(db).semesters(person_id)


@router.get("/{person_id}/participations")
def person_participations(
    person_id: IdPath,
    semester_id: Optional[int] = id_query("semesterId", default=None),
    group_id: Optional[int] = id_query("groupId", default=None),
    token: Dict = Depends(get_token_payload),
    db: Session = Depends(get_session),
):
    require_person_access(token, person_id)
    return services.UserPortalService(db).participations(person_id, semester_id=semester_id, group_id=group_id)


@router.put("/participations/{participation_id}/record", response_model=WeeklyRecordOut)
def upsert_record(
    participation_id: IdPath,
    payload: WeeklyRecordIn,
    token: Dict = Depends(get_token_payload),
    db: Session = Depends(get_session),
):
    """Update the participation's weekly record, creating it on first submit."""
    participation = services.ParticipationService(db).get(participation_id)
    require_person_access(token, participation.person_id)
    return services.WeeklyRecordService(db).upsert_for_participation(
        participation_id, payload.model_dump(exclude_none=True)
    )
