"""Participation endpoints, including the filtered and paginated search."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import ParticipationIn, ParticipationOut, ParticipationPage
from .common import IdPath, deleted, id_query

router = APIRouter(
    prefix="/api/admin/participations", tags=["participations"], dependencies=[Depends(get_current_admin)]
)


def _out(rows) -> List[ParticipationOut]:
    # relationships are read while the request session is still open
    return [ParticipationOut.model_validate(p) for p in rows]


@router.get("", response_model=List[ParticipationOut])
def list_participations(db: Session = Depends(get_session)):
    return _out(services.ParticipationService(db).list())


@router.get("/search", response_model=ParticipationPage)
def search_participations(
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    semester_id: Optional[int] = id_query("semesterId", default=None),
    group_id: Optional[int] = id_query("groupId", default=None),
    person_id: Optional[int] = id_query("personId", default=None),
    status: Optional[str] = None,
    page: int = 0,
    size: Optional[int] = None,
    sort: str = "participationDate,desc",
    db: Session = Depends(get_session),
):
    """Search participations inside an inclusive date range.

    Optional filters are ANDed; `status` matches case-insensitively.
    `sort` is `field,direction` with an ascending default direction.
    """
    result = services.ParticipationService(db).search(
        start_date,
        end_date,
        semester_id=semester_id,
        group_id=group_id,
        person_id=person_id,
        status=status,
        page=page,
        size=size,
        sort=sort,
    )
    return ParticipationPage.model_validate(result, from_attributes=True)


@router.get("/semester/{semester_id}", response_model=List[ParticipationOut])
def list_by_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.ParticipationService(db).list_by_semester(semester_id))


@router.get("/group/{group_id}", response_model=List[ParticipationOut])
def list_by_group(group_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.ParticipationService(db).list_by_group(group_id))


@router.get("/person/{person_id}", response_model=List[ParticipationOut])
def list_by_person(person_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.ParticipationService(db).list_by_person(person_id))


@router.get("/{participation_id}", response_model=ParticipationOut)
def get_participation(participation_id: IdPath, db: Session = Depends(get_session)):
    return ParticipationOut.model_validate(services.ParticipationService(db).get(participation_id))


@router.post("", response_model=ParticipationOut, status_code=201)
def create_participation(
    payload: ParticipationIn,
    semester_id: int = id_query("semesterId"),
    group_id: int = id_query("groupId"),
    person_id: int = id_query("personId"),
    db: Session = Depends(get_session),
):
    participation = services.ParticipationService(db).create(
        semester_id, group_id, person_id, payload.status, payload.participation_date
    )
    return ParticipationOut.model_validate(participation)


@router.put("/{participation_id}", response_model=ParticipationOut)
def update_participation(participation_id: IdPath, payload: ParticipationIn, db: Session = Depends(get_session)):
    participation = services.ParticipationService(db).update(
        participation_id, status=payload.status, participation_date=payload.participation_date
    )
    return ParticipationOut.model_validate(participation)


@router.delete("/{participation_id}")
def delete_participation(participation_id: IdPath, db: Session = Depends(get_session)):
    """Delete a participation and its weekly record."""
    services.ParticipationService(db).delete(participation_id)
    return deleted("Participation")
