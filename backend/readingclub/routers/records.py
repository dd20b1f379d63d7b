"""Weekly records, one per participation."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import WeeklyRecordIn, WeeklyRecordOut
from .common import IdPath, deleted, id_query

router = APIRouter(prefix="/api/admin/records", tags=["records"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[WeeklyRecordOut])
def list_records(db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).list()


@router.get("/person/{person_id}/semester/{semester_id}", response_model=List[WeeklyRecordOut])
def list_records_by_person_and_semester(person_id: IdPath, semester_id: IdPath, db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).list_by_person_and_semester(person_id, semester_id)


@router.get("/person/{person_id}", response_model=List[WeeklyRecordOut])
def list_records_by_person(person_id: IdPath, db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).list_by_person(person_id)


@router.get("/semester/{semester_id}", response_model=List[WeeklyRecordOut])
def list_records_by_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).list_by_semester(semester_id)


@router.get("/{record_id}", response_model=WeeklyRecordOut)
def get_record(record_id: IdPath, db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).get(record_id)


@router.post("", response_model=WeeklyRecordOut, status_code=201)
def create_record(
    payload: WeeklyRecordIn,
    participation_id: int = id_query("participationId"),
    db: Session = Depends(get_session),
):
    """Create the weekly record of a participation (at most one each)."""
    return services.WeeklyRecordService(db).create(participation_id, payload.model_dump(exclude_none=True))


@router.put("/{record_id}", response_model=WeeklyRecordOut)
def update_record(record_id: IdPath, payload: WeeklyRecordIn, db: Session = Depends(get_session)):
    return services.WeeklyRecordService(db).update(record_id, payload.model_dump(exclude_none=True))


@router.delete("/{record_id}")
def delete_record(record_id: IdPath, db: Session = Depends(get_session)):
    services.WeeklyRecordService(db).delete(record_id)
    return deleted("Record")
