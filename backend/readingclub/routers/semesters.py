"""Semester CRUD plus the groups and books attached to each semester."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import BookOut, GroupOut, SemesterIn, SemesterOut
from .common import IdPath, deleted, id_query

router = APIRouter(prefix="/api/admin/semesters", tags=["semesters"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[SemesterOut])
def list_semesters(db: Session = Depends(get_session)):
    return services.SemesterService(db).list()


@router.get("/{semester_id}", response_model=SemesterOut)
def get_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    return services.SemesterService(db).get(semester_id)


@router.post("", response_model=SemesterOut, status_code=201)
def create_semester(payload: SemesterIn, db: Session = Depends(get_session)):
    """Create a semester. `endDate` may equal `startDate` but not precede it."""
    return services.SemesterService(db).create(payload.name, payload.start_date, payload.end_date, payload.is_break)


@router.put("/{semester_id}", response_model=SemesterOut)
def update_semester(semester_id: IdPath, payload: SemesterIn, db: Session = Depends(get_session)):
    return services.SemesterService(db).update(
        semester_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        is_break=payload.is_break,
    )


@router.delete("/{semester_id}")
def delete_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    services.SemesterService(db).delete(semester_id)
    return deleted("Semester")


@router.get("/{semester_id}/groups", response_model=List[GroupOut])
def list_semester_groups(semester_id: IdPath, db: Session = Depends(get_session)):
    return services.SemesterService(db).groups(semester_id)


@router.post("/{semester_id}/groups")
def add_semester_group(semester_id: IdPath, group_id: int = id_query("groupId"), db: Session = Depends(get_session)):
    return services.SemesterService(db).add_group(semester_id, group_id)


@router.delete("/{semester_id}/groups/{group_id}")
def remove_semester_group(semester_id: IdPath, group_id: IdPath, db: Session = Depends(get_session)):
    return services.SemesterService(db).remove_group(semester_id, group_id)


@router.get("/{semester_id}/books", response_model=List[BookOut])
def list_semester_books(semester_id: IdPath, db: Session = Depends(get_session)):
    return services.SemesterService(db).books(semester_id)


@router.post("/{semester_id}/books")
def add_semester_book(semester_id: IdPath, book_id: int = id_query("bookId"), db: Session = Depends(get_session)):
    return services.SemesterService(db).add_book(semester_id, book_id)


@router.delete("/{semester_id}/books/{book_id}")
def remove_semester_book(semester_id: IdPath, book_id: IdPath, db: Session = Depends(get_session)):
    return services.SemesterService(db).remove_book(semester_id, book_id)
