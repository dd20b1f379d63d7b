"""Which book each person reads in a semester."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import SemesterUserBookIn, SemesterUserBookOut
from .common import IdPath, deleted, id_query

router = APIRouter(
    prefix="/api/admin/semester-user-books", tags=["semester-user-books"], dependencies=[Depends(get_current_admin)]
)


def _out(rows) -> List[SemesterUserBookOut]:
    return [SemesterUserBookOut.model_validate(e) for e in rows]


@router.get("", response_model=List[SemesterUserBookOut])
def list_entries(db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list())


@router.get("/semester/{semester_id}/person/{person_id}", response_model=List[SemesterUserBookOut])
def list_by_semester_and_person(semester_id: IdPath, person_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list_by_semester_and_person(semester_id, person_id))


@router.get("/semester/{semester_id}/book/{book_id}", response_model=List[SemesterUserBookOut])
def list_by_semester_and_book(semester_id: IdPath, book_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list_by_semester_and_book(semester_id, book_id))


@router.get("/semester/{semester_id}", response_model=List[SemesterUserBookOut])
def list_by_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list_by_semester(semester_id))


@router.get("/person/{person_id}", response_model=List[SemesterUserBookOut])
def list_by_person(person_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list_by_person(person_id))


@router.get("/book/{book_id}", response_model=List[SemesterUserBookOut])
def list_by_book(book_id: IdPath, db: Session = Depends(get_session)):
    return _out(services.SemesterUserBookService(db).list_by_book(book_id))


@router.get("/{entry_id}", response_model=SemesterUserBookOut)
def get_entry(entry_id: IdPath, db: Session = Depends(get_session)):
    return SemesterUserBookOut.model_validate(services.SemesterUserBookService(db).get(entry_id))


@router.post("", response_model=SemesterUserBookOut, status_code=201)
def create_entry(
    payload: SemesterUserBookIn,
    semester_id: int = id_query("semesterId"),
    person_id: int = id_query("personId"),
    book_id: int = id_query("bookId"),
    db: Session = Depends(get_session),
):
    entry = services.SemesterUserBookService(db).create(
        semester_id, person_id, book_id, payload.status, payload.record_date
    )
    return SemesterUserBookOut.model_validate(entry)


@router.put("/{entry_id}", response_model=SemesterUserBookOut)
def update_entry(entry_id: IdPath, payload: SemesterUserBookIn, db: Session = Depends(get_session)):
    entry = services.SemesterUserBookService(db).update(entry_id, status=payload.status, record_date=payload.record_date)
    return SemesterUserBookOut.model_validate(entry)


@router.delete("/{entry_id}")
def delete_entry(entry_id: IdPath, db: Session = Depends(get_session)):
    services.SemesterUserBookService(db).delete(entry_id)
    return deleted("SemesterUserBook")
