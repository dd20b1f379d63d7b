"""Reading assignments scheduled inside a semester."""

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import services
from ..auth import get_current_admin
from ..database import get_session
from ..schemas import AssignmentIn, AssignmentOut
from .common import IdPath, deleted, id_query

router = APIRouter(prefix="/api/admin/assignments", tags=["assignments"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[AssignmentOut])
def list_assignments(db: Session = Depends(get_session)):
    return services.ReadingAssignmentService(db).list()


@router.get("/semester/{semester_id}", response_model=List[AssignmentOut])
def list_assignments_by_semester(semester_id: IdPath, db: Session = Depends(get_session)):
    return services.ReadingAssignmentService(db).list_by_semester(semester_id)


@router.get("/{assignment_id}", response_model=AssignmentOut)
def get_assignment(assignment_id: IdPath, db: Session = Depends(get_session)):
    return services.ReadingAssignmentService(db).get(assignment_id)


@router.post("", response_model=AssignmentOut, status_code=201)
def create_assignment(
    payload: AssignmentIn,
    semester_id: int = id_query("semesterId"),
    db: Session = Depends(get_session),
):
    return services.ReadingAssignmentService(db).create(
        semester_id, payload.title, payload.description, payload.assigned_date
    )


@router.put("/{assignment_id}", response_model=AssignmentOut)
def update_assignment(assignment_id: IdPath, payload: AssignmentIn, db: Session = Depends(get_session)):
    return services.ReadingAssignmentService(db).update(
        assignment_id, title=payload.title, description=payload.description, assigned_date=payload.assigned_date
    )


@router.delete("/{assignment_id}")
def delete_assignment(assignment_id: IdPath, db: Session = Depends(get_session)):
    services.ReadingAssignmentService(db).delete(assignment_id)
    return deleted("Assignment")
