"""Semester endpoints; every route is scoped to the authenticated user."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import models, services
from ..auth import get_current_user, require_api_key
from ..database import get_session
from ..schemas import SemesterDetailOut, SemesterIn, SemesterOut

router = APIRouter(prefix="/semesters", tags=["semesters"], dependencies=[Depends(require_api_key)])


@router.get("")
def list_semesters(
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    """List the user's semesters, optionally filtered by a name substring."""
    semesters = services.SemesterService(db).list_for_user(user.id, search)
    return {"message": "Semesters found.", "data": [SemesterOut.model_validate(s) for s in semesters]}


@router.get("/{semester_id}")
def get_semester(semester_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Return one semester together with its subjects."""
    semester = services.SemesterService(db).get_with_subjects(semester_id, user.id)
    return {"message": "Semester found.", "data": SemesterDetailOut.model_validate(semester)}


@router.post("", status_code=201)
def create_semester(payload: SemesterIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    semester = services.SemesterService(db).create(user.id, payload.semester)
    return {"message": "Semester created.", "data": SemesterOut.model_validate(semester)}


@router.put("/{semester_id}")
def update_semester(
    semester_id: str,
    payload: SemesterIn,
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    semester = services.SemesterService(db).update(semester_id, user.id, payload.semester)
    return {"message": "Semester updated.", "data": SemesterOut.model_validate(semester)}


@router.delete("/{semester_id}")
def delete_semester(semester_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    semester = services.SemesterService(db).delete(semester_id, user.id)
    return {"message": "Semester deleted.", "data": SemesterOut.model_validate(semester)}
