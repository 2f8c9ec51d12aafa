"""Grade endpoints; the parent subject must belong to the caller.

A subject's grades are listed at `/grades?subjectId=` or
`/grades/subject/{subject_id}`; `/grades/{grade_id}` returns a single grade.
"""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import models, services
from ..auth import get_current_user, require_api_key
from ..database import get_session
from ..schemas import GradeIn, GradeOut, GradeUpdate

router = APIRouter(prefix="/grades", tags=["grades"], dependencies=[Depends(require_api_key)])


def _list(subject_id: str, db: Session, user: models.User) -> dict:
    grades = services.GradeService(db).list_for_subject(subject_id, user.id)
    return {"message": "Grades found.", "data": [GradeOut.model_validate(g) for g in grades]}


@router.get("")
def list_grades(
    subject_id: str = Query(alias="subjectId"),
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    return _list(subject_id, db, user)


@router.get("/subject/{subject_id}")
def list_grades_for_subject(subject_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    return _list(subject_id, db, user)


@router.get("/{grade_id}")
def get_grade(grade_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    grade = services.GradeService(db).owned(grade_id, user.id)
    return {"message": "Grade found.", "data": GradeOut.model_validate(grade)}


@router.post("", status_code=201)
def create_grade(payload: GradeIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    grade = services.GradeService(db).create(payload.subject_id, payload.grade, payload.type, payload.date, user.id)
    return {"message": "Grade created.", "data": GradeOut.model_validate(grade)}


@router.put("/{grade_id}")
def update_grade(
    grade_id: str,
    payload: GradeUpdate,
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    """Partially update a grade; omitted fields are left unchanged."""
    grade = services.GradeService(db).update(grade_id, user.id, **payload.model_dump(exclude_unset=True))
    return {"message": "Grade updated.", "data": GradeOut.model_validate(grade)}


@router.delete("/{grade_id}")
def delete_grade(grade_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    grade = services.GradeService(db).delete(grade_id, user.id)
    return {"message": "Grade deleted.", "data": GradeOut.model_validate(grade)}
