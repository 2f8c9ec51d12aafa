"""Subject endpoints; the parent semester must belong to the caller."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from .. import models, services
from ..auth import get_current_user, require_api_key
from ..database import get_session
from ..schemas import SubjectDetailOut, SubjectIn, SubjectOut, SubjectUpdate

router = APIRouter(prefix="/subjects", tags=["subjects"], dependencies=[Depends(require_api_key)])


@router.get("")
def list_subjects(
    semester_id: str = Query(alias="semesterId"),
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    subjects = services.SubjectService(db).list_for_semester(semester_id, user.id)
    return {"message": "Subjects found.", "data": [SubjectOut.model_validate(s) for s in subjects]}


@router.get("/{subject_id}")
def get_subject(subject_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Return one subject together with its grades."""
    subject = services.SubjectService(db).get_with_grades(subject_id, user.id)
    return {"message": "Subject found.", "data": SubjectDetailOut.model_validate(subject)}


@router.post("", status_code=201)
def create_subject(payload: SubjectIn, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    subject = services.SubjectService(db).create(payload.name, payload.semester_id, user.id)
    return {"message": "Subject created.", "data": SubjectOut.model_validate(subject)}


@router.put("/{subject_id}")
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    db: Session = Depends(get_session),
    user: models.User = Depends(get_current_user),
):
    subject = services.SubjectService(db).update(subject_id, payload.name, user.id)
    return {"message": "Subject updated.", "data": SubjectOut.model_validate(subject)}


@router.delete("/{subject_id}")
def delete_subject(subject_id: str, db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    subject = services.SubjectService(db).delete(subject_id, user.id)
    return {"message": "Subject deleted.", "data": SubjectOut.model_validate(subject)}
