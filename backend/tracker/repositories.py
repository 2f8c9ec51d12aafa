"""Repository classes encapsulating database operations.

Each repository is small and focused on a single resource (users,
semesters, subjects, grades). Repositories return SQLModel objects and
perform commits/refreshes where appropriate; they hold no business
rules.
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select
from . import models


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.User]:
        return self.session.exec(select(models.User)).all()

    def get(self, user_id: str) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def get_by_username(self, username: str) -> Optional[models.User]:
        """Return a `User` by username or `None` if not found."""
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()

    def get_by_email(self, email: str) -> Optional[models.User]:
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def get_by_identifier(self, identifier: str) -> Optional[models.User]:
        """Return the first user whose email or username equals `identifier`."""
        stmt = select(models.User).where(
            or_(models.User.email == identifier, models.User.username == identifier)
        )
        return self.session.exec(stmt).first()

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete(self, user: models.User) -> models.User:
        self.session.delete(user)
        self.session.commit()
        return user


class SemesterRepository:
    """CRUD operations for `Semester` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_for_user(self, user_id: str) -> List[models.Semester]:
        stmt = select(models.Semester).where(models.Semester.user_id == user_id)
        return self.session.exec(stmt).all()

    def search_for_user(self, search: str, user_id: str) -> List[models.Semester]:
        """Return the user's semesters whose name contains `search`."""
        stmt = select(models.Semester).where(
            models.Semester.user_id == user_id,
            models.Semester.semester.contains(search, autoescape=True),
        )
        return self.session.exec(stmt).all()

    def get(self, semester_id: str) -> Optional[models.Semester]:
        return self.session.get(models.Semester, semester_id)

    def get_with_subjects(self, semester_id: str) -> Optional[models.Semester]:
        """Fetch a semester with its `subjects` relationship loaded."""
        stmt = (
            select(models.Semester)
            .where(models.Semester.id == semester_id)
            .options(selectinload(models.Semester.subjects))
        )
        return self.session.exec(stmt).first()

    def get_by_name(self, semester: str, user_id: str) -> Optional[models.Semester]:
        stmt = select(models.Semester).where(
            models.Semester.semester == semester,
            models.Semester.user_id == user_id,
        )
        return self.session.exec(stmt).first()

    def create(self, semester: models.Semester) -> models.Semester:
        self.session.add(semester)
        self.session.commit()
        self.session.refresh(semester)
        return semester

    def update(self, semester: models.Semester, name: str) -> models.Semester:
        semester.semester = name
        semester.updated_at = models.utcnow()
        self.session.add(semester)
        self.session.commit()
        self.session.refresh(semester)
        return semester

    def delete(self, semester: models.Semester) -> models.Semester:
        self.session.delete(semester)
        self.session.commit()
        return semester


class SubjectRepository:
    """CRUD operations for `Subject` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_for_semester(self, semester_id: str) -> List[models.Subject]:
        stmt = select(models.Subject).where(models.Subject.semester_id == semester_id)
        return self.session.exec(stmt).all()

    def get(self, subject_id: str) -> Optional[models.Subject]:
        return self.session.get(models.Subject, subject_id)

    def get_with_grades(self, subject_id: str) -> Optional[models.Subject]:
        """Fetch a subject with its `grades` relationship loaded."""
        stmt = (
            select(models.Subject)
            .where(models.Subject.id == subject_id)
            .options(selectinload(models.Subject.grades))
        )
        return self.session.exec(stmt).first()

    def get_by_name(self, name: str, semester_id: str) -> Optional[models.Subject]:
        stmt = select(models.Subject).where(
            models.Subject.name == name,
            models.Subject.semester_id == semester_id,
        )
        return self.session.exec(stmt).first()

    def create(self, subject: models.Subject) -> models.Subject:
        self.session.add(subject)
        self.session.commit()
        self.session.refresh(subject)
        return subject

    def update(self, subject: models.Subject, name: str) -> models.Subject:
        subject.name = name
        subject.updated_at = models.utcnow()
        self.session.add(subject)
        self.session.commit()
        self.session.refresh(subject)
        return subject

    def delete(self, subject: models.Subject) -> models.Subject:
        self.session.delete(subject)
        self.session.commit()
        return subject


class GradeRepository:
    """CRUD operations for `Grade` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_for_subject(self, subject_id: str) -> List[models.Grade]:
        stmt = select(models.Grade).where(models.Grade.subject_id == subject_id)
        return self.session.exec(stmt).all()

    def get(self, grade_id: str) -> Optional[models.Grade]:
        return self.session.get(models.Grade, grade_id)

    def create(self, grade: models.Grade) -> models.Grade:
        self.session.add(grade)
        self.session.commit()
        self.session.refresh(grade)
        return grade

    def update(self, grade: models.Grade, changes: dict) -> models.Grade:
        """Apply `changes` (a subset of grade/type/date) to `grade`."""
        for key, value in changes.items():
            setattr(grade, key, value)
        grade.updated_at = models.utcnow()
        self.session.add(grade)
        self.session.commit()
        self.session.refresh(grade)
        return grade

    def delete(self, grade: models.Grade) -> models.Grade:
        self.session.delete(grade)
        self.session.commit()
        return grade
