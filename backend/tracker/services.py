"""Business logic services used by HTTP routers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they validate input, enforce the
per-parent uniqueness rules and existence checks, and raise the error
kinds from `tracker.errors` that the central handlers turn into HTTP
responses.

Ownership is resolved through the parent chain (grade → subject →
semester → user). A row owned by another user is reported exactly like
a missing one.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import jwt
from passlib.context import CryptContext
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .errors import ConflictError, InvalidError, NotFoundError, UnauthorizedError

logger = logging.getLogger("tracker.services")

PWD_CTX = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)

NAME_RE = re.compile(r"^[A-Za-z0-9 ]+$")
USERNAME_RE = re.compile(r"^[A-Za-z0-9]+$")
EMAIL_RE = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+([A-Za-z]+)$"
)
ALLOWED_TLDS = {"com", "net", "de"}
USERNAME_MIN, USERNAME_MAX = 3, 30
PASSWORD_MIN = 5

INVALID_CREDENTIALS = "Invalid username or password."


class AuthService:
    """Registration, login, user listing/deletion and token handling."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    @staticmethod
    def validate_registration(data: dict) -> dict:
        """Check registration fields and raise `InvalidError` on the first violation.

        Rules: `name` is letters, digits and spaces; `email` must be a
        valid address whose top-level domain is one of `ALLOWED_TLDS`;
        `username` is 3-30 letters or digits; `password` is at least
        5 characters. Returns `data` unchanged on success.
        """
        name = data.get("name")
        email = data.get("email")
        username = data.get("username")
        password = data.get("password")
        if not isinstance(name, str) or not NAME_RE.fullmatch(name):
            raise InvalidError('"name" may only contain letters, digits and spaces')
        if not isinstance(email, str):
            raise InvalidError('"email" is required')
        match = EMAIL_RE.fullmatch(email)
        if not match:
            raise InvalidError('"email" must be a valid email')
        if match.group(1).lower() not in ALLOWED_TLDS:
            raise InvalidError('"email" must use one of the domains: ' + ", ".join(sorted(ALLOWED_TLDS)))
        if not isinstance(username, str) or not USERNAME_RE.fullmatch(username):
            raise InvalidError('"username" must only contain alpha-numeric characters')
        if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
            raise InvalidError(f'"username" length must be between {USERNAME_MIN} and {USERNAME_MAX} characters')
        if not isinstance(password, str) or len(password) < PASSWORD_MIN:
            raise InvalidError(f'"password" length must be at least {PASSWORD_MIN} characters long')
        return data

    def list_users(self) -> List[models.User]:
        users = self.user_repo.list_all()
        if not users:
            raise NotFoundError("No users found.")
        return users

    def register(self, name: str, email: str, username: str, password: str) -> dict:
        """Create a user with a hashed password and issue a token.

        Returns `{"token": ..., "user": User}`.
        """
        if self.user_repo.get_by_username(username):
            raise ConflictError("Username already registered.")
        if self.user_repo.get_by_email(email):
            raise ConflictError("Email already registered.")
        user = models.User(name=name, email=email, username=username, password=self.hash_password(password))
        user = self.user_repo.create(user)
        logger.info("user registered id=%s username=%s", user.id, user.username)
        return {"token": self.generate_token(user.id), "user": user}

    def login(self, email: Optional[str], username: Optional[str], password: str) -> dict:
        """Verify credentials and return a token for the matching user.

        `email` takes precedence over `username` as the identifier. An
        unknown identifier and a wrong password fail identically.
        """
        identifier = email or username
        if not identifier:
            raise InvalidError("Email or username is required.")
        user = self.user_repo.get_by_identifier(identifier)
        if not user:
            raise InvalidError(INVALID_CREDENTIALS)
        if not PWD_CTX.verify(password, user.password):
            raise InvalidError(INVALID_CREDENTIALS)
        return {"token": self.generate_token(user.id), "user": user}

    def delete_user(self, user_id: str) -> models.User:
        user = self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found!")
        deleted = self.user_repo.delete(user)
        logger.info("user deleted id=%s username=%s", deleted.id, deleted.username)
        return deleted

    @staticmethod
    def hash_password(password: str) -> str:
        return PWD_CTX.hash(password)

    @staticmethod
    def generate_token(user_id: str) -> str:
        """Sign a token carrying `user_id` that expires after JWT_EXPIRE_HOURS."""
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
        payload = {"user_id": user_id, "exp": int(expire.timestamp())}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> dict:
        """Decode and verify a token, raising `UnauthorizedError` on failure."""
        try:
            return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token expired.")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid token.")


class SemesterService:
    """Semester CRUD scoped to the owning user."""
    def __init__(self, session: Session):
        self.session = session
        self.semester_repo = repositories.SemesterRepository(session)

    def owned(self, semester_id: str, user_id: str) -> models.Semester:
        """Return the user's semester or raise `NotFoundError`."""
        semester = self.semester_repo.get(semester_id)
        if not semester or semester.user_id != user_id:
            raise NotFoundError("Semester not found.")
        return semester

    def list_for_user(self, user_id: str, search: Optional[str] = None) -> List[models.Semester]:
        if search:
            semesters = self.semester_repo.search_for_user(search, user_id)
            if not semesters:
                raise NotFoundError("No semesters found for this user or this search term.")
        else:
            semesters = self.semester_repo.list_for_user(user_id)
            if not semesters:
                raise NotFoundError("No semesters found for this user.")
        return semesters

    def get_with_subjects(self, semester_id: str, user_id: str) -> models.Semester:
        semester = self.semester_repo.get_with_subjects(semester_id)
        if not semester or semester.user_id != user_id:
            raise NotFoundError("Semester not found.")
        return semester

    def create(self, user_id: str, name: str) -> models.Semester:
        if self.semester_repo.get_by_name(name, user_id):
            raise ConflictError("Semester already exists for this user.")
        return self.semester_repo.create(models.Semester(semester=name, user_id=user_id))

    def update(self, semester_id: str, user_id: str, name: str) -> models.Semester:
        semester = self.owned(semester_id, user_id)
        clash = self.semester_repo.get_by_name(name, user_id)
        if clash and clash.id != semester.id:
            raise ConflictError("Semester already exists for this user.")
        return self.semester_repo.update(semester, name)

    def delete(self, semester_id: str, user_id: str) -> models.Semester:
        semester = self.owned(semester_id, user_id)
        return self.semester_repo.delete(semester)


class SubjectService:
    """Subject CRUD; the parent semester must belong to the caller."""
    def __init__(self, session: Session):
        self.session = session
        self.subject_repo = repositories.SubjectRepository(session)
        self.semesters = SemesterService(session)

    def owned(self, subject_id: str, user_id: str) -> models.Subject:
        subject = self.subject_repo.get(subject_id)
        if not subject or not self._semester_is_owned(subject.semester_id, user_id):
            raise NotFoundError("Subject not found.")
        return subject

    def _semester_is_owned(self, semester_id: str, user_id: str) -> bool:
        semester = self.semesters.semester_repo.get(semester_id)
        return semester is not None and semester.user_id == user_id

    def list_for_semester(self, semester_id: str, user_id: str) -> List[models.Subject]:
        self.semesters.owned(semester_id, user_id)
        subjects = self.subject_repo.list_for_semester(semester_id)
        if not subjects:
            raise NotFoundError("No subjects found for this semester.")
        return subjects

    def get_with_grades(self, subject_id: str, user_id: str) -> models.Subject:
        subject = self.subject_repo.get_with_grades(subject_id)
        if not subject or not self._semester_is_owned(subject.semester_id, user_id):
            raise NotFoundError("Subject not found.")
        return subject

    def create(self, name: str, semester_id: str, user_id: str) -> models.Subject:
        self.semesters.owned(semester_id, user_id)
        if self.subject_repo.get_by_name(name, semester_id):
            raise ConflictError("Subject with this name already exists for this semester.")
        return self.subject_repo.create(models.Subject(name=name, semester_id=semester_id))

    def update(self, subject_id: str, name: str, user_id: str) -> models.Subject:
        subject = self.owned(subject_id, user_id)
        clash = self.subject_repo.get_by_name(name, subject.semester_id)
        if clash and clash.id != subject.id:
            raise ConflictError("Subject with this name already exists in this semester.")
        return self.subject_repo.update(subject, name)

    def delete(self, subject_id: str, user_id: str) -> models.Subject:
        subject = self.owned(subject_id, user_id)
        return self.subject_repo.delete(subject)


class GradeService:
    """Grade CRUD; the parent subject must belong to the caller."""
    def __init__(self, session: Session):
        self.session = session
        self.grade_repo = repositories.GradeRepository(session)
        self.subjects = SubjectService(session)

    def owned(self, grade_id: str, user_id: str) -> models.Grade:
        grade = self.grade_repo.get(grade_id)
        if not grade:
            raise NotFoundError("Grade not found.")
        try:
            self.subjects.owned(grade.subject_id, user_id)
        except NotFoundError:
            raise NotFoundError("Grade not found.")
        return grade

    def list_for_subject(self, subject_id: str, user_id: str) -> List[models.Grade]:
        self.subjects.owned(subject_id, user_id)
        grades = self.grade_repo.list_for_subject(subject_id)
        if not grades:
            raise NotFoundError("No grades found for this subject.")
        return grades

    def create(self, subject_id: str, grade: str, type: str, date, user_id: str) -> models.Grade:
        self.subjects.owned(subject_id, user_id)
        return self.grade_repo.create(models.Grade(subject_id=subject_id, grade=grade, type=type, date=date))

    def update(self, grade_id: str, user_id: str, **changes) -> models.Grade:
        """Update any of `grade`, `type` or `date`; `None` values are ignored."""
        grade = self.owned(grade_id, user_id)
        changes = {k: v for k, v in changes.items() if k in ("grade", "type", "date") and v is not None}
        return self.grade_repo.update(grade, changes)

    def delete(self, grade_id: str, user_id: str) -> models.Grade:
        grade = self.owned(grade_id, user_id)
        return self.grade_repo.delete(grade)
