import jwt
import pytest

from tracker import models
from tracker.errors import InvalidError, NotFoundError, UnauthorizedError
from tracker.services import AuthService, GradeService, SemesterService, SubjectService

VALID = {"name": "Ann Lee 2", "email": "ann.lee@mail.example.net", "username": "annlee", "password": "12345"}


def test_validate_registration_accepts_valid_input():
    assert AuthService.validate_registration(dict(VALID)) == VALID


@pytest.mark.parametrize("field,value", [
    ("name", "Ann_Lee"),
    ("name", ""),
    ("email", "ann@example.io"),
    ("email", "ann@localhost"),
    ("email", "ann at example.com"),
    ("username", "ab"),
    ("username", "a" * 31),
    ("username", "ann-lee"),
    ("password", "1234"),
    ("password", None),
    ("name", "Ann\n"),
    ("email", "ann@example.com\n"),
    ("username", "annlee\n"),
])
def test_validate_registration_rejects(field, value):
    data = dict(VALID, **{field: value})
    with pytest.raises(InvalidError) as exc:
        AuthService.validate_registration(data)
    assert field in exc.value.message


def test_password_is_hashed(session):
    result = AuthService(session).register("Ann", "ann@example.com", "ann", "secret1")
    assert result["user"].password != "secret1"
    assert result["user"].password.startswith("$2")


def test_token_round_trip():
    token = AuthService.generate_token("user-1")
    assert AuthService.decode_token(token)["user_id"] == "user-1"


def test_foreign_signature_is_rejected():
    token = jwt.encode({"user_id": "user-1"}, "some-other-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError) as exc:
        AuthService.decode_token(token)
    assert exc.value.message == "Invalid token."


def test_list_users_empty(session):
    with pytest.raises(NotFoundError):
        AuthService(session).list_users()


def test_delete_semester_does_not_cascade(session):
    user = AuthService(session).register("Ann", "ann@example.com", "ann", "secret1")["user"]
    semester = SemesterService(session).create(user.id, "WS24")
    subject = SubjectService(session).create("Algebra", semester.id, user.id)
    SemesterService(session).delete(semester.id, user.id)
    # SQLite does not enforce foreign keys here, so the orphan survives
    assert session.get(models.Subject, subject.id) is not None


def test_grade_update_ignores_unknown_and_empty_fields(session):
    user = AuthService(session).register("Ann", "ann@example.com", "ann", "secret1")["user"]
    semester = SemesterService(session).create(user.id, "WS24")
    subject = SubjectService(session).create("Algebra", semester.id, user.id)
    grades = GradeService(session)
    grade = grades.create(subject.id, "B", "exam", models.utcnow().date(), user.id)
    updated = grades.update(grade.id, user.id, grade=None, type="oral", subject_id="elsewhere")
    assert updated.grade == "B"
    assert updated.type == "oral"
    assert updated.subject_id == subject.id
