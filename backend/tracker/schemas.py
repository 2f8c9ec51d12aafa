"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Request bodies accept the
camelCase parent keys (`semesterId`, `subjectId`) as well as their
snake_case field names. Output schemas are built from ORM rows and never
expose password hashes.
"""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterIn(BaseModel):
    """Payload for user registration.

    Only presence and type are checked here; the field rules live in
    `AuthService.validate_registration`.
    """
    name: str
    email: str
    username: str
    password: str


class LoginIn(BaseModel):
    """Login payload; either `email` or `username` identifies the user."""
    email: Optional[str] = None
    username: Optional[str] = None
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    username: str
    created_at: dt.datetime
    updated_at: dt.datetime


class AuthOut(BaseModel):
    """Token plus the public user fields returned by register/login."""
    token: str
    user: UserOut


class SemesterIn(BaseModel):
    semester: str = Field(min_length=1)


class SubjectIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    semester_id: str = Field(alias='semesterId')


class SubjectUpdate(BaseModel):
    name: str = Field(min_length=1)


def _grade_to_str(value):
    # numeric marks are stored in their string form
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class GradeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject_id: str = Field(alias='subjectId')
    grade: str = Field(min_length=1)
    type: str = Field(min_length=1)
    date: dt.date

    @field_validator('grade', mode='before')
    @classmethod
    def coerce_grade(cls, value):
        return _grade_to_str(value)


class GradeUpdate(BaseModel):
    """Partial grade update; omitted fields keep their stored value."""
    grade: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None

    @field_validator('grade', mode='before')
    @classmethod
    def coerce_grade(cls, value):
        return _grade_to_str(value)


class GradeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    subject_id: str
    grade: str
    type: str
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime


class SubjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    semester_id: str
    created_at: dt.datetime
    updated_at: dt.datetime


class SubjectDetailOut(SubjectOut):
    grades: List[GradeOut] = []


class SemesterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    semester: str
    user_id: str
    created_at: dt.datetime
    updated_at: dt.datetime


class SemesterDetailOut(SemesterOut):
    subjects: List[SubjectOut] = []
