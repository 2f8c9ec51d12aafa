"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Ownership is hierarchical: a `User` owns semesters, a `Semester` owns
subjects and a `Subject` owns grades. Relationships are declared with
`passive_deletes="all"` so deleting a parent never rewrites or removes
its children from application code.
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlmodel import SQLModel, Field, Relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `email` / `username`: unique login identifiers
    - `password`: bcrypt hash (never store plaintext)
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    email: str = Field(index=True, nullable=False, unique=True)
    username: str = Field(index=True, nullable=False, unique=True)
    password: str
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)


class Semester(SQLModel, table=True):
    """A named semester belonging to a user.

    The name is unique per user; this is checked by the service layer,
    not by a database constraint.
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    semester: str = Field(index=True)
    user_id: str = Field(foreign_key='user.id', index=True)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)
    subjects: List['Subject'] = Relationship(
        back_populates='semester',
        sa_relationship_kwargs={'passive_deletes': 'all'},
    )


class Subject(SQLModel, table=True):
    """A subject taken during a `Semester`."""
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str = Field(index=True)
    semester_id: str = Field(foreign_key='semester.id', index=True)
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)
    semester: Optional[Semester] = Relationship(back_populates='subjects')
    grades: List['Grade'] = Relationship(
        back_populates='subject',
        sa_relationship_kwargs={'passive_deletes': 'all'},
    )


class Grade(SQLModel, table=True):
    """A single grade recorded for a `Subject`.

    `grade` is kept as a string so both letter grades and numeric marks
    can be stored; `type` is a free category label such as `exam`.
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    subject_id: str = Field(foreign_key='subject.id', index=True)
    grade: str
    type: str
    date: dt.date
    created_at: dt.datetime = Field(default_factory=utcnow)
    updated_at: dt.datetime = Field(default_factory=utcnow)
    subject: Optional[Subject] = Relationship(back_populates='grades')
