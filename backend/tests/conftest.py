import os
import tempfile

# Throwaway SQLite file for the whole test session; must be set before the app is imported.
os.environ.setdefault(
    "DATABASE_URL", "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="school_api_"), "test.db")
)

from datetime import date

import pytest
from sqlmodel import Session

from school_api import models
from school_api.database import engine, create_db_and_tables, drop_db_and_tables


@pytest.fixture(autouse=True)
def reset_db():
    """Start every test from empty tables."""
    drop_db_and_tables()
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def make_class(session):
    def _make(name="Class 5A", teacher="Mrs. Smith"):
        c = models.SchoolClass(name=name, leading_teacher=teacher)
        session.add(c)
        session.commit()
        session.refresh(c)
        return c
    return _make


@pytest.fixture
def make_student(session):
    def _make(student_id, name="John", surname="Doe", class_id=None, **extra):
        s = models.Student(
            student_id=student_id,
            name=name,
            surname=surname,
            date_of_birth=extra.pop("date_of_birth", date(2005, 1, 1)),
            school_class_id=class_id,
            **extra,
        )
        session.add(s)
        session.commit()
        session.refresh(s)
        return s
    return _make
