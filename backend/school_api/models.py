"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `Student` optionally references one `SchoolClass`; the class side of
the relationship is derived from that foreign key and never stored.
"""

from datetime import date
from typing import List, Optional

from sqlmodel import SQLModel, Field, Relationship


class SchoolClass(SQLModel, table=True):
    """A school class led by one teacher.

    `students` is loaded through the `Student.school_class_id` foreign key,
    so the member count is always computed from the student rows.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    leading_teacher: str = Field(max_length=100)
    students: List['Student'] = Relationship(back_populates='school_class')


class Student(SQLModel, table=True):
    """A student, keyed by an externally assigned `student_id`.

    Fields:
    - `student_id`: unique identifier chosen by the caller, immutable
    - `school_class_id`: the class the student belongs to, or `None`
    """
    student_id: str = Field(primary_key=True, max_length=50)
    name: str = Field(max_length=100)
    surname: str = Field(max_length=100)
    date_of_birth: date
    city: Optional[str] = Field(default=None, max_length=100)
    street: Optional[str] = Field(default=None, max_length=200)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    school_class_id: Optional[int] = Field(
        default=None, foreign_key='schoolclass.id', index=True, ondelete='SET NULL'
    )
    school_class: Optional[SchoolClass] = Relationship(back_populates='students')
