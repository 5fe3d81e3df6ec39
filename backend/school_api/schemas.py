"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Required-field checks are
left to the services so that a missing or blank value is reported as a
400 business error rather than a framework validation error.

PATCH schemas declare every field optional; which fields the client
actually sent is read from `model_fields_set`, so an omitted field and an
explicit `null` are told apart.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class StudentCreate(BaseModel):
    """Payload for creating a student."""
    student_id: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    date_of_birth: Optional[date] = None
    city: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None


class StudentUpdate(BaseModel):
    """Full replacement of a student's mutable fields (PUT).

    Omitted optional address fields are cleared.
    """
    name: Optional[str] = None
    surname: Optional[str] = None
    date_of_birth: Optional[date] = None
    city: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None


class StudentPatch(BaseModel):
    """Partial student update (PATCH).

    `school_class_id` assigns the student to a class; `null`, `0` or a
    negative value unassigns it.
    """
    name: Optional[str] = None
    surname: Optional[str] = None
    date_of_birth: Optional[date] = None
    city: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None
    school_class_id: Optional[int] = None


class StudentOut(BaseModel):
    """Student as returned by the API, with the class name denormalized."""
    student_id: str
    name: str
    surname: str
    date_of_birth: date
    city: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None
    school_class_id: Optional[int] = None
    school_class_name: Optional[str] = None


class SchoolClassCreate(BaseModel):
    """Payload for creating a class."""
    name: Optional[str] = None
    leading_teacher: Optional[str] = None


class SchoolClassUpdate(BaseModel):
    """Full replacement of a class's fields (PUT)."""
    name: Optional[str] = None
    leading_teacher: Optional[str] = None


class SchoolClassPatch(BaseModel):
    """Partial class update (PATCH)."""
    name: Optional[str] = None
    leading_teacher: Optional[str] = None


class SchoolClassOut(BaseModel):
    id: int
    name: str
    leading_teacher: str
    student_count: int = 0
    students: List[StudentOut] = []


class AddStudentToClassIn(BaseModel):
    """Body of the deprecated class-centric add endpoint."""
    student_id: Optional[str] = None


class MessageOut(BaseModel):
    """Confirmation or error message body."""
    message: str
