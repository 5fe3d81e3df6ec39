"""Validation rules shared by the services.

Each rule returns an error message when the rule is violated and `None`
otherwise, so callers can turn a violation into a `BadRequest` result
without raising.
"""

from typing import Optional

from . import constants, models


def is_blank(value: Optional[str]) -> bool:
    """Return True for `None`, the empty string or whitespace only."""
    return value is None or not value.strip()


def validate_new_student(student_id, name, surname, date_of_birth) -> Optional[str]:
    """Check the required fields of a student being created."""
    if is_blank(student_id) or is_blank(name) or is_blank(surname):
        return " ".join([
            constants.STUDENT_ID_REQUIRED,
            constants.STUDENT_NAME_REQUIRED,
            constants.STUDENT_SURNAME_REQUIRED,
        ])
    if date_of_birth is None:
        return constants.STUDENT_DATE_OF_BIRTH_REQUIRED
    return None


def validate_student_names(name, surname, date_of_birth) -> Optional[str]:
    """Check the required fields of a full student replacement."""
    if is_blank(name) or is_blank(surname):
        return f"{constants.STUDENT_NAME_REQUIRED} {constants.STUDENT_SURNAME_REQUIRED}"
    if date_of_birth is None:
        return constants.STUDENT_DATE_OF_BIRTH_REQUIRED
    return None


def validate_class_fields(name, leading_teacher) -> Optional[str]:
    """Check the required fields of a class being created or replaced."""
    if is_blank(name) or is_blank(leading_teacher):
        return f"{constants.CLASS_NAME_REQUIRED} {constants.CLASS_LEADING_TEACHER_REQUIRED}"
    return None


def check_can_join(student: models.Student, school_class: models.SchoolClass, member_count: int) -> Optional[str]:
    """Check that `student` may be added to `school_class`.

    A student already in the class is rejected before capacity is checked,
    so re-adding a member of a full class reports the membership problem.
    """
    if student.school_class_id == school_class.id:
        return constants.STUDENT_ALREADY_IN_CLASS.format(student.name, student.surname)
    if member_count >= constants.MAX_STUDENTS_PER_CLASS:
        return constants.CLASS_FULL.format(school_class.name, constants.MAX_STUDENTS_PER_CLASS)
    return None


def check_is_member(student: models.Student, class_id: int) -> Optional[str]:
    """Check that `student` currently belongs to the class `class_id`."""
    if student.school_class_id != class_id:
        return constants.STUDENT_NOT_IN_CLASS.format(student.name, student.surname)
    return None
