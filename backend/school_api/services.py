"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories
and validation rules. Every public operation returns a `ServiceResult`;
business-rule failures are reported through the result status and never
raised. Unexpected faults (database errors and the like) propagate to the
boundary handler in `main`.

Class membership changes, whether they come from a student PATCH or from
the deprecated class-centric endpoints, all go through `ClassAssignment`
so both entry points enforce the same rules.
"""

import logging
from typing import Dict, List, Optional

from sqlmodel import Session

from . import constants, models, repositories, validation
from .results import ServiceResult
from .schemas import (
    SchoolClassCreate,
    SchoolClassOut,
    SchoolClassPatch,
    SchoolClassUpdate,
    StudentCreate,
    StudentOut,
    StudentPatch,
    StudentUpdate,
)
from .utils.locks import KeyedLock, class_locks

logger = logging.getLogger("school_api.services")

_ADDRESS_FIELDS = ("city", "street", "postal_code")


def to_student_out(student: models.Student) -> StudentOut:
    """Build the API view of a student, including its class name."""
    return StudentOut(
        student_id=student.student_id,
        name=student.name,
        surname=student.surname,
        date_of_birth=student.date_of_birth,
        city=student.city,
        street=student.street,
        postal_code=student.postal_code,
        school_class_id=student.school_class_id,
        school_class_name=student.school_class.name if student.school_class else None,
    )


def to_class_out(school_class: models.SchoolClass) -> SchoolClassOut:
    """Build the API view of a class; members come from the relationship."""
    students = sorted(school_class.students, key=lambda s: s.student_id)
    return SchoolClassOut(
        id=school_class.id,
        name=school_class.name,
        leading_teacher=school_class.leading_teacher,
        student_count=len(students),
        students=[to_student_out(s) for s in students],
    )


class ClassAssignment:
    """Move students into and out of classes.

    `assign` holds the class's lock from the member count until the commit,
    so two concurrent assignments cannot both pass the capacity check.
    """
    def __init__(self, session: Session, locks: KeyedLock = class_locks):
        self.session = session
        self.student_repo = repositories.StudentRepository(session)
        self.class_repo = repositories.SchoolClassRepository(session)
        self.locks = locks

    def assign(
        self,
        student: models.Student,
        class_id: int,
        changes: Optional[Dict[str, object]] = None,
    ) -> ServiceResult[models.SchoolClass]:
        """Put `student` in class `class_id`, applying `changes` in the same commit.

        Nothing is written when the class is missing, the student is already
        a member or the class is full.
        """
        if self.class_repo.get(class_id) is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        with self.locks.hold(class_id):
            school_class = self.class_repo.get(class_id, reload=True)
            if school_class is None:
                # deleted while we waited for the lock
                return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
            error = validation.check_can_join(
                student, school_class, self.class_repo.student_count(class_id)
            )
            if error:
                logger.info("assignment rejected student=%s class=%s: %s", student.student_id, class_id, error)
                return ServiceResult.bad_request(error)
            for field, value in (changes or {}).items():
                setattr(student, field, value)
            student.school_class_id = class_id
            self.student_repo.update(student)
        logger.info("student %s assigned to class %s", student.student_id, class_id)
        return ServiceResult.ok(school_class)

    def unassign(
        self,
        student: models.Student,
        class_id: Optional[int] = None,
        changes: Optional[Dict[str, object]] = None,
    ) -> ServiceResult[models.Student]:
        """Remove `student` from its class.

        When `class_id` is given the student must currently be a member of
        that class; otherwise any membership (or none) is cleared.
        """
        if class_id is not None:
            error = validation.check_is_member(student, class_id)
            if error:
                return ServiceResult.bad_request(error)
        previous = student.school_class_id
        for field, value in (changes or {}).items():
            setattr(student, field, value)
        student.school_class_id = None
        self.student_repo.update(student)
        if previous is not None:
            logger.info("student %s removed from class %s", student.student_id, previous)
        return ServiceResult.ok(student)


class StudentService:
    """Student CRUD and the student-centric class assignment."""
    def __init__(self, session: Session, locks: KeyedLock = class_locks):
        self.session = session
        self.student_repo = repositories.StudentRepository(session)
        self.assignment = ClassAssignment(session, locks)

    def list_students(self) -> List[StudentOut]:
        return [to_student_out(s) for s in self.student_repo.list_all()]

    def get_student(self, student_id: str) -> ServiceResult[StudentOut]:
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))
        return ServiceResult.ok(to_student_out(student))

    def create_student(self, payload: StudentCreate) -> ServiceResult[StudentOut]:
        """Create an unassigned student.

        Blank `student_id`, `name` or `surname` is a bad request; an
        existing `student_id` is a conflict.
        """
        error = validation.validate_new_student(
            payload.student_id, payload.name, payload.surname, payload.date_of_birth
        )
        if error:
            return ServiceResult.bad_request(error)
        if self.student_repo.exists(payload.student_id):
            return ServiceResult.conflict(constants.STUDENT_ALREADY_EXISTS.format(payload.student_id))
        student = models.Student(
            student_id=payload.student_id,
            name=payload.name,
            surname=payload.surname,
            date_of_birth=payload.date_of_birth,
            city=payload.city,
            street=payload.street,
            postal_code=payload.postal_code,
        )
        self.student_repo.add(student)
        logger.info("student %s created", student.student_id)
        return ServiceResult.created(to_student_out(student))

    def update_student(self, student_id: str, payload: StudentUpdate) -> ServiceResult[StudentOut]:
        """Replace every mutable field of a student.

        Address fields missing from `payload` are cleared. Class membership
        is not part of the replacement and is kept.
        """
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))
        error = validation.validate_student_names(payload.name, payload.surname, payload.date_of_birth)
        if error:
            return ServiceResult.bad_request(error)
        student.name = payload.name
        student.surname = payload.surname
        student.date_of_birth = payload.date_of_birth
        student.city = payload.city
        student.street = payload.street
        student.postal_code = payload.postal_code
        self.student_repo.update(student)
        return ServiceResult.ok(to_student_out(student))

    def patch_student(self, student_id: str, payload: StudentPatch) -> ServiceResult[StudentOut]:
        """Apply only the fields present in `payload`.

        Every field is validated before anything is written, so a rejected
        patch leaves the student untouched.
        """
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))

        sent = payload.model_fields_set
        changes: Dict[str, object] = {}
        if 'name' in sent:
            if validation.is_blank(payload.name):
                return ServiceResult.bad_request(constants.STUDENT_NAME_REQUIRED)
            changes['name'] = payload.name
        if 'surname' in sent:
            if validation.is_blank(payload.surname):
                return ServiceResult.bad_request(constants.STUDENT_SURNAME_REQUIRED)
            changes['surname'] = payload.surname
        if 'date_of_birth' in sent:
            if payload.date_of_birth is None:
                return ServiceResult.bad_request(constants.STUDENT_DATE_OF_BIRTH_REQUIRED)
            changes['date_of_birth'] = payload.date_of_birth
        for field in _ADDRESS_FIELDS:
            if field in sent:
                # explicit null clears the field
                changes[field] = getattr(payload, field)

        if 'school_class_id' in sent:
            target = payload.school_class_id
            if target is not None and target > 0:
                result = self.assignment.assign(student, target, changes)
            else:
                result = self.assignment.unassign(student, changes=changes)
            if not result.is_success:
                return ServiceResult(result.status, message=result.message)
        else:
            for field, value in changes.items():
                setattr(student, field, value)
            self.student_repo.update(student)
        return ServiceResult.ok(to_student_out(student))

    def delete_student(self, student_id: str) -> ServiceResult[str]:
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))
        self.student_repo.delete(student)
        logger.info("student %s deleted", student_id)
        return ServiceResult.ok(constants.STUDENT_DELETED.format(student_id))


class SchoolClassService:
    """School class CRUD and the deprecated class-centric membership calls."""
    def __init__(self, session: Session, locks: KeyedLock = class_locks):
        self.session = session
        self.class_repo = repositories.SchoolClassRepository(session)
        self.student_repo = repositories.StudentRepository(session)
        self.assignment = ClassAssignment(session, locks)
        self.locks = locks

    def list_classes(self) -> List[SchoolClassOut]:
        return [to_class_out(c) for c in self.class_repo.list_all()]

    def get_class(self, class_id: int) -> ServiceResult[SchoolClassOut]:
        school_class = self.class_repo.get(class_id)
        if school_class is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        return ServiceResult.ok(to_class_out(school_class))

    def create_class(self, payload: SchoolClassCreate) -> ServiceResult[SchoolClassOut]:
        error = validation.validate_class_fields(payload.name, payload.leading_teacher)
        if error:
            return ServiceResult.bad_request(error)
        school_class = models.SchoolClass(name=payload.name, leading_teacher=payload.leading_teacher)
        self.class_repo.add(school_class)
        logger.info("class %s created (%s)", school_class.id, school_class.name)
        return ServiceResult.created(to_class_out(school_class))

    def update_class(self, class_id: int, payload: SchoolClassUpdate) -> ServiceResult[SchoolClassOut]:
        school_class = self.class_repo.get(class_id)
        if school_class is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        error = validation.validate_class_fields(payload.name, payload.leading_teacher)
        if error:
            return ServiceResult.bad_request(error)
        school_class.name = payload.name
        school_class.leading_teacher = payload.leading_teacher
        self.class_repo.update(school_class)
        return ServiceResult.ok(to_class_out(school_class))

    def patch_class(self, class_id: int, payload: SchoolClassPatch) -> ServiceResult[SchoolClassOut]:
        school_class = self.class_repo.get(class_id)
        if school_class is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        sent = payload.model_fields_set
        if 'name' in sent and validation.is_blank(payload.name):
            return ServiceResult.bad_request(constants.CLASS_NAME_REQUIRED)
        if 'leading_teacher' in sent and validation.is_blank(payload.leading_teacher):
            return ServiceResult.bad_request(constants.CLASS_LEADING_TEACHER_REQUIRED)
        if 'name' in sent:
            school_class.name = payload.name
        if 'leading_teacher' in sent:
            school_class.leading_teacher = payload.leading_teacher
        self.class_repo.update(school_class)
        return ServiceResult.ok(to_class_out(school_class))

    def delete_class(self, class_id: int) -> ServiceResult[str]:
        """Delete a class after unassigning all of its members.

        Both steps share one commit, so no caller sees a half-emptied class.
        """
        if self.class_repo.get(class_id) is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        with self.locks.hold(class_id):
            school_class = self.class_repo.get(class_id, reload=True)
            if school_class is None:
                return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
            unassigned = self.class_repo.delete(school_class)
        logger.info("class %s deleted, %d students unassigned", class_id, unassigned)
        return ServiceResult.ok(constants.CLASS_DELETED.format(class_id))

    def add_student_to_class(self, class_id: int, student_id: Optional[str]) -> ServiceResult[str]:
        """Deprecated: use PATCH on the student with `school_class_id`."""
        if self.class_repo.get(class_id) is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        if validation.is_blank(student_id):
            return ServiceResult.bad_request(constants.STUDENT_ID_REQUIRED)
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))
        result = self.assignment.assign(student, class_id)
        if not result.is_success:
            return ServiceResult(result.status, message=result.message)
        return ServiceResult.ok(
            constants.STUDENT_ADDED_TO_CLASS.format(student.name, student.surname, result.data.name)
        )

    def remove_student_from_class(self, class_id: int, student_id: str) -> ServiceResult[str]:
        """Deprecated: use PATCH on the student with `school_class_id: null`."""
        school_class = self.class_repo.get(class_id)
        if school_class is None:
            return ServiceResult.not_found(constants.CLASS_NOT_FOUND.format(class_id))
        class_name = school_class.name
        student = self.student_repo.get(student_id)
        if student is None:
            return ServiceResult.not_found(constants.STUDENT_NOT_FOUND.format(student_id))
        result = self.assignment.unassign(student, class_id)
        if not result.is_success:
            return ServiceResult(result.status, message=result.message)
        return ServiceResult.ok(
            constants.STUDENT_REMOVED_FROM_CLASS.format(student.name, student.surname, class_name)
        )
