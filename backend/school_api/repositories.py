"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (students,
school classes). Repositories return SQLModel objects and perform
commits/refreshes where appropriate.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from . import models


class StudentRepository:
    """CRUD operations for `Student` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Student]:
        """Return all students with their class eagerly loaded."""
        stmt = (
            select(models.Student)
            .options(selectinload(models.Student.school_class))
            .order_by(models.Student.student_id)
        )
        return self.session.exec(stmt).all()

    def get(self, student_id: str) -> Optional[models.Student]:
        """Get a `Student` by primary key."""
        return self.session.get(models.Student, student_id)

    def exists(self, student_id: str) -> bool:
        """Return True if a student with `student_id` is stored."""
        stmt = select(models.Student.student_id).where(models.Student.student_id == student_id)
        return self.session.exec(stmt).first() is not None

    def add(self, student: models.Student) -> models.Student:
        """Persist a new student and return the managed instance."""
        self.session.add(student)
        self.session.commit()
        self.session.refresh(student)
        return student

    def update(self, student: models.Student) -> models.Student:
        """Commit pending changes on `student`."""
        self.session.add(student)
        self.session.commit()
        self.session.refresh(student)
        return student

    def delete(self, student: models.Student) -> None:
        self.session.delete(student)
        self.session.commit()


class SchoolClassRepository:
    """CRUD operations for `SchoolClass` objects and membership counts."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.SchoolClass]:
        """Return all classes with their students eagerly loaded."""
        stmt = (
            select(models.SchoolClass)
            .options(selectinload(models.SchoolClass.students))
            .order_by(models.SchoolClass.id)
        )
        return self.session.exec(stmt).all()

    def get(self, class_id: int, reload: bool = False) -> Optional[models.SchoolClass]:
        """Fetch a class by id.

        With `reload` the row is read from the database even if the class
        is already in the session.
        """
        return self.session.get(models.SchoolClass, class_id, populate_existing=reload)

    def student_count(self, class_id: int) -> int:
        """Count the students whose `school_class_id` is `class_id`."""
        stmt = select(func.count(models.Student.student_id)).where(
            models.Student.school_class_id == class_id
        )
        return self.session.exec(stmt).one()

    def add(self, school_class: models.SchoolClass) -> models.SchoolClass:
        """Persist a new class; the id is assigned by the database."""
        self.session.add(school_class)
        self.session.commit()
        self.session.refresh(school_class)
        return school_class

    def update(self, school_class: models.SchoolClass) -> models.SchoolClass:
        self.session.add(school_class)
        self.session.commit()
        self.session.refresh(school_class)
        return school_class

    def delete(self, school_class: models.SchoolClass) -> int:
        """Unassign every member and delete the class in one commit.

        Returns the number of students that were unassigned.
        """
        members = self.session.exec(
            select(models.Student).where(models.Student.school_class_id == school_class.id)
        ).all()
        for student in members:
            student.school_class_id = None
            self.session.add(student)
        self.session.delete(school_class)
        self.session.commit()
        return len(members)
