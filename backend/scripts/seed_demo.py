"""CLI script to seed demo classes and students through the services.
Usage: python scripts/seed_demo.py [--classes N] [--students-per-class N] [--reset]

Data lands in the default `backend/school.db` file unless DATABASE_URL
points elsewhere; `--reset` drops and recreates the tables first.
"""
import sys
import argparse
import pathlib
from datetime import date
# Ensure `backend/` is on sys.path so `school_api` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from school_api.database import engine, create_db_and_tables, drop_db_and_tables
from school_api.schemas import SchoolClassCreate, StudentCreate, StudentPatch
from school_api import services

TEACHERS = ['Mrs. Smith', 'Mr. Jones', 'Ms. Lee', 'Mr. Brown']
NAMES = [('John', 'Doe'), ('Jane', 'Roe'), ('Ali', 'Khan'), ('Mia', 'Berg'), ('Leo', 'Novak')]


def main(classes: int = 2, per_class: int = 5, reset: bool = False):
    """Create `classes` classes and assign `per_class` new students to each.

    Students are assigned with a PATCH-style call so the capacity rule is
    applied; rejected assignments are reported and the student is kept
    unassigned.
    """
    if reset:
        drop_db_and_tables()
    create_db_and_tables()
    with Session(engine) as session:
        class_svc = services.SchoolClassService(session)
        student_svc = services.StudentService(session)
        counter = 0
        for c in range(classes):
            created = class_svc.create_class(SchoolClassCreate(
                name=f'Class {5 + c}A', leading_teacher=TEACHERS[c % len(TEACHERS)]))
            class_id = created.data.id
            print(f'Created class {class_id}: {created.data.name}')
            for _ in range(per_class):
                counter += 1
                first, last = NAMES[counter % len(NAMES)]
                student_id = f'S{counter:03d}'
                res = student_svc.create_student(StudentCreate(
                    student_id=student_id, name=first, surname=last, date_of_birth=date(2010, 1 + counter % 12, 1)))
                if not res.is_success:
                    print(f'  {student_id}: {res.message}')
                    continue
                assigned = student_svc.patch_student(student_id, StudentPatch(school_class_id=class_id))
                if not assigned.is_success:
                    print(f'  {student_id} left unassigned: {assigned.message}')
        print(f'Total classes: {len(class_svc.list_classes())}, students: {len(student_svc.list_students())}')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--classes', type=int, default=2, help='Number of classes to create')
    parser.add_argument('--students-per-class', type=int, default=5, help='Students created for each class')
    parser.add_argument('--reset', action='store_true', help='Drop all tables before seeding')
    args = parser.parse_args()
    main(classes=args.classes, per_class=args.students_per_class, reset=args.reset)
