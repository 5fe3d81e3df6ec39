from school_api import constants
from school_api.results import ResultStatus
from school_api.schemas import SchoolClassCreate, SchoolClassPatch, SchoolClassUpdate
from school_api.services import SchoolClassService, StudentService


def test_create_class_starts_empty(session):
    result = SchoolClassService(session).create_class(SchoolClassCreate(name="Class 5A", leading_teacher="Mrs. Smith"))
    assert result.status == ResultStatus.CREATED
    assert result.data.id is not None
    assert result.data.student_count == 0
    assert result.data.students == []


def test_create_class_requires_fields(session):
    svc = SchoolClassService(session)
    assert svc.create_class(SchoolClassCreate(name="", leading_teacher="T")).status == ResultStatus.BAD_REQUEST
    assert svc.create_class(SchoolClassCreate(name="N")).status == ResultStatus.BAD_REQUEST
    assert svc.list_classes() == []


def test_get_class_lists_members(session, make_class, make_student):
    c = make_class()
    make_student("S002", class_id=c.id, name="Jane")
    make_student("S001", class_id=c.id)
    make_student("S003")
    result = SchoolClassService(session).get_class(c.id)
    assert result.data.student_count == 2
    assert [s.student_id for s in result.data.students] == ["S001", "S002"]
    assert SchoolClassService(session).get_class(99).status == ResultStatus.NOT_FOUND


def test_update_class_reports_member_count(session, make_class, make_student):
    c = make_class()
    make_student("S001", class_id=c.id)
    svc = SchoolClassService(session)
    result = svc.update_class(c.id, SchoolClassUpdate(name="Class 6A", leading_teacher="Mr. Jones"))
    assert result.status == ResultStatus.OK
    assert (result.data.name, result.data.leading_teacher, result.data.student_count) == ("Class 6A", "Mr. Jones", 1)
    assert svc.update_class(c.id, SchoolClassUpdate(name="X", leading_teacher=" ")).status == ResultStatus.BAD_REQUEST
    assert svc.update_class(99, SchoolClassUpdate(name="X", leading_teacher="Y")).status == ResultStatus.NOT_FOUND


def test_patch_class_only_touches_sent_fields(session, make_class):
    c = make_class()
    svc = SchoolClassService(session)
    result = svc.patch_class(c.id, SchoolClassPatch(leading_teacher="Mr. Brown"))
    assert result.data.name == "Class 5A"
    assert result.data.leading_teacher == "Mr. Brown"
    rejected = svc.patch_class(c.id, SchoolClassPatch.model_validate({"name": None}))
    assert rejected.status == ResultStatus.BAD_REQUEST
    assert rejected.message == constants.CLASS_NAME_REQUIRED
    assert svc.patch_class(99, SchoolClassPatch(name="Z")).status == ResultStatus.NOT_FOUND


def test_delete_class_unassigns_all_members(session, make_class, make_student):
    c = make_class()
    ids = [f"S{i:03d}" for i in range(5)]
    for sid in ids:
        make_student(sid, class_id=c.id)
    result = SchoolClassService(session).delete_class(c.id)
    assert result.status == ResultStatus.OK
    assert result.data == constants.CLASS_DELETED.format(c.id)
    students = StudentService(session)
    for sid in ids:
        fetched = students.get_student(sid)
        assert fetched.status == ResultStatus.OK
        assert fetched.data.school_class_id is None
    assert SchoolClassService(session).get_class(c.id).status == ResultStatus.NOT_FOUND


def test_delete_missing_class(session):
    assert SchoolClassService(session).delete_class(7).status == ResultStatus.NOT_FOUND


def test_deleting_student_only_reduces_count(session, make_class, make_student):
    c = make_class()
    make_student("S001", class_id=c.id)
    make_student("S002", class_id=c.id)
    StudentService(session).delete_student("S001")
    result = SchoolClassService(session).get_class(c.id)
    assert result.data.student_count == 1
    assert result.data.name == "Class 5A"
