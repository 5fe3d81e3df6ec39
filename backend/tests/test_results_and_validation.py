from school_api import constants, models, validation
from school_api.results import ResultStatus, ServiceResult


def test_result_constructors_map_to_http_codes():
    cases = [
        (ServiceResult.ok("x"), 200, True),
        (ServiceResult.created("x"), 201, True),
        (ServiceResult.bad_request("m"), 400, False),
        (ServiceResult.not_found("m"), 404, False),
        (ServiceResult.conflict("m"), 409, False),
    ]
    for result, code, success in cases:
        assert result.http_status == code
        assert result.is_success is success
    assert ServiceResult.not_found("gone").message == "gone"
    assert ServiceResult.ok(3).data == 3
    assert ServiceResult.conflict("c").status == ResultStatus.CONFLICT


def test_is_blank():
    assert validation.is_blank(None)
    assert validation.is_blank("")
    assert validation.is_blank(" \t")
    assert not validation.is_blank(" a ")


def test_check_can_join_prefers_membership_error():
    c = models.SchoolClass(id=1, name="5A", leading_teacher="T")
    member = models.Student(student_id="S1", name="Ann", surname="Lee", school_class_id=1)
    outsider = models.Student(student_id="S2", name="Bo", surname="Ek")
    full = constants.MAX_STUDENTS_PER_CLASS
    assert validation.check_can_join(member, c, full) == "Student 'Ann Lee' is already in this class."
    assert validation.check_can_join(outsider, c, full) == "Class '5A' already has the maximum of 20 students."
    assert validation.check_can_join(outsider, c, full - 1) is None


def test_check_is_member():
    s = models.Student(student_id="S1", name="Ann", surname="Lee", school_class_id=2)
    assert validation.check_is_member(s, 2) is None
    assert validation.check_is_member(s, 3) == "Student 'Ann Lee' is not in this class."
