# /tests/test_roster_service.py

from app.core.errors import ErrorCode
from app.models.student_model import StudentCreate, StudentUpdate
from app.models.teacher_model import SubjectAssignment, TeacherCreate, TeacherUpdate
from app.services.roster_service import RosterService


def test_supplied_access_code_is_stored_uppercase(db_service):
    student = RosterService(db_service).create_student(StudentCreate(name="Cy", grade=2, access_code="ab12cd")).value
    assert student.access_code == "AB12CD"


def test_supplied_code_already_in_use_is_rejected(db_service, make_student):
    make_student(access_code="ABC123")
    result = RosterService(db_service).create_student(StudentCreate(name="Dup", grade=2, access_code="abc123"))
    assert result.error == ErrorCode.INVALID_INPUT
    assert len(db_service.get_all_students()) == 1


def test_generated_codes_are_unique_across_students(db_service):
    roster = RosterService(db_service)
    codes = {roster.create_student(StudentCreate(name=f"S{i}", grade=1)).value.access_code for i in range(25)}
    assert len(codes) == 25


def test_update_student_code_cannot_steal_another_code(db_service, make_student):
    make_student(name="Holder", access_code="HOLD01")
    other = make_student(name="Other", access_code="OTHR01")
    result = RosterService(db_service).update_student(other.id, StudentUpdate(access_code="hold01"))
    assert result.error == ErrorCode.INVALID_INPUT


def test_update_student_keeps_own_code(db_service, make_student):
    student = make_student(access_code="OWN001")
    result = RosterService(db_service).update_student(student.id, StudentUpdate(name="Renamed", access_code="own001"))
    assert result.ok
    assert result.value.name == "Renamed"
    assert result.value.access_code == "OWN001"


def test_update_missing_student(db_service):
    result = RosterService(db_service).update_student("stu_missing", StudentUpdate(grade=5))
    assert result.error == ErrorCode.NOT_FOUND


def test_empty_update_is_invalid(db_service, make_student):
    student = make_student()
    assert RosterService(db_service).update_student(student.id, StudentUpdate()).error == ErrorCode.INVALID_INPUT


def test_list_students_by_grade_and_code(db_service, make_student):
    make_student(name="G2", grade=2, access_code="GRADE2")
    make_student(name="G3", grade=3, access_code="GRADE3")
    roster = RosterService(db_service)
    assert [s.name for s in roster.list_students(grade=3)] == ["G3"]
    assert [s.name for s in roster.list_students(access_code="grade2")] == ["G2"]
    assert roster.list_students(access_code="NOPE00") == []


def test_teacher_with_several_subjects(db_service):
    roster = RosterService(db_service)
    teacher = roster.create_teacher(TeacherCreate(name="Mx. Hale", subjects=[
        SubjectAssignment(subject="Math", grade=3),
        SubjectAssignment(subject="Math", grade=3),
        SubjectAssignment(subject="Physics", grade=4),
    ])).value
    assert [(s.subject, s.grade) for s in teacher.subjects] == [("Math", 3), ("Physics", 4)]


def test_update_teacher_replaces_subjects(db_service, make_teacher):
    teacher = make_teacher(subjects=(("Math", 3),))
    result = RosterService(db_service).update_teacher(teacher.id, TeacherUpdate(subjects=[
        SubjectAssignment(subject="Math", grade=3),
        SubjectAssignment(subject="History", grade=5),
    ]))
    assert result.ok
    assert sorted((s.subject, s.grade) for s in result.value.subjects) == [("History", 5), ("Math", 3)]


def test_update_missing_teacher(db_service):
    result = RosterService(db_service).update_teacher("tch_missing", TeacherUpdate(name="X"))
    assert result.error == ErrorCode.NOT_FOUND


def test_update_student_code_collision_at_commit_is_invalid_input(db_service, make_student, mocker):
    make_student(name="Holder", access_code="HOLD01")
    other = make_student(name="Other", access_code="OTHR01")
    # the availability check misses, as it would when a concurrent update wins
    mocker.patch.object(db_service, "get_student_by_access_code", return_value=None)

    result = RosterService(db_service).update_student(other.id, StudentUpdate(access_code="hold01"))

    assert result.error == ErrorCode.INVALID_INPUT
    assert db_service.get_student_by_id(other.id).access_code == "OTHR01"
