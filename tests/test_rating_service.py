# /tests/test_rating_service.py

import threading
from datetime import timedelta

from app.core.errors import ErrorCode
from app.services.database_service import DatabaseService
from app.services.rating_service import RatingService


def test_submit_accepts_case_insensitive_code(db_service, clock, make_student, make_teacher):
    student = make_student(grade=3, access_code="ABC123")
    teacher = make_teacher()
    result = RatingService(db_service, clock=clock).submit(student.id, teacher.id, 5, "abc123")

    assert result.ok
    assert result.value.score == 5
    assert result.value.created_at == clock.now
    assert result.value.day_bucket == clock.now.date()


def test_second_rating_same_day_is_duplicate(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    ratings = RatingService(db_service, clock=clock)

    assert ratings.submit(student.id, teacher.id, 5, "ABC123").ok
    clock.advance(timedelta(hours=13))  # 23:30, still the same UTC day
    repeat = ratings.submit(student.id, teacher.id, 3, "ABC123")

    assert not repeat.ok
    assert repeat.error == ErrorCode.DUPLICATE_SUBMISSION


def test_rating_again_next_day_succeeds(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    ratings = RatingService(db_service, clock=clock)

    assert ratings.submit(student.id, teacher.id, 4, "ABC123").ok
    clock.advance(timedelta(days=1))
    assert ratings.submit(student.id, teacher.id, 2, "ABC123").ok


def test_same_student_may_rate_different_teachers(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    first, second = make_teacher(name="T1"), make_teacher(name="T2")
    ratings = RatingService(db_service, clock=clock)

    assert ratings.submit(student.id, first.id, 4, "ABC123").ok
    assert ratings.submit(student.id, second.id, 4, "ABC123").ok


def test_unknown_student_is_not_found(db_service, clock, make_teacher):
    teacher = make_teacher()
    result = RatingService(db_service, clock=clock).submit("stu_missing", teacher.id, 5, "ABC123")
    assert result.error == ErrorCode.NOT_FOUND


def test_unknown_teacher_is_not_found(db_service, clock, make_student):
    student = make_student(access_code="ABC123")
    result = RatingService(db_service, clock=clock).submit(student.id, "tch_missing", 5, "ABC123")
    assert result.error == ErrorCode.NOT_FOUND


def test_wrong_code_is_unauthorized_with_distinct_message(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    ratings = RatingService(db_service, clock=clock)

    wrong = ratings.submit(student.id, teacher.id, 5, "ZZZ999")
    assert wrong.error == ErrorCode.UNAUTHORIZED

    assert ratings.submit(student.id, teacher.id, 5, "ABC123").ok
    duplicate = ratings.submit(student.id, teacher.id, 5, "ABC123")
    assert duplicate.message != wrong.message


def test_code_is_checked_before_score(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    result = RatingService(db_service, clock=clock).submit(student.id, teacher.id, 9, "WRONG1")
    assert result.error == ErrorCode.UNAUTHORIZED


def test_invalid_scores_are_rejected(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    ratings = RatingService(db_service, clock=clock)

    for score in (0, 6, -1, 2.5, "4", True, None):
        result = ratings.submit(student.id, teacher.id, score, "ABC123")
        assert result.error == ErrorCode.INVALID_INPUT, score
    assert db_service.get_all_ratings() == []


def test_list_for_student_today_excludes_yesterday(db_service, clock, make_student, make_teacher):
    student = make_student(access_code="ABC123")
    first, second = make_teacher(name="T1"), make_teacher(name="T2")
    ratings = RatingService(db_service, clock=clock)

    ratings.submit(student.id, first.id, 3, "ABC123")
    clock.advance(timedelta(days=1))
    ratings.submit(student.id, second.id, 5, "ABC123")

    today = ratings.list_for_student_today(student.id)
    assert [r.teacher_id for r in today] == [second.id]


def test_concurrent_identical_submissions_store_exactly_one(database, clock, make_student, make_teacher):
    """Every thread passes the pre-check window together; the unique constraint picks one winner."""
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    thread_count = 8
    barrier = threading.Barrier(thread_count)
    results = []
    lock = threading.Lock()

    def submit():
        with database.session_scope() as session:
            service = RatingService(DatabaseService(session), clock=clock)
            barrier.wait()
            outcome = service.submit(student.id, teacher.id, 4, "ABC123")
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=submit) for _ in range(thread_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    successes = [r for r in results if r.ok]
    assert len(results) == thread_count
    assert len(successes) == 1
    assert all(r.error == ErrorCode.DUPLICATE_SUBMISSION for r in results if not r.ok)

    with database.session_scope() as session:
        assert len(DatabaseService(session).get_all_ratings()) == 1


def test_constraint_is_authoritative_when_precheck_misses(db_service, clock, make_student, make_teacher, mocker):
    student = make_student(access_code="ABC123")
    teacher = make_teacher()
    ratings = RatingService(db_service, clock=clock)
    assert ratings.submit(student.id, teacher.id, 5, "ABC123").ok

    # Simulate a racing request that read the window before the first insert landed.
    mocker.patch.object(db_service, "find_rating_in_window", return_value=None)
    result = ratings.submit(student.id, teacher.id, 1, "ABC123")

    assert result.error == ErrorCode.DUPLICATE_SUBMISSION
    assert len(db_service.get_all_ratings()) == 1
