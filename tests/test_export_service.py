# /tests/test_export_service.py

import io

import pandas as pd

from app.services.export_service import ExportService
from app.services.rating_service import RatingService


def _read_workbook(content: bytes):
    return pd.read_excel(io.BytesIO(content), sheet_name=None)


def test_backup_workbook_has_three_sheets(db_service, clock, make_student, make_teacher):
    teacher = make_teacher(name="Ms. Lind", subjects=(("Science", 4),))
    student = make_student(name="Ben", grade=4, access_code="BEN444")
    RatingService(db_service, clock=clock).submit(student.id, teacher.id, 3, "BEN444")

    export = ExportService(db_service, clock=clock).build_backup_workbook()
    sheets = _read_workbook(export.content)

    assert export.file_name == "teacher_ratings_backup_2025-03-14.xlsx"
    assert list(sheets) == ["Ratings", "Teachers", "Students"]
    row = sheets["Ratings"].iloc[0]
    assert row["Teacher Name"] == "Ms. Lind"
    assert row["Student Name"] == "Ben"
    assert row["Rating"] == 3
    assert row["Date"] == "2025-03-14"
    assert len(sheets["Students"]) == 1


def test_empty_backup_still_has_headers(db_service, clock):
    sheets = _read_workbook(ExportService(db_service, clock=clock).build_backup_workbook().content)
    assert list(sheets["Ratings"].columns) == ["Teacher Name", "Subject", "Student Name", "Grade", "Rating", "Date"]
    assert sheets["Ratings"].empty


def test_clear_empties_ratings_and_keeps_roster(db_service, clock, make_student, make_teacher):
    teacher = make_teacher()
    first = make_student(name="One", access_code="ONE111")
    second = make_student(name="Two", access_code="TWO222")
    ratings = RatingService(db_service, clock=clock)
    ratings.submit(first.id, teacher.id, 4, "ONE111")
    ratings.submit(second.id, teacher.id, 2, "TWO222")

    export = ExportService(db_service, clock=clock).clear_ratings_with_backup()

    assert export.rating_count == 2
    assert len(_read_workbook(export.content)["Ratings"]) == 2
    assert db_service.get_all_ratings() == []
    assert len(db_service.get_all_students()) == 2
    assert len(db_service.get_all_teachers()) == 1
    # The same pair may rate again once the ledger is cleared.
    assert ratings.submit(first.id, teacher.id, 5, "ONE111").ok
