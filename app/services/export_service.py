# /app/services/export_service.py

"""
Spreadsheet backups of the rating data.

`build_backup_workbook` renders three sheets (Ratings, Teachers, Students)
into an in-memory .xlsx file. `clear_ratings_with_backup` renders the same
workbook first and only then empties the Rating table, so the administrator
always walks away with a copy of what was deleted. Students and teachers are
never touched by the clear.
"""

import io
import logging
from dataclasses import dataclass
from datetime import date

import pandas as pd

from app.core.clock import Clock, utcnow

from .aggregation_service import AggregationService
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

RATING_SHEET_COLUMNS = ["Teacher Name", "Subject", "Student Name", "Grade", "Rating", "Date"]
TEACHER_SHEET_COLUMNS = ["Teacher Name", "Subject", "Grade"]
STUDENT_SHEET_COLUMNS = ["Student Name", "Grade"]


@dataclass(frozen=True)
class WorkbookExport:
    file_name: str
    content: bytes
    rating_count: int
    media_type: str = XLSX_MEDIA_TYPE


class ExportService:
    def __init__(self, db: DatabaseService, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.aggregation = AggregationService(db, clock=clock)

    def _ratings_sheet(self) -> pd.DataFrame:
        rows = [
            {
                "Teacher Name": view.teacherName,
                "Subject": view.subject,
                "Student Name": view.studentName,
                "Grade": view.grade,
                "Rating": view.score,
                "Date": view.date.isoformat(),
            }
            for view in self.aggregation.enriched_ratings()
        ]
        return pd.DataFrame(rows, columns=RATING_SHEET_COLUMNS)

    def _teachers_sheet(self) -> pd.DataFrame:
        rows = []
        for teacher in self.db.get_all_teachers():
            if not teacher.subjects:
                rows.append({"Teacher Name": teacher.name, "Subject": "", "Grade": ""})
            for assignment in teacher.subjects:
                rows.append({"Teacher Name": teacher.name, "Subject": assignment.subject, "Grade": assignment.grade})
        return pd.DataFrame(rows, columns=TEACHER_SHEET_COLUMNS)

    def _students_sheet(self) -> pd.DataFrame:
        rows = [{"Student Name": s.name, "Grade": s.grade} for s in self.db.get_all_students()]
        return pd.DataFrame(rows, columns=STUDENT_SHEET_COLUMNS)

    def _today(self) -> date:
        return self.clock().date()

    def build_backup_workbook(self) -> WorkbookExport:
        ratings = self._ratings_sheet()
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            ratings.to_excel(writer, sheet_name="Ratings", index=False)
            self._teachers_sheet().to_excel(writer, sheet_name="Teachers", index=False)
            self._students_sheet().to_excel(writer, sheet_name="Students", index=False)
        return WorkbookExport(
            file_name=f"teacher_ratings_backup_{self._today().isoformat()}.xlsx",
            content=buffer.getvalue(),
            rating_count=len(ratings),
        )

    def clear_ratings_with_backup(self) -> WorkbookExport:
        backup = self.build_backup_workbook()
        deleted = self.db.delete_all_ratings()
        logger.warning("Cleared %d ratings after writing backup %s", deleted, backup.file_name)
        return WorkbookExport(
            file_name=f"teacher_rating_{self._today().isoformat()}.xlsx",
            content=backup.content,
            rating_count=deleted,
        )
