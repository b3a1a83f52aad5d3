# /app/services/roster_service.py

"""
Administrator-facing roster operations for students and teachers.

Student creation either takes the administrator's access code (rejected with
INVALID_INPUT if another student already holds it) or asks the access-code
registry for a fresh one. A generated code that still collides at insert time
because of a concurrent creation is regenerated.
"""

import logging
import uuid
from typing import List, Optional

from app.core.errors import ErrorCode, ServiceResult
from app.db.models.roster_models import Student, Teacher

from ..models import student_model, teacher_model
from .access_code_service import AccessCodeService, MAX_GENERATION_ATTEMPTS, is_well_formed
from .database_service import DatabaseService

logger = logging.getLogger(__name__)

CODE_IN_USE_MESSAGE = "Access code already in use by another student."


def _unique_subjects(subjects: List[teacher_model.SubjectAssignment]) -> List[dict]:
    """Drops repeated (subject, grade) pairs, keeping the first occurrence."""
    seen = {}
    for s in subjects:
        seen.setdefault((s.subject.strip(), s.grade), {"subject": s.subject.strip(), "grade": s.grade})
    return list(seen.values())


class RosterService:
    def __init__(self, db: DatabaseService):
        self.db = db
        self.access_codes = AccessCodeService(db)

    # --- Students ---

    def create_student(self, student_data: student_model.StudentCreate) -> ServiceResult[Student]:
        record = {"name": student_data.name, "grade": student_data.grade}

        if student_data.access_code:
            if not is_well_formed(student_data.access_code):
                return ServiceResult.failure(ErrorCode.INVALID_INPUT, "Access code must be 6 letters or digits.")
            code = self.access_codes.issue_code(student_data.access_code)
            if not self.access_codes.is_available(code):
                return ServiceResult.failure(ErrorCode.INVALID_INPUT, CODE_IN_USE_MESSAGE)
            new_student = self.db.add_student({"id": f"stu_{uuid.uuid4().hex[:12]}", "access_code": code, **record})
            if new_student is None:
                return ServiceResult.failure(ErrorCode.INVALID_INPUT, CODE_IN_USE_MESSAGE)
            return ServiceResult.success(new_student)

        for _ in range(MAX_GENERATION_ATTEMPTS):
            code = self.access_codes.issue_unique_code()
            new_student = self.db.add_student({"id": f"stu_{uuid.uuid4().hex[:12]}", "access_code": code, **record})
            if new_student is not None:
                logger.info("Created student %s in grade %d", new_student.id, new_student.grade)
                return ServiceResult.success(new_student)
        raise RuntimeError("Could not store a student with a unique access code")

    def update_student(self, student_id: str, student_update: student_model.StudentUpdate) -> ServiceResult[Student]:
        update_data = student_update.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "No update data provided.")
        if self.db.get_student_by_id(student_id) is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, f"Student with ID {student_id} not found.")

        if "access_code" in update_data:
            code = self.access_codes.issue_code(update_data["access_code"])
            holder = self.db.get_student_by_access_code(code)
            if holder is not None and holder.id != student_id:
                return ServiceResult.failure(ErrorCode.INVALID_INPUT, CODE_IN_USE_MESSAGE)
            update_data["access_code"] = code

        updated = self.db.update_student(student_id, update_data)
        if updated is None:
            # Another student took the code between the check above and the commit.
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, CODE_IN_USE_MESSAGE)
        return ServiceResult.success(updated)

    def list_students(self, grade: Optional[int] = None, access_code: Optional[str] = None) -> List[Student]:
        if access_code:
            student = self.db.get_student_by_access_code(access_code.strip())
            return [student] if student else []
        return self.db.get_all_students(grade=grade)

    # --- Teachers ---

    def create_teacher(self, teacher_data: teacher_model.TeacherCreate) -> ServiceResult[Teacher]:
        subjects = _unique_subjects(teacher_data.subjects)
        new_teacher = self.db.add_teacher({"id": f"tch_{uuid.uuid4().hex[:12]}", "name": teacher_data.name}, subjects)
        return ServiceResult.success(new_teacher)

    def update_teacher(self, teacher_id: str, teacher_update: teacher_model.TeacherUpdate) -> ServiceResult[Teacher]:
        update_data = teacher_update.model_dump(exclude_unset=True, exclude_none=True, exclude={"subjects"})
        subjects = _unique_subjects(teacher_update.subjects) if teacher_update.subjects else None
        if not update_data and subjects is None:
            return ServiceResult.failure(ErrorCode.INVALID_INPUT, "No update data provided.")
        updated = self.db.update_teacher(teacher_id, update_data, subjects)
        if updated is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, f"Teacher with ID {teacher_id} not found.")
        return ServiceResult.success(updated)

    def list_teachers(self) -> List[Teacher]:
        return self.db.get_all_teachers()
