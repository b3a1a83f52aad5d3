# /app/models/rating_model.py

"""
Data contracts for rating submission and for the aggregated read models the
admin dashboard consumes.
"""

from datetime import datetime, date
from typing import Any, List

from pydantic import BaseModel, Field, ConfigDict

from .teacher_model import SubjectAssignment


class RatingCreate(BaseModel):
    studentId: str = Field(..., description="The id of the student submitting the rating.")
    teacherId: str = Field(..., description="The id of the teacher being rated.")
    # Passed through uncoerced: the rating service decides what counts as a
    # score, so true, "4" and 4.0 get the same INVALID_INPUT answer as 7.
    score: Any = Field(..., description="Integer score from 1 to 5.", json_schema_extra={"type": "integer"})
    accessCode: str = Field(..., min_length=1, description="The student's access code.")


class Rating(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    teacher_id: str
    score: int
    created_at: datetime
    day_bucket: date


class RatingView(BaseModel):
    """A rating joined with the names it refers to. Never stored."""
    id: str
    teacherName: str
    subject: str
    studentName: str
    grade: str
    score: int
    date: date


class TeacherRatingEntry(BaseModel):
    studentName: str
    grade: str
    score: int
    date: date


class TeacherRatingSummary(BaseModel):
    teacherId: str
    name: str
    subjects: List[SubjectAssignment] = Field(default_factory=list)
    allTimeAverage: float = Field(..., description="Mean of every score for the teacher, 0 when there are none.")
    todayAverage: float = Field(..., description="Mean of today's scores (UTC), 0 when there are none.")
    ratingCount: int = 0
    ratings: List[TeacherRatingEntry] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    message: str
    rating: Rating
