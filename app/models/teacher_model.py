# /app/models/teacher_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class SubjectAssignment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject: str = Field(..., min_length=1)
    grade: int = Field(..., ge=0)


class TeacherCreate(BaseModel):
    name: str = Field(..., min_length=1)
    subjects: List[SubjectAssignment] = Field(..., min_length=1, description="At least one (subject, grade) association.")


class TeacherUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    subjects: Optional[List[SubjectAssignment]] = Field(default=None, min_length=1)


class Teacher(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    subjects: List[SubjectAssignment] = Field(default_factory=list)
