# /app/models/student_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

# --- Model Definitions ---

class StudentBase(BaseModel):
    """Fields common to create and read operations."""
    name: str = Field(..., min_length=1, description="The student's display name.")
    grade: int = Field(..., ge=0, description="The student's grade level.")

class StudentCreate(StudentBase):
    """
    The model used for creating a new student. When `access_code` is omitted
    the server generates one.
    """
    access_code: Optional[str] = Field(
        default=None,
        min_length=6,
        max_length=6,
        pattern=r"^[A-Za-z0-9]{6}$",
        description="Optional administrator-chosen code (6 alphanumeric characters, case-insensitive).",
    )

class StudentUpdate(BaseModel):
    """All fields are optional to allow for partial updates."""
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[int] = Field(default=None, ge=0)
    access_code: Optional[str] = Field(default=None, min_length=6, max_length=6, pattern=r"^[A-Za-z0-9]{6}$")

class Student(StudentBase):
    """The full representation of a Student, as returned to administrators."""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="The unique, server-generated identifier for the student.")
    access_code: str = Field(..., description="The uppercase access code used to authorize ratings.")

class StudentPublic(BaseModel):
    """What a student sees after entering their code: no code echoed back."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    grade: int
