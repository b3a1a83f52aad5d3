# /app/routers/students_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..core.deps import get_current_admin, get_roster_service
from ..core.errors import to_http_exception
from ..models import student_model
from ..services.roster_service import RosterService

router = APIRouter()


@router.get("/lookup", response_model=student_model.StudentPublic, summary="Find a Student by Access Code")
def lookup_student(code: str = Query(..., min_length=1), roster: RosterService = Depends(get_roster_service)):
    """Unauthenticated: lets a student identify themselves with their access code."""
    matches = roster.list_students(access_code=code)
    if not matches:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No student with that code")
    return matches[0]


@router.get("", response_model=List[student_model.Student], summary="List Students", dependencies=[Depends(get_current_admin)])
def list_students(
    grade: Optional[int] = None,
    access_code: Optional[str] = Query(default=None, alias="accessCode"),
    roster: RosterService = Depends(get_roster_service),
):
    return roster.list_students(grade=grade, access_code=access_code)


@router.post("", response_model=student_model.Student, status_code=status.HTTP_201_CREATED, summary="Add a Student", dependencies=[Depends(get_current_admin)])
def create_student(student_create: student_model.StudentCreate, roster: RosterService = Depends(get_roster_service)):
    result = roster.create_student(student_create)
    if not result.ok:
        raise to_http_exception(result)
    return result.value


@router.put("/{student_id}", response_model=student_model.Student, summary="Update a Student", dependencies=[Depends(get_current_admin)])
def update_student(student_id: str, student_update: student_model.StudentUpdate, roster: RosterService = Depends(get_roster_service)):
    result = roster.update_student(student_id, student_update)
    if not result.ok:
        raise to_http_exception(result)
    return result.value
