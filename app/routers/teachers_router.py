# /app/routers/teachers_router.py

from typing import List

from fastapi import APIRouter, Depends, status

from ..core.deps import get_aggregation_service, get_current_admin, get_roster_service
from ..core.errors import to_http_exception
from ..models import teacher_model
from ..models.rating_model import TeacherRatingSummary
from ..services.aggregation_service import AggregationService
from ..services.roster_service import RosterService

router = APIRouter()


@router.get("", response_model=List[teacher_model.Teacher], summary="List Teachers")
def list_teachers(roster: RosterService = Depends(get_roster_service)):
    return roster.list_teachers()


@router.post("", response_model=teacher_model.Teacher, status_code=status.HTTP_201_CREATED, summary="Add a Teacher", dependencies=[Depends(get_current_admin)])
def create_teacher(teacher_create: teacher_model.TeacherCreate, roster: RosterService = Depends(get_roster_service)):
    result = roster.create_teacher(teacher_create)
    if not result.ok:
        raise to_http_exception(result)
    return result.value


# Declared before "/{teacher_id}" routes so "ratings" is not captured as an id.
@router.get("/ratings", response_model=List[TeacherRatingSummary], summary="Rating Summaries for Every Teacher", dependencies=[Depends(get_current_admin)])
def list_teacher_ratings(aggregation: AggregationService = Depends(get_aggregation_service)):
    return aggregation.list_summaries()


@router.get("/{teacher_id}/ratings", response_model=TeacherRatingSummary, summary="Rating Summary for One Teacher", dependencies=[Depends(get_current_admin)])
def get_teacher_ratings(teacher_id: str, aggregation: AggregationService = Depends(get_aggregation_service)):
    result = aggregation.per_teacher_summary(teacher_id)
    if not result.ok:
        raise to_http_exception(result)
    return result.value


@router.put("/{teacher_id}", response_model=teacher_model.Teacher, summary="Update a Teacher", dependencies=[Depends(get_current_admin)])
def update_teacher(teacher_id: str, teacher_update: teacher_model.TeacherUpdate, roster: RosterService = Depends(get_roster_service)):
    result = roster.update_teacher(teacher_id, teacher_update)
    if not result.ok:
        raise to_http_exception(result)
    return result.value
