# /app/routers/ratings_router.py

from typing import List

from fastapi import APIRouter, Depends

from ..core.deps import get_aggregation_service, get_current_admin, get_rating_service
from ..core.errors import to_http_exception
from ..models import rating_model
from ..services.aggregation_service import AggregationService
from ..services.rating_service import RatingService

router = APIRouter()


@router.post("", response_model=rating_model.SubmissionResponse, summary="Submit a Rating")
def submit_rating(payload: rating_model.RatingCreate, ratings: RatingService = Depends(get_rating_service)):
    """
    Unauthenticated; the student's access code in the body is the authorization.
    A wrong code answers 403 and a second rating on the same day answers 409,
    so the client can tell the two apart.
    """
    result = ratings.submit(payload.studentId, payload.teacherId, payload.score, payload.accessCode)
    if not result.ok:
        raise to_http_exception(result)
    return rating_model.SubmissionResponse(message=result.message, rating=rating_model.Rating.model_validate(result.value))


@router.get("/today/{student_id}", response_model=List[rating_model.Rating], summary="Today's Ratings by a Student")
def ratings_today(student_id: str, ratings: RatingService = Depends(get_rating_service)):
    return ratings.list_for_student_today(student_id)


@router.get("", response_model=List[rating_model.RatingView], summary="All Ratings with Names", dependencies=[Depends(get_current_admin)])
def list_ratings(aggregation: AggregationService = Depends(get_aggregation_service)):
    return aggregation.enriched_ratings()
