# /app/routers/admin_router.py

"""
Administrator utilities: spreadsheet backup, clear-with-backup, and the
teacher-proxy accounts. Every route requires an admin session token.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..core.deps import get_auth_service, get_current_admin, get_export_service
from ..core.errors import to_http_exception
from ..db.models.auth_models import UserRole
from ..models.auth_model import MessageResponse, TeacherUserCreate, User
from ..services.auth_service import AuthService
from ..services.export_service import ExportService, WorkbookExport

router = APIRouter(dependencies=[Depends(get_current_admin)])


def _attachment(export: WorkbookExport) -> Response:
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename={export.file_name}"},
    )


@router.get("/backup", summary="Download a Backup Workbook", response_class=Response)
def download_backup(export: ExportService = Depends(get_export_service)):
    return _attachment(export.build_backup_workbook())


@router.delete("/ratings", summary="Clear All Ratings (Returns the Backup)", response_class=Response)
def clear_ratings(export: ExportService = Depends(get_export_service)):
    return _attachment(export.clear_ratings_with_backup())


@router.post("/teacher-users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED, summary="Create a Teacher Account")
def create_teacher_user(payload: TeacherUserCreate, auth: AuthService = Depends(get_auth_service)):
    result = auth.register(payload.email, payload.password, role=UserRole.TEACHER)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message, notice=result.error.value if result.error else None)


@router.get("/teacher-users", response_model=List[User], summary="List Teacher Accounts")
def list_teacher_users(auth: AuthService = Depends(get_auth_service)):
    return auth.list_users(UserRole.TEACHER)


@router.delete("/teacher-users/{user_id}", response_model=MessageResponse, summary="Delete a Teacher Account")
def delete_teacher_user(user_id: str, auth: AuthService = Depends(get_auth_service)):
    result = auth.delete_teacher_user(user_id)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message)


@router.get("/users", response_model=List[User], summary="List Administrator Accounts")
def list_admin_users(auth: AuthService = Depends(get_auth_service)):
    return auth.list_users(UserRole.ADMIN)
