# /app/core/deps.py

"""
FastAPI dependency providers.

Every core service is built per request around the request's
DatabaseService. Process-wide collaborators (settings, token codec, notifier)
live on `app.state`, set up by the lifespan in `app/main.py`.
"""

from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.errors import to_http_exception
from app.core.security import TokenCodec
from app.db.models.auth_models import UserRole
from app.models.auth_model import TokenClaims
from app.services.aggregation_service import AggregationService
from app.services.auth_service import AuthService
from app.services.database_service import DatabaseService, get_db_service
from app.services.export_service import ExportService
from app.services.notifier import Notifier
from app.services.otp_service import OtpService
from app.services.rating_service import RatingService
from app.services.roster_service import RosterService

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_auth_service(
    db: DatabaseService = Depends(get_db_service),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, codec, session_ttl=timedelta(minutes=settings.access_token_expire_minutes))


def get_otp_service(
    db: DatabaseService = Depends(get_db_service),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> OtpService:
    return OtpService(db, notifier, ttl=timedelta(minutes=settings.otp_expire_minutes))


def get_rating_service(db: DatabaseService = Depends(get_db_service)) -> RatingService:
    return RatingService(db)


def get_aggregation_service(db: DatabaseService = Depends(get_db_service)) -> AggregationService:
    return AggregationService(db)


def get_roster_service(db: DatabaseService = Depends(get_db_service)) -> RosterService:
    return RosterService(db)


def get_export_service(db: DatabaseService = Depends(get_db_service)) -> ExportService:
    return ExportService(db)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )
    result = auth.authorize(credentials.credentials)
    if not result.ok:
        raise to_http_exception(result)
    return result.value


def get_current_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if claims.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return claims
