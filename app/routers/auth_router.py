# /app/routers/auth_router.py

"""
Public authentication endpoints.

Registration and password reset are both gated by an OTP: the client first
calls `/send-otp`, then submits the delivered code together with the
credentials. The code is consumed before the credential is touched.
"""

from fastapi import APIRouter, Depends, status

from app.core.deps import get_auth_service, get_otp_service
from app.core.errors import to_http_exception
from app.models.auth_model import (
    LoginRequest,
    MessageResponse,
    OtpRequest,
    OtpVerifyRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
    UsersCount,
)
from app.services.auth_service import AuthService
from app.services.otp_service import OtpService

router = APIRouter()


@router.post("/send-otp", response_model=MessageResponse, summary="Email a One-Time Passcode")
def send_otp(payload: OtpRequest, otp: OtpService = Depends(get_otp_service)):
    result = otp.request_code(payload.email)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message)


@router.post("/verify-otp", response_model=MessageResponse, summary="Verify and Consume a One-Time Passcode")
def verify_otp(payload: OtpVerifyRequest, otp: OtpService = Depends(get_otp_service)):
    result = otp.verify_code(payload.email, payload.otp)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_200_OK, summary="Register an Administrator")
def register(
    payload: RegisterRequest,
    otp: OtpService = Depends(get_otp_service),
    auth: AuthService = Depends(get_auth_service),
):
    verified = otp.verify_code(payload.email, payload.otp)
    if not verified.ok:
        raise to_http_exception(verified)

    result = auth.register(payload.email, payload.password)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message, notice=result.error.value if result.error else None)


@router.post("/reset-password", response_model=MessageResponse, summary="Reset a Password")
def reset_password(
    payload: ResetPasswordRequest,
    otp: OtpService = Depends(get_otp_service),
    auth: AuthService = Depends(get_auth_service),
):
    verified = otp.verify_code(payload.email, payload.otp)
    if not verified.ok:
        raise to_http_exception(verified)

    result = auth.reset_password(payload.email, payload.password)
    if not result.ok:
        raise to_http_exception(result)
    return MessageResponse(message=result.message)


@router.post("/login", response_model=Token, summary="Exchange Credentials for a Session Token")
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = auth.login(payload.email, payload.password)
    if not result.ok:
        raise to_http_exception(result)
    return result.value


@router.get("/users-count", response_model=UsersCount, summary="Count Registered Users")
def users_count(auth: AuthService = Depends(get_auth_service)):
    # The first-run screen uses this to decide between "register" and "login".
    return UsersCount(count=auth.count_users())
