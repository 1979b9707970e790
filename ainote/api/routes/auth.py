"""
Account endpoints: signup, login, logout, password reset, current user.

Input is validated locally first (VALIDATION_ERROR, 400). Backend failures
are classified by handle_auth_error and returned as
``{"detail": {"type", "message", "action"}}``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ainote.api.dependencies import get_auth_client
from ainote.api.middleware.user_auth import AuthenticatedUser, forget_token, get_current_user
from ainote.infrastructure.auth_backend import AuthBackendClient, AuthBackendError
from ainote.observability.logging import get_logger
from ainote.observability.telemetry import counter
from ainote.users.onboarding import get_onboarding_status
from ainote.utils.error_handler import AuthError, handle_auth_error, validation_error
from ainote.utils.validators import (
    ValidationError,
    calculate_password_strength,
    get_password_strength_color,
    get_password_strength_level,
    get_password_strength_text,
    is_valid_email,
    validate_password,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)

ALREADY_REGISTERED_MESSAGE = "This email is already registered."


class CredentialsRequest(BaseModel):
    email: str
    password: str


class EmailRequest(BaseModel):
    email: str


class PasswordRequest(BaseModel):
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    has_completed_onboarding: bool


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user: UserResponse


class PasswordStrengthResponse(BaseModel):
    score: int
    level: str
    text: str
    color: str


def _raise_auth_error(error: AuthError, status_code: int) -> None:
    counter(f"auth.errors.{error.type.value.lower()}")
    raise HTTPException(status_code=status_code, detail=error.to_dict())


def _raise_backend_error(e: AuthBackendError) -> None:
    error = handle_auth_error(e)
    status_code = e.status if e.status and e.status >= 400 else status.HTTP_503_SERVICE_UNAVAILABLE
    _raise_auth_error(error, status_code)


def _check_email(email: str) -> str:
    if not is_valid_email(email):
        _raise_auth_error(
            validation_error("Please enter a valid email address."),
            status.HTTP_400_BAD_REQUEST,
        )
    return email


def _check_password(password: str) -> str:
    try:
        return validate_password(password)
    except ValidationError as e:
        _raise_auth_error(validation_error(str(e)), status.HTTP_400_BAD_REQUEST)
        raise


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def signup(
    request: CredentialsRequest,
    client: AuthBackendClient = Depends(get_auth_client),
) -> UserResponse:
    email = _check_email(request.email)
    password = _check_password(request.password)

    try:
        user = await client.sign_up(email, password)
    except AuthBackendError as e:
        if "already registered" in e.message or "already been registered" in e.message:
            _raise_auth_error(
                AuthError(
                    type=handle_auth_error(e).type,
                    message=ALREADY_REGISTERED_MESSAGE,
                    action="login",
                    original_error=e,
                ),
                status.HTTP_409_CONFLICT,
            )
        _raise_backend_error(e)
        raise

    counter("auth.signups")
    return UserResponse(id=user.id, email=user.email, has_completed_onboarding=False)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: CredentialsRequest,
    client: AuthBackendClient = Depends(get_auth_client),
) -> LoginResponse:
    email = _check_email(request.email)
    if not request.password:
        _raise_auth_error(
            validation_error("Please enter your password."), status.HTTP_400_BAD_REQUEST
        )

    try:
        session = await client.sign_in_with_password(email, request.password)
    except AuthBackendError as e:
        _raise_backend_error(e)
        raise

    counter("auth.logins")
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user=UserResponse(
            id=session.user.id,
            email=session.user.email,
            has_completed_onboarding=get_onboarding_status(session.user.id),
        ),
    )


@router.post("/logout")
async def logout(
    user: AuthenticatedUser = Depends(get_current_user),
    client: AuthBackendClient = Depends(get_auth_client),
) -> dict[str, bool]:
    forget_token(user.token)
    try:
        await client.sign_out(user.token)
    except AuthBackendError as e:
        _raise_backend_error(e)
    return {"success": True}


@router.post("/password/forgot")
async def forgot_password(
    request: EmailRequest,
    client: AuthBackendClient = Depends(get_auth_client),
) -> dict[str, str]:
    email = _check_email(request.email)
    try:
        await client.send_password_reset(email)
    except AuthBackendError as e:
        _raise_backend_error(e)
    return {"message": "If this email is registered, a password reset link has been sent."}


@router.post("/password/reset")
async def reset_password(
    request: PasswordRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    client: AuthBackendClient = Depends(get_auth_client),
) -> dict[str, bool]:
    password = _check_password(request.password)
    try:
        await client.update_password(user.token, password)
    except AuthBackendError as e:
        _raise_backend_error(e)
    return {"success": True}


@router.post("/password/strength", response_model=PasswordStrengthResponse)
async def password_strength(request: PasswordRequest) -> PasswordStrengthResponse:
    score = calculate_password_strength(request.password)
    return PasswordStrengthResponse(
        score=score,
        level=get_password_strength_level(score),
        text=get_password_strength_text(score),
        color=get_password_strength_color(score),
    )


@router.get("/me", response_model=UserResponse)
async def me(user: AuthenticatedUser = Depends(get_current_user)) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        has_completed_onboarding=get_onboarding_status(user.id),
    )
