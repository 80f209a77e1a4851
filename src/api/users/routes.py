"""
Users API routes.

Defines REST endpoints for registration, email verification, login,
logout, current-user lookup and subscription changes. Handlers do not
catch domain errors; the centralized responder in src.api.errors
turns them into HTTP responses.
"""

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_account_service, get_current_account
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    SubscriptionUpdateRequest,
    SubscriptionUpdateResponse,
    SubscriptionView,
    UserResponse,
)
from src.domain.accounts import AccountService
from src.domain.ports import Account

router = APIRouter(tags=["users"])

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Not authorized"}}


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email in use"},
        502: {"model": ErrorResponse, "description": "Verification email not sent"},
    },
    summary="Register a new user",
    description="Create an unverified account and email a verification link.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    """
    Register a new user and send the verification email.

    - **email**: Email address to register
    - **password**: Password (minimum 6 characters)
    """
    account = service.register(request_data.email, request_data.password)
    return RegisterResponse(
        user=UserResponse(email=account.email, subscription=account.subscription)
    )


@router.get(
    "/verify/{verification_token}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown or used token"}},
    summary="Verify email address",
)
def verify_email(
    verification_token: str,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Consume the verification token from the emailed link."""
    service.verify_email(verification_token)
    return MessageResponse(message="Verification successful")


@router.post(
    "/verify",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Already verified"},
        401: {"model": ErrorResponse, "description": "Unknown email"},
    },
    summary="Resend verification email",
)
def resend_verification(
    request_data: ResendVerificationRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Send the stored verification link again."""
    service.resend_verification(request_data.email)
    return MessageResponse(message="Verification email sent")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Bad credentials or unverified"}},
    summary="Log in",
)
def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Exchange email and password for a 24-hour bearer token."""
    result = service.login(request_data.email, request_data.password)
    return LoginResponse(
        token=result.token,
        user=UserResponse(email=result.account.email, subscription=result.account.subscription),
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_UNAUTHORIZED,
    summary="Log out",
)
def logout(
    account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> Response:
    """Invalidate the current bearer token."""
    service.logout(account)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/current",
    response_model=UserResponse,
    responses=_UNAUTHORIZED,
    summary="Current user",
)
def current(
    account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> UserResponse:
    """Return the authenticated account's email and subscription."""
    fresh = service.current(account)
    return UserResponse(email=fresh.email, subscription=fresh.subscription)


@router.patch(
    "/",
    response_model=SubscriptionUpdateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_UNAUTHORIZED, 400: {"model": ErrorResponse, "description": "Unknown tier"}},
    summary="Change subscription tier",
)
def update_subscription(
    request_data: SubscriptionUpdateRequest,
    account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> SubscriptionUpdateResponse:
    """Set the subscription tier to starter, pro or business."""
    updated = service.update_subscription(account, request_data.subscription)
    return SubscriptionUpdateResponse(user=SubscriptionView(subscription=updated.subscription))
