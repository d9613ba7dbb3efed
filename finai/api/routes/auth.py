from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from finai.api.error import ClientError, ServerError
from finai.api.utils.session import SessionIssuer, SessionPrincipal
from finai.app.services.email_sender import IEmailSender
from finai.app.services.rate_limiter import IRateLimiter, RateLimitBucket
from finai.app.services.unit_of_work import UnitOfWork
from finai.app.use_cases.auth import (
    ForgotPasswordUseCase,
    LoginResponse,
    LoginUseCase,
    MessageResponse,
    RegisterCommand,
    RegisterUseCase,
    ResendVerificationUseCase,
    ResetPasswordUseCase,
    VerifyEmailUseCase,
)
from finai.depends import (
    get_email_sender,
    get_rate_limiter,
    get_session_issuer,
    get_unit_of_work,
    limit_by_ip,
    require_session,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Fields are optional here so that missing values get the same 400
    message as empty ones.
    """

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="Password (8+ chars, upper, lower, digit)")
    name: Optional[str] = Field(None, description="Display name")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Register

    Creates an unverified password account and emails a verification link.
    Not rate limited.

    Raises:
        - 400 Bad Request: Missing field, invalid email, weak password
        - 409 Conflict: Email already registered
        - 500 Internal Server Error: Storage or mail failure
    """
    command = RegisterCommand(email=request.email, password=request.password, name=request.name)

    use_case = RegisterUseCase(uow, email_sender)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    dependencies=[Depends(limit_by_ip(RateLimitBucket.auth_ip))],
)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: IRateLimiter = Depends(get_rate_limiter),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Login

    Rate limited per IP, then per account. Sets the session cookie.

    Raises:
        - 400 Bad Request: Missing field or invalid email
        - 401 Unauthorized: Unknown email or wrong password (same message)
        - 403 Forbidden: Correct password but email not verified
        - 429 Too Many Requests: IP or account budget exhausted
    """
    use_case = LoginUseCase(uow, rate_limiter)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "EMAIL_NOT_VERIFIED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    issuer.set_session(response, result.value.session_user)
    return result.value.body


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(response: Response, issuer: SessionIssuer = Depends(get_session_issuer)):
    """
    Logout

    Deletes the session cookie. There is no server-side session to revoke.
    """
    issuer.clear_session(response)
    return MessageResponse(message="Logged out")


@router.get("/session", status_code=status.HTTP_200_OK, response_model=SessionPrincipal)
async def get_session(principal: SessionPrincipal = Depends(require_session)):
    """
    Current Session

    Raises:
        - 401 Unauthorized: No valid session cookie
    """
    return principal


class EmailRequest(BaseModel):
    email: Optional[str] = Field(None, description="User email address")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(limit_by_ip(RateLimitBucket.auth_ip))],
)
async def forgot_password(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Forgot Password

    Security:
        - Identical response whether or not the account exists
        - Rate limited per IP

    Raises:
        - 400 Bad Request: Missing email
        - 429 Too Many Requests: IP budget exhausted
    """
    use_case = ForgotPasswordUseCase(uow, email_sender)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = Field(None, description="Password reset token from email")
    password: Optional[str] = Field(None, description="New password")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(limit_by_ip(RateLimitBucket.auth_ip))],
)
async def reset_password(
    request: ResetPasswordRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Reset Password

    Redeems the reset token and sets the new password. Does not log in.

    Raises:
        - 400 Bad Request: Missing field, weak password, invalid/expired/used token
        - 429 Too Many Requests: IP budget exhausted
    """
    use_case = ResetPasswordUseCase(uow)
    result = await use_case.execute(request.token, request.password)

    if result.is_err():
        error = result.error
        if error.code in ("VALIDATION_ERROR", "INVALID_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post(
    "/resend-verification",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(limit_by_ip(RateLimitBucket.verification_ip))],
)
async def resend_verification(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Resend Verification Email

    Security:
        - Identical response whether or not the account exists or is verified
        - Rate limited per IP

    Raises:
        - 400 Bad Request: Missing email
        - 429 Too Many Requests: IP budget exhausted
    """
    use_case = ResendVerificationUseCase(uow, email_sender)
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class VerifyEmailRequest(BaseModel):
    token: Optional[str] = Field(None, description="Email verification token")


@router.post(
    "/verify-email",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(limit_by_ip(RateLimitBucket.verification_ip))],
)
async def verify_email(
    request: VerifyEmailRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Email Verification

    Redeems the token, marks the email verified and signs the user in.

    Raises:
        - 400 Bad Request: Missing, invalid, expired or used token
        - 404 Not Found: Token owner no longer exists
        - 429 Too Many Requests: IP budget exhausted
    """
    use_case = VerifyEmailUseCase(uow)
    result = await use_case.execute(request.token)

    if result.is_err():
        error = result.error
        if error.code in ("VALIDATION_ERROR", "INVALID_TOKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    issuer.set_session(response, result.value.session_user)
    return result.value.body
