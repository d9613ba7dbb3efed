import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from finai.adapter.services.email_sender import LoggingEmailSender, ResendEmailSender
from finai.adapter.services.memory_rate_limiter import MemoryRateLimiter
from finai.adapter.services.oauth_providers import GitHubOAuthProvider, GoogleOAuthProvider
from finai.adapter.services.plaid_client import PlaidClient
from finai.adapter.services.secret_cipher import AesGcmSecretCipher
from finai.api.utils.session import SessionIssuer
from finai.domain import entities  # noqa: F401  registers tables on SQLModel.metadata

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' 'unsafe-eval' https://cdn.plaid.com; "
        "style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data: https:; "
        "font-src 'self' data:; "
        "connect-src 'self' https:; "
        "frame-src 'self' https://cdn.plaid.com; "
        "frame-ancestors 'none'"
    ),
}


def _error_body(message: str, field=None) -> dict:
    error_dict = {"message": message}
    if field:
        error_dict["field"] = field
    return {"error": error_dict}


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error on {request.url.path}: {exc.base_error.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.base_error.message, exc.base_error.field),
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error on {request.url.path}: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    field = None
    if errors:
        loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
        field = loc[-1] if loc else None
    logger.warning(f"Malformed request on {request.url.path}: field={field}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request body", field),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


def create_app(ApplicationConfig) -> FastAPI:
    engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.CREATE_TABLES_ON_STARTUP:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        yield
        await engine.dispose()

    app = FastAPI(title="finai API", version="0.1.0", lifespan=lifespan)

    app.state.session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    # Raises on a missing or malformed key so the process never starts without one
    app.state.secret_cipher = AesGcmSecretCipher.from_hex(ApplicationConfig.TOKEN_ENCRYPTION_KEY)
    app.state.rate_limiter = MemoryRateLimiter()
    app.state.session_issuer = SessionIssuer(
        secret=ApplicationConfig.SESSION_SECRET,
        max_age=ApplicationConfig.SESSION_MAX_AGE,
        cookie_name=ApplicationConfig.SESSION_COOKIE_NAME,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
    )
    if ApplicationConfig.RESEND_API_KEY:
        app.state.email_sender = ResendEmailSender(
            api_key=ApplicationConfig.RESEND_API_KEY,
            sender=ApplicationConfig.EMAIL_FROM,
            app_url=ApplicationConfig.APP_URL,
        )
    else:
        logger.warning("RESEND_API_KEY is not set; emails will only be logged")
        app.state.email_sender = LoggingEmailSender()
    app.state.bank_client = PlaidClient(
        client_id=ApplicationConfig.PLAID_CLIENT_ID,
        secret=ApplicationConfig.PLAID_SECRET,
        environment=ApplicationConfig.PLAID_ENV,
    )
    app.state.oauth_providers = {
        "github": GitHubOAuthProvider(
            ApplicationConfig.GITHUB_CLIENT_ID, ApplicationConfig.GITHUB_CLIENT_SECRET
        ),
        "google": GoogleOAuthProvider(
            ApplicationConfig.GOOGLE_CLIENT_ID, ApplicationConfig.GOOGLE_CLIENT_SECRET
        ),
    }
    app.state.app_url = ApplicationConfig.APP_URL

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    from finai.api.routes import auth, bank, health_check, oauth

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(oauth.router, tags=["OAuth"])
    app.include_router(bank.router, tags=["Bank"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
