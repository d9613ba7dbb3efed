import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from finai.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from finai.app.services.email_sender import IEmailSender
from finai.depends import get_email_sender, get_unit_of_work
from finai.domain.entities import User

TEST_DB_URI = "sqlite+aiosqlite:///./test.db"


class IntegrationConfig(ApplicationConfig):
    DB_URI = TEST_DB_URI
    CREATE_TABLES_ON_STARTUP = False
    APP_URL = "http://test"
    SESSION_SECRET = "integration-test-session-secret"
    SESSION_COOKIE_SECURE = False
    TOKEN_ENCRYPTION_KEY = "0123456789abcdef" * 4
    RESEND_API_KEY = ""


class RecordingEmailSender(IEmailSender):
    """Keeps the tokens that would have been mailed"""

    def __init__(self):
        self.verification = {}
        self.password_reset = {}

    async def send_verification_email(self, email: str, token: str) -> None:
        self.verification[email] = token

    async def send_password_reset_email(self, email: str, token: str) -> None:
        self.password_reset[email] = token


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DB_URI)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
def email_sender():
    return RecordingEmailSender()


@pytest_asyncio.fixture
async def app(session_factory, email_sender):
    from finai.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac



@pytest_asyncio.fixture
def create_user(session_factory):
    """Insert a user directly, bypassing registration and its rate limits"""

    async def _create_user(
        email="alice@example.com", password="Password1", name="Alice", email_verified=True, **fields
    ):
        password_hash = (
            bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode() if password else None
        )
        async with session_factory() as session:
            user = User(
                email=email,
                name=name,
                password_hash=password_hash,
                email_verified=email_verified,
                **fields,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _create_user
