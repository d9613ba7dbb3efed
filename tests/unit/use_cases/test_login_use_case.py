from unittest.mock import MagicMock

import bcrypt
import pytest

from finai.app.services.rate_limiter import RateLimitBucket
from finai.app.use_cases.auth import LoginUseCase
from finai.domain.entities import User
from finai.libs.result import Error, Return


@pytest.fixture
def rate_limiter():
    limiter = MagicMock()
    limiter.consume.return_value = Return.ok(None)
    return limiter


def make_user(password="Password1", verified=True, **overrides):
    fields = dict(
        id=1,
        email="alice@example.com",
        name="Alice",
        password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
        email_verified=verified,
    )
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
async def test_successful_login(mock_uow, rate_limiter):
    mock_uow.users.get_by_email.return_value = make_user()
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("Alice@Example.com", "Password1")

    assert result.is_ok()
    assert result.value.session_user.id == 1
    assert result.value.session_user.email_verified is True
    assert result.value.body.user.email == "alice@example.com"
    assert "password_hash" not in result.value.body.user.model_dump()
    rate_limiter.consume.assert_called_once_with(RateLimitBucket.auth_account, "alice@example.com")


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_look_the_same(mock_uow, rate_limiter):
    use_case = LoginUseCase(mock_uow, rate_limiter)

    mock_uow.users.get_by_email.return_value = None
    unknown = await use_case.execute("nobody@example.com", "Password1")

    mock_uow.users.get_by_email.return_value = make_user()
    wrong = await use_case.execute("alice@example.com", "Password2")

    assert unknown.is_err() and wrong.is_err()
    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    assert unknown.error.message == "Invalid email or password"


@pytest.mark.asyncio
async def test_oauth_only_account_cannot_password_login(mock_uow, rate_limiter):
    mock_uow.users.get_by_email.return_value = make_user(password_hash=None, provider="github")
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("alice@example.com", "Password1")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_unverified_user_with_correct_password(mock_uow, rate_limiter):
    mock_uow.users.get_by_email.return_value = make_user(verified=False)
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("alice@example.com", "Password1")

    assert result.is_err()
    assert result.error.code == "EMAIL_NOT_VERIFIED"
    assert result.error.message == "Please verify your email before logging in"


@pytest.mark.asyncio
async def test_unverified_user_with_wrong_password_gets_invalid_credentials(mock_uow, rate_limiter):
    mock_uow.users.get_by_email.return_value = make_user(verified=False)
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("alice@example.com", "Password2")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_account_budget_exhausted(mock_uow, rate_limiter):
    rate_limiter.consume.return_value = Return.err(
        Error("RATE_LIMITED", "Too many requests. Please try again later.")
    )
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("alice@example.com", "Password1")

    assert result.is_err()
    assert result.error.code == "RATE_LIMITED"
    mock_uow.users.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_missing_fields(mock_uow, rate_limiter):
    use_case = LoginUseCase(mock_uow, rate_limiter)

    result = await use_case.execute("alice@example.com", None)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.message == "Email and password are required"
    rate_limiter.consume.assert_not_called()
