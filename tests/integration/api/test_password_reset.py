import pytest
from httpx import AsyncClient

FORGOT_MESSAGE = "If an account exists with that email, a password reset link has been sent."


@pytest.mark.asyncio
async def test_forgot_password_identical_responses(client: AsyncClient, email_sender, create_user):
    await create_user(email="alice@example.com")
    await create_user(email="oauth@example.com", password=None, provider="google", provider_id="g-1")

    responses = [
        await client.post("/auth/forgot-password", json={"email": email})
        for email in ("alice@example.com", "nobody@example.com", "oauth@example.com")
    ]

    assert {r.status_code for r in responses} == {200}
    assert len({r.content for r in responses}) == 1
    assert responses[0].json() == {"message": FORGOT_MESSAGE}
    assert list(email_sender.password_reset) == ["alice@example.com"]


@pytest.mark.asyncio
async def test_reset_password_flow(client: AsyncClient, email_sender, create_user):
    await create_user()
    await client.post("/auth/forgot-password", json={"email": "alice@example.com"})
    token = email_sender.password_reset["alice@example.com"]

    response = await client.post(
        "/auth/reset-password", json={"token": token, "password": "NewPassword2"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "message": "Password reset successfully. You can now log in with your new password."
    }
    assert "finai_session" not in response.cookies

    old = await client.post("/auth/login", json={"email": "alice@example.com", "password": "Password1"})
    new = await client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "NewPassword2"}
    )
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_reset_token_is_single_use(client: AsyncClient, email_sender, create_user):
    await create_user()
    await client.post("/auth/forgot-password", json={"email": "alice@example.com"})
    token = email_sender.password_reset["alice@example.com"]

    first = await client.post("/auth/reset-password", json={"token": token, "password": "NewPassword2"})
    second = await client.post("/auth/reset-password", json={"token": token, "password": "NewPassword3"})

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {"error": {"message": "Invalid or expired reset token"}}


@pytest.mark.asyncio
async def test_reset_password_rejects_verification_token(client: AsyncClient, email_sender):
    await client.post(
        "/auth/register",
        json={"email": "alice@example.com", "password": "Password1", "name": "Alice"},
    )
    token = email_sender.verification["alice@example.com"]

    response = await client.post(
        "/auth/reset-password", json={"token": token, "password": "NewPassword2"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid or expired reset token"


@pytest.mark.asyncio
async def test_reset_password_weak_password(client: AsyncClient):
    response = await client.post(
        "/auth/reset-password", json={"token": "a" * 64, "password": "lowercase1"}
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": {"message": "Password must contain at least one uppercase letter", "field": "password"}
    }
