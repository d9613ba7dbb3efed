"""
Session Issuer

The session lives entirely in a client-held cookie: an HS256-signed JWT
carrying the principal, encrypted as a JWE (dir + A256GCM). The server keeps
no session table, so logout only deletes the cookie; a copied cookie stays
usable until it expires.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from fastapi import Request, Response
from jose import jwe, jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel

from finai.app.use_cases.auth import SessionUser

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWE_ALGORITHM = "dir"
JWE_ENCRYPTION = "A256GCM"


class SessionPrincipal(BaseModel):
    """Decoded session: the user plus issuance time (epoch milliseconds)"""

    user: SessionUser
    logged_in_at: int


def _derive_encryption_key(secret: str) -> bytes:
    return HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=None,
        info=b"finai session encryption",
    ).derive(secret.encode("utf-8"))


class SessionIssuer:
    def __init__(
        self,
        secret: str,
        max_age: int = 604800,
        cookie_name: str = "finai_session",
        secure: bool = True,
    ):
        if not secret:
            raise ValueError("SESSION_SECRET is not set")
        self._signing_key = secret
        self._encryption_key = _derive_encryption_key(secret)
        self.max_age = max_age
        self.cookie_name = cookie_name
        self.secure = secure

    def encode(self, user: SessionUser, now: Optional[datetime] = None) -> str:
        """
        Build the cookie value for user.

        Args:
            user: Principal fields
            now: Issuance time, defaults to the current time

        Returns:
            Compact JWE string
        """
        now = now or datetime.now(UTC)
        claims = {
            "sub": str(user.id),
            "user": user.model_dump(),
            "logged_in_at": int(now.timestamp() * 1000),
            "iat": now,
            "exp": now + timedelta(seconds=self.max_age),
        }
        signed = jwt.encode(claims, self._signing_key, algorithm=JWT_ALGORITHM)
        sealed = jwe.encrypt(
            signed.encode("utf-8"),
            self._encryption_key,
            algorithm=JWE_ALGORITHM,
            encryption=JWE_ENCRYPTION,
            cty="JWT",
        )
        return sealed.decode("utf-8")

    def decode(self, carrier: str) -> Optional[SessionPrincipal]:
        """Principal inside carrier, or None if it is tampered, foreign or expired"""
        try:
            signed = jwe.decrypt(carrier, self._encryption_key)
            claims = jwt.decode(
                signed.decode("utf-8"), self._signing_key, algorithms=[JWT_ALGORITHM]
            )
            return SessionPrincipal(user=claims["user"], logged_in_at=claims["logged_in_at"])
        except (JOSEError, ValueError, KeyError, TypeError) as e:
            logger.info(f"Rejected session cookie: {type(e).__name__}")
            return None

    def set_session(self, response: Response, user: SessionUser) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=self.encode(user),
            max_age=self.max_age,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def clear_session(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def read_session(self, request: Request) -> Optional[SessionPrincipal]:
        carrier = request.cookies.get(self.cookie_name)
        if not carrier:
            return None
        return self.decode(carrier)
