"""
Password hashing.

bcrypt is deliberately slow, so both operations run on the anyio worker
thread pool and never on the event loop.
"""

import functools

import bcrypt
from anyio import to_thread

BCRYPT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases reject longer input
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(BCRYPT_ROUNDS)).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Compared against when the account has no usable hash, so unknown emails
    # cost the same bcrypt work as wrong passwords
    return _hash("dummy-password")


async def hash_password(password: str) -> str:
    return await to_thread.run_sync(_hash, password)


async def verify_password(password: str, password_hash: str) -> bool:
    return await to_thread.run_sync(_check, password, password_hash)


async def burn_password_check(password: str) -> None:
    """Spend one bcrypt verification for a login with no usable hash"""
    await to_thread.run_sync(lambda: _check(password, _dummy_hash()))
