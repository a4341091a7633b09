from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

MIN_PASSWORD_LENGTH = 8

# argon2id with the library's fixed default cost parameters
_hasher = PasswordHasher()
_dummy_hash: str | None = None


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("password is required")
    try:
        return _hasher.hash(plain)
    except HashingError as exc:
        raise ValueError("failed to hash password") from exc


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    try:
        return _hasher.verify(hashed, plain)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def burn_verification(plain: str) -> None:
    """Spend the same time as a real verification when there is no user to check against."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = _hasher.hash("eventdesk-dummy-password")
    verify_password(plain or "x", _dummy_hash)
