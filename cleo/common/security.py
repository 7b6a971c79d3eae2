"""
Hashing, identifier and key generation helpers.
Passwords are stored as argon2id hashes; record identifiers are upper-case SHA-256 digests.
"""

from __future__ import annotations

import hashlib
import secrets
import string
from datetime import datetime
from typing import Final

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

KEY_ALPHABET: Final[str] = string.ascii_uppercase + string.digits
ADMIN_KEY_LENGTH: Final[int] = 16
NORMAL_KEY_LENGTH: Final[int] = 10

_HASHER = PasswordHasher()


def hash_password(password: str) -> str:
    return _HASHER.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _HASHER.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError, VerificationError):
        return False


def hash_string(subject: str) -> str:
    """Return the upper-case hex SHA-256 digest of `subject`."""

    return hashlib.sha256(subject.encode("utf-8")).hexdigest().upper()


def time_stamp(now: datetime | None = None) -> str:
    """Compact local timestamp down to microseconds, e.g. `20260219093015123456`."""

    return (now or datetime.now()).strftime("%Y%m%d%H%M%S%f")


def new_identifier(*parts: str) -> str:
    """Derive a fresh identifier from `parts`, the current time and a random nonce."""

    return hash_string("".join(parts) + time_stamp() + secrets.token_hex(8))


def generate_key(size: int) -> str:
    """Draw `size` characters from `KEY_ALPHABET` with a cryptographic RNG."""

    if size <= 0:
        raise ValueError(f"Key size must be greater than 0, got {size}.")
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(size))


def key_length_for_type(key_type: str) -> int:
    if key_type == "admin":
        return ADMIN_KEY_LENGTH
    if key_type == "normal":
        return NORMAL_KEY_LENGTH
    raise ValueError(f'"{key_type}" is not a valid user key type.')
