"""Password hashing helpers."""

import re

from rentledger.extensions import bcrypt

# At least 8 characters with an upper-case letter, a lower-case letter and a digit.
PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,}$")


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.check_password_hash(hashed_password, plain_password)


def is_strong_password(plain_password: str) -> bool:
    return bool(PASSWORD_REGEX.match(plain_password or ""))
