"""
Password hashing and verification using bcrypt.
"""

import bcrypt

from app.errors import ValidationError


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    # bcrypt has a 72-byte limit, truncate if needed
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def validate_password(password: str, min_length: int = 8) -> None:
    """Reject passwords shorter than `min_length` with a ValidationError."""
    if len(password) < min_length:
        raise ValidationError([{
            "field": "password",
            "message": f"Password must be at least {min_length} characters",
            "constraint": "min_length",
        }])
