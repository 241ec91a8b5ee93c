"""Security Primitives — bcrypt password hashing and JWT access tokens.

Invariants:
    - Plaintext passwords never leave this module (only hashes are returned)
    - verify_password never raises on malformed hashes or over-long input; it returns False
    - hash_password refuses passwords over 72 UTF-8 bytes with ValidationFailedError
      instead of letting bcrypt raise ValueError
    - decode_access_token raises AuthenticationError for every invalid/expired token
"""

import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from boothboss.core.errors import AuthenticationError, ValidationFailedError

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValidationFailedError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes", "password",
        )
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    raw = password.encode("utf-8")
    if not password_hash or len(raw) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: uuid.UUID, role: str, secret: str,
    algorithm: str = "HS256", expires_minutes: int = 60,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": issued,
        "exp": issued + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    """Return the token claims; sub is validated as a UUID."""
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired, please log in again")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid authentication token")
    try:
        claims["sub"] = uuid.UUID(claims["sub"])
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid authentication token")
    return claims


def generate_verification_token() -> str:
    return str(uuid.uuid4())
