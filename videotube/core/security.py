# ============================================================================
# FILE: videotube/core/security.py
# Password hashing and JWT signing/verification
# ============================================================================
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from videotube.config import Settings

# -------------------------------------------------------------------
# Password hashing (Argon2)
# -------------------------------------------------------------------
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

# -------------------------------------------------------------------
# JWT helpers
# -------------------------------------------------------------------
class TokenService:
    """
    Signs and verifies the two token classes.

    Access tokens carry the public identity claims and are never stored.
    Refresh tokens carry only the user id and are persisted on the user row,
    so every refresh token gets a random `jti` to keep rotations distinct.
    """

    def __init__(self, settings: Settings):
        self.algorithm = settings.ALGORITHM
        self.access_secret = settings.ACCESS_TOKEN_SECRET
        self.refresh_secret = settings.REFRESH_TOKEN_SECRET
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def _encode(self, claims: dict, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def create_access_token(self, user, expires_delta: Optional[timedelta] = None) -> str:
        claims = {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "fullName": user.full_name,
        }
        return self._encode(claims, self.access_secret, expires_delta or self.access_ttl)

    def create_refresh_token(self, user, expires_delta: Optional[timedelta] = None) -> str:
        return self._encode({"sub": str(user.id)}, self.refresh_secret, expires_delta or self.refresh_ttl)

    def _decode(self, token: str, secret: str) -> dict:
        # Raises jwt.PyJWTError subclasses; callers pass the message through
        payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        if not payload.get("sub"):
            raise jwt.InvalidTokenError("Token has no subject")
        return payload

    def decode_access_token(self, token: str) -> dict:
        return self._decode(token, self.access_secret)

    def decode_refresh_token(self, token: str) -> dict:
        return self._decode(token, self.refresh_secret)

def subject_id(payload: dict) -> Optional[int]:
    """User id from a decoded payload, None when the claim is not an id"""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
