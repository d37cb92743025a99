"""
Password hashing (passlib) and bearer tokens (PyJWT).

Tokens carry ``{"id": <account id>, "role": <role>, "exp": ...}`` and are
signed with the shared ``jwt_secret``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from src.config import Settings
from src.domain.access import Principal
from src.domain.enums import Role
from src.domain.errors import AuthenticationError


class PasswordHasher:
    def __init__(self, schemes: list[str]):
        self._context = CryptContext(schemes=schemes, deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # unknown or malformed hash format in the store
            return False


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expire_minutes
        )

    def issue(self, principal: Principal, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "id": str(principal.id),
            "role": principal.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Invalid token.") from exc

        try:
            return Principal(id=int(payload["id"]), role=Role(payload["role"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Malformed token payload.") from exc
