"""Unit tests for password hashing and bearer tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.domain.access import Principal
from src.domain.enums import Role
from src.domain.errors import AuthenticationError
from src.infrastructure.security import PasswordHasher, TokenService

from tests.conftest import make_settings


class TestPasswordHasher:
    def setup_method(self):
        self.hasher = PasswordHasher(["pbkdf2_sha256"])

    def test_hash_is_not_plaintext(self):
        hashed = self.hasher.hash("hunter2")
        assert hashed != "hunter2"
        assert self.hasher.verify("hunter2", hashed)

    def test_wrong_password(self):
        assert not self.hasher.verify("nope", self.hasher.hash("hunter2"))

    def test_salted(self):
        assert self.hasher.hash("same") != self.hasher.hash("same")

    @pytest.mark.parametrize("stored", [None, "", "not-a-hash"])
    def test_missing_or_garbage_hash(self, stored):
        assert not self.hasher.verify("hunter2", stored)


class TestTokenService:
    def setup_method(self):
        self.tokens = TokenService("test-secret", "HS256", expire_minutes=60)

    def test_round_trip(self):
        token = self.tokens.issue(Principal(id=12, role=Role.DRIVER))
        principal = self.tokens.decode(token)
        assert principal == Principal(id=12, role=Role.DRIVER)

    def test_payload_shape(self):
        token = self.tokens.issue(Principal(id=3, role=Role.ADMIN))
        payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
        assert payload["id"] == "3"
        assert payload["role"] == "admin"
        assert payload["exp"] - payload["iat"] == 3600

    def test_expired(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = self.tokens.issue(Principal(id=1, role=Role.CUSTOMER), now=issued)
        with pytest.raises(AuthenticationError, match="expired"):
            self.tokens.decode(token)

    def test_wrong_secret(self):
        other = TokenService("other-secret")
        token = other.issue(Principal(id=1, role=Role.CUSTOMER))
        with pytest.raises(AuthenticationError):
            self.tokens.decode(token)

    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            self.tokens.decode("not.a.token")

    def test_unknown_role(self):
        token = jwt.encode(
            {"id": "1", "role": "superuser"}, "test-secret", algorithm="HS256"
        )
        with pytest.raises(AuthenticationError, match="Malformed"):
            self.tokens.decode(token)

    def test_from_settings(self):
        tokens = TokenService.from_settings(make_settings(jwt_expire_minutes=5))
        assert tokens.secret == "test-secret"
        assert tokens.expire_minutes == 5
