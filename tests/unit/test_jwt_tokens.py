"""
Unit tests for the authlib session token issuer.
"""

import time

import pytest
from authlib.jose import jwt

from craftconnect.adapters.tokens.jwt import SEVEN_DAYS_SECONDS, JwtTokenIssuer
from craftconnect.domain.exceptions import InvalidSessionToken
from craftconnect.domain.models import Role


class TestIssue:
    """Tests for JwtTokenIssuer.issue."""

    def test_round_trip_claims(self, tokens: JwtTokenIssuer) -> None:
        claims = tokens.verify(tokens.issue("account-1", Role.PROFESSIONAL))
        assert claims.subject_id == "account-1"
        assert claims.role is Role.PROFESSIONAL

    def test_expires_in_seven_days(self) -> None:
        issuer = JwtTokenIssuer(secret="s")
        payload = jwt.decode(issuer.issue("a", Role.CUSTOMER), "s")
        assert payload["exp"] - payload["iat"] == SEVEN_DAYS_SECONDS
        assert payload["role"] == "customer"
        assert payload["iss"] == "craftconnect"
        assert payload["jti"]

    def test_tokens_are_unique(self, tokens: JwtTokenIssuer) -> None:
        assert tokens.issue("a", Role.CUSTOMER) != tokens.issue("a", Role.CUSTOMER)

    def test_missing_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            JwtTokenIssuer(secret="")


class TestVerify:
    """Tests for JwtTokenIssuer.verify."""

    def test_wrong_secret(self, tokens: JwtTokenIssuer) -> None:
        other = JwtTokenIssuer(secret="another-secret")
        with pytest.raises(InvalidSessionToken):
            tokens.verify(other.issue("a", Role.CUSTOMER))

    def test_expired(self) -> None:
        issuer = JwtTokenIssuer(secret="s", ttl_seconds=-10)
        with pytest.raises(InvalidSessionToken):
            issuer.verify(issuer.issue("a", Role.CUSTOMER))

    def test_garbage(self, tokens: JwtTokenIssuer) -> None:
        with pytest.raises(InvalidSessionToken):
            tokens.verify("not-a-token")

    def test_wrong_issuer(self) -> None:
        foreign = JwtTokenIssuer(secret="s", issuer="someone-else")
        with pytest.raises(InvalidSessionToken):
            JwtTokenIssuer(secret="s").verify(foreign.issue("a", Role.CUSTOMER))

    def test_unknown_role(self) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"alg": "HS256"},
            {"iss": "craftconnect", "sub": "a", "role": "admin", "iat": now, "exp": now + 60},
            "s",
        ).decode()
        with pytest.raises(InvalidSessionToken):
            JwtTokenIssuer(secret="s").verify(token)
