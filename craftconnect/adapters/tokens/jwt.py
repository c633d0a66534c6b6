"""
JWT session token adapter - Implements TokenIssuer protocol.

Signs session claims {sub, role} with a shared secret using authlib's
JOSE implementation. Tokens carry iss/iat/exp and a random jti.
"""

import time

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt

from craftconnect.domain.exceptions import InvalidSessionToken
from craftconnect.domain.models import Role, SessionClaims

SEVEN_DAYS_SECONDS = 7 * 24 * 3600


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via authlib.jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "craftconnect",
        ttl_seconds: int = SEVEN_DAYS_SECONDS,
        leeway_seconds: int = 0,
    ) -> None:
        if not secret:
            raise ValueError("JWT signing secret not configured")
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._ttl_seconds = ttl_seconds
        self._leeway = leeway_seconds

    def issue(self, subject_id: str, role: Role) -> str:
        now = int(time.time())
        header = {"alg": self._algorithm, "typ": "JWT"}
        payload = {
            "iss": self._issuer,
            "sub": subject_id,
            "role": role.value,
            "iat": now,
            "exp": now + self._ttl_seconds,
            "jti": generate_token(16),
        }
        token = jwt.encode(header, payload, self._secret)
        # authlib returns bytes
        return token.decode() if isinstance(token, bytes) else token

    def verify(self, token: str) -> SessionClaims:
        claims_options = {
            "iss": {"essential": True, "value": self._issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = jwt.decode(token, self._secret, claims_options=claims_options)
            claims.validate(leeway=self._leeway)
        except (JoseError, ValueError) as exc:
            raise InvalidSessionToken(str(exc)) from exc

        if claims.header.get("alg") != self._algorithm:
            raise InvalidSessionToken("Disallowed JWT algorithm")

        try:
            role = Role(claims.get("role"))
        except ValueError as exc:
            raise InvalidSessionToken("Unknown role claim") from exc

        return SessionClaims(subject_id=str(claims["sub"]), role=role)
